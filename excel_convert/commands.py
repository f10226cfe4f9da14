"""
The four conversion commands.

Each command validates its paths, resolves option names to Excel codes,
opens an engine session, performs one or two automation calls and closes
the session again.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from . import config
from .errors import SameFileError, UnknownOptionError, UnsupportedOperationError
from .formats import (
	delimiter_flags,
	format_for_extension,
	publish_format as resolve_publish_format,
	publish_quality,
	qualifier_char,
	spreadsheet_format,
	text_origin,
	text_qualifier as resolve_text_qualifier,
)
from .paths import (
	PathLike,
	check_destination,
	check_source,
	missing_sheets,
	output_path,
	select_sheets,
	sheet_output_paths,
)
from .records import RecordBuffer


def get_engine(engine: Optional[str] = None, visible: Optional[bool] = None):
	"""
	Create an engine session by name

	Args:
		engine (str, optional): 'xlwings' or 'openpyxl'. Defaults to config.default_engine().
		visible (bool, optional): Show Excel while working. Defaults to config.app_visible().

	Returns:
		An unstarted engine; use it as a context manager
	"""
	name = (engine or config.default_engine()).lower()
	if visible is None:
		visible = config.app_visible()
	# Imported lazily so the openpyxl engine works where xlwings cannot start Excel
	if name == "xlwings":
		from .xlwings_engine import XlwingsEngine
		return XlwingsEngine(visible=visible)
	if name == "openpyxl":
		from .openpyxl_engine import OpenpyxlEngine
		return OpenpyxlEngine(visible=visible)
	raise UnknownOptionError("engine", name, config.ENGINES)


def _session(engine):
	if engine is None or isinstance(engine, str):
		return get_engine(engine)
	return engine


def _check_not_source(source: Path, target: Path) -> None:
	if target.resolve() == source.resolve():
		raise SameFileError(target)


def convert_workbook(
	source: PathLike,
	destination: Optional[PathLike] = None,
	file_format: str = "xlsx",
	sheets: Optional[Iterable[str]] = None,
	engine=None,
) -> List[Path]:
	"""
	Convert a workbook to another spreadsheet or text format.

	Formats that hold several sheets receive the whole workbook in one file.
	Text formats only hold one sheet, so every selected sheet is written to
	<stem>_<sheet><ext>.

	Args:
		source: Workbook to convert
		destination: Output directory; defaults to the source's directory
		file_format: Name from formats.SPREADSHEET_FORMATS
		sheets: Sheet names to export when writing one file per sheet
		engine: Engine name or engine instance

	Returns:
		Paths of the written files
	"""
	src = check_source(source)
	dest_dir = check_destination(destination)
	fmt = spreadsheet_format(file_format)
	wanted = list(sheets) if sheets is not None else None

	if fmt.multi_sheet:
		target = output_path(src, dest_dir, fmt.extension)
		_check_not_source(src, target)

	written: List[Path] = []
	with _session(engine) as session:
		book = session.open_workbook(src)
		try:
			if fmt.multi_sheet:
				written.append(session.save_workbook(book, target, fmt))
			else:
				names = session.sheet_names(book)
				if wanted is not None:
					for name in missing_sheets(names, wanted):
						print(f"Sheet not found, skipped: {name}")
				targets = sheet_output_paths(src, dest_dir, select_sheets(names, wanted), fmt.extension)
				for name, sheet_target in targets.items():
					_check_not_source(src, sheet_target)
					written.append(session.save_sheet(book, name, sheet_target, fmt))
		finally:
			session.close_workbook(book)
	return written


def publish_workbook(
	source: PathLike,
	destination: Optional[PathLike] = None,
	publish_format: str = "pdf",
	quality: str = "standard",
	include_doc_properties: bool = True,
	ignore_print_areas: bool = False,
	from_page: Optional[int] = None,
	to_page: Optional[int] = None,
	open_after_publish: bool = False,
	engine=None,
) -> Path:
	"""Publish a workbook as PDF or XPS through ExportAsFixedFormat"""
	src = check_source(source)
	dest_dir = check_destination(destination)
	fmt = resolve_publish_format(publish_format)
	for label, page in (("from_page", from_page), ("to_page", to_page)):
		if page is not None and page < 1:
			raise ValueError(f"{label} must be 1 or greater, got {page}")
	if from_page is not None and to_page is not None and from_page > to_page:
		raise ValueError(f"from_page ({from_page}) is after to_page ({to_page})")

	options: Dict[str, Any] = {
		"quality": publish_quality(quality),
		"include_doc_properties": bool(include_doc_properties),
		"ignore_print_areas": bool(ignore_print_areas),
		"from_page": from_page,
		"to_page": to_page,
		"open_after_publish": bool(open_after_publish),
	}
	target = output_path(src, dest_dir, fmt.extension)
	with _session(engine) as session:
		book = session.open_workbook(src)
		try:
			return session.export_fixed_format(book, target, fmt, options)
		finally:
			session.close_workbook(book)


def text_options(
	delimiters: Sequence[str] = ("tab",),
	other_delimiter: Optional[str] = None,
	text_qualifier: str = "double-quote",
	consecutive_delimiters: bool = False,
	start_row: int = 1,
	origin="windows",
	decimal_separator: Optional[str] = None,
	thousands_separator: Optional[str] = None,
) -> Dict[str, Any]:
	"""Resolve OpenText option names into the values engines consume"""
	if other_delimiter is not None and len(other_delimiter) != 1:
		raise ValueError(f"other_delimiter must be a single character, got {other_delimiter!r}")
	if start_row < 1:
		raise ValueError(f"start_row must be 1 or greater, got {start_row}")
	return {
		"delimiters": delimiter_flags(delimiters),
		"other_delimiter": other_delimiter,
		"text_qualifier": resolve_text_qualifier(text_qualifier),
		"quote_char": qualifier_char(text_qualifier),
		"consecutive_delimiters": bool(consecutive_delimiters),
		"start_row": int(start_row),
		"origin": text_origin(origin),
		"decimal_separator": decimal_separator,
		"thousands_separator": thousands_separator,
	}


def import_text(
	source: PathLike,
	destination: Optional[PathLike] = None,
	file_format: str = "xlsx",
	delimiters: Sequence[str] = ("tab",),
	other_delimiter: Optional[str] = None,
	text_qualifier: str = "double-quote",
	consecutive_delimiters: bool = False,
	start_row: int = 1,
	origin="windows",
	decimal_separator: Optional[str] = None,
	thousands_separator: Optional[str] = None,
	view: bool = False,
	engine=None,
) -> Optional[Path]:
	"""
	Open a delimited text file in Excel and save it as a workbook

	Args:
		source: Text file to parse
		destination: Output directory; defaults to the source's directory
		file_format: Name from formats.SPREADSHEET_FORMATS
		delimiters: Names from formats.DELIMITERS
		other_delimiter: One extra delimiter character
		text_qualifier: 'double-quote', 'single-quote' or 'none'
		consecutive_delimiters: Treat runs of delimiters as one
		start_row: First line to import (1-based)
		origin: 'windows', 'msdos', 'macintosh', 'utf-8' or a code page
		decimal_separator, thousands_separator: Number parsing overrides
		view: Leave the workbook open in a visible Excel instead of saving
		engine: Engine name or engine instance

	Returns:
		The saved workbook path, or None when viewing
	"""
	src = check_source(source)
	dest_dir = check_destination(destination)
	fmt = spreadsheet_format(file_format)
	options = text_options(
		delimiters, other_delimiter, text_qualifier, consecutive_delimiters,
		start_row, origin, decimal_separator, thousands_separator,
	)
	target = None if view else output_path(src, dest_dir, fmt.extension)
	return _open_text(src, options, fmt, target, engine)


def _open_text(src: Path, options: Dict[str, Any], fmt, target: Optional[Path], engine) -> Optional[Path]:
	"""Open src with OpenText, then save it to target or show it when target is None"""
	view = target is None
	if not view:
		_check_not_source(src, target)
	with _session(engine) as session:
		book = session.open_text(src, options)
		if view:
			try:
				session.show(book)
			except UnsupportedOperationError:
				session.close_workbook(book)
				raise
			return None
		try:
			return session.save_workbook(book, target, fmt)
		finally:
			session.close_workbook(book)


def out_excel(
	records: Iterable[Any],
	output: Optional[PathLike] = None,
	file_format: Optional[str] = None,
	columns: Optional[Sequence[str]] = None,
	engine=None,
) -> Optional[Path]:
	"""
	Send tabular records through Excel.

	Records are buffered, written to a temporary tab-delimited file and
	opened the way import_text opens text. Without an output path the sheet
	is shown in Excel; with one it is saved there, in file_format or the
	format implied by the output extension.
	"""
	buffer = RecordBuffer(columns).extend(records)
	if output is not None:
		out_path = Path(output)
		# Excel needs absolute paths in SaveAs
		out_path = check_destination(out_path.parent) / out_path.name
		fmt = spreadsheet_format(file_format) if file_format else format_for_extension(out_path.suffix or ".xlsx")
		if not out_path.suffix:
			out_path = out_path.with_suffix(fmt.extension)

	temp_root = config.temp_dir()
	check_destination(temp_root)
	# Named after the output so the sheet takes a meaningful title
	stem = out_path.stem if output is not None else "records"
	temp_file = _unique_temp_path(temp_root, stem, avoid=out_path if output is not None else None)
	buffer.flush(temp_file, delimiter="\t")
	print(f"Wrote {len(buffer)} records to {temp_file}")

	try:
		options = text_options(delimiters=("tab",), origin="utf-8")
		if output is None:
			result = _open_text(check_source(temp_file), options, None, None, engine)
		else:
			result = _open_text(check_source(temp_file), options, fmt, out_path, engine)
	except Exception:
		temp_file.unlink(missing_ok=True)
		raise
	# Excel keeps the text file open while the sheet is on screen
	if output is not None:
		temp_file.unlink(missing_ok=True)
	return result


def _unique_temp_path(directory: Path, stem: str, avoid: Optional[Path] = None) -> Path:
	candidate = directory / f"{stem}.txt"
	counter = 1
	while candidate.exists() or (avoid is not None and candidate.resolve() == avoid):
		candidate = directory / f"{stem}_{counter}.txt"
		counter += 1
	return candidate
