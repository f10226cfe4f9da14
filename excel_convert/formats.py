"""
Excel enumeration codes keyed by human-readable option names.

Codes are the values of the XlFileFormat, XlFixedFormatType,
XlFixedFormatQuality, XlTextQualifier and XlPlatform enumerations that the
Excel object model expects in SaveAs, ExportAsFixedFormat and OpenText.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple, Union

from .errors import UnknownOptionError


@dataclass(frozen=True)
class SpreadsheetFormat:
	name: str
	code: int
	extension: str
	multi_sheet: bool


@dataclass(frozen=True)
class PublishFormat:
	name: str
	code: int
	extension: str


def _fmt(name: str, code: int, extension: str, multi_sheet: bool) -> Tuple[str, SpreadsheetFormat]:
	return name, SpreadsheetFormat(name, code, extension, multi_sheet)


SPREADSHEET_FORMATS: Dict[str, SpreadsheetFormat] = dict([
	# Workbook formats, all sheets in one file
	_fmt("xlsx", 51, ".xlsx", True),
	_fmt("xlsm", 52, ".xlsm", True),
	_fmt("xlsb", 50, ".xlsb", True),
	_fmt("xls", 56, ".xls", True),
	_fmt("xltx", 54, ".xltx", True),
	_fmt("xltm", 53, ".xltm", True),
	_fmt("xlt", 17, ".xlt", True),
	_fmt("ods", 60, ".ods", True),
	_fmt("xml", 46, ".xml", True),
	_fmt("html", 44, ".htm", True),
	_fmt("mhtml", 45, ".mht", True),
	# Text formats, Excel only writes the active sheet
	_fmt("csv", 6, ".csv", False),
	_fmt("csv-utf8", 62, ".csv", False),
	_fmt("csv-mac", 22, ".csv", False),
	_fmt("csv-msdos", 24, ".csv", False),
	_fmt("csv-windows", 23, ".csv", False),
	_fmt("txt", -4158, ".txt", False),
	_fmt("text-mac", 19, ".txt", False),
	_fmt("text-msdos", 21, ".txt", False),
	_fmt("text-windows", 20, ".txt", False),
	_fmt("unicode-text", 42, ".txt", False),
	_fmt("prn", 36, ".prn", False),
	_fmt("dif", 9, ".dif", False),
	_fmt("sylk", 2, ".slk", False),
])

PUBLISH_FORMATS: Dict[str, PublishFormat] = {
	"pdf": PublishFormat("pdf", 0, ".pdf"),
	"xps": PublishFormat("xps", 1, ".xps"),
}

PUBLISH_QUALITY: Dict[str, int] = {
	"standard": 0,
	"minimum": 1,
}

TEXT_QUALIFIERS: Dict[str, int] = {
	"double-quote": 1,
	"single-quote": 2,
	"none": -4142,
}

# Character each OpenText delimiter flag stands for
DELIMITERS: Dict[str, str] = {
	"tab": "\t",
	"semicolon": ";",
	"comma": ",",
	"space": " ",
}

TEXT_ORIGINS: Dict[str, int] = {
	"macintosh": 1,
	"windows": 2,
	"msdos": 3,
	"utf-8": 65001,
}

# xlDelimited
TEXT_PARSING_DELIMITED = 1


def normalize_name(name: str) -> str:
	return "-".join(str(name).strip().lower().replace("_", " ").replace("-", " ").split())


def _lookup(table: Dict, kind: str, name: str):
	key = normalize_name(name)
	if key not in table:
		raise UnknownOptionError(kind, name, table.keys())
	return table[key]


def spreadsheet_format(name: str) -> SpreadsheetFormat:
	return _lookup(SPREADSHEET_FORMATS, "spreadsheet format", name)


def publish_format(name: str) -> PublishFormat:
	return _lookup(PUBLISH_FORMATS, "publish format", name)


def publish_quality(name: str) -> int:
	return _lookup(PUBLISH_QUALITY, "publish quality", name)


def text_qualifier(name: str) -> int:
	return _lookup(TEXT_QUALIFIERS, "text qualifier", name)


def qualifier_char(name: str) -> str:
	"""Quote character for a text qualifier name, empty for 'none'"""
	code = text_qualifier(name)
	return {1: '"', 2: "'"}.get(code, "")


def text_origin(origin: Union[str, int]) -> int:
	"""Resolve an origin name, or pass an integer code page through"""
	if isinstance(origin, int):
		return origin
	if str(origin).strip().isdigit():
		return int(origin)
	return _lookup(TEXT_ORIGINS, "text origin", origin)


def delimiter_flags(delimiters: Iterable[str]) -> Dict[str, bool]:
	"""
	Translate delimiter names into the boolean flags OpenText takes.

	Args:
		delimiters: names from DELIMITERS, e.g. ["tab", "comma"]

	Returns:
		Dict with one key per known delimiter, True where selected
	"""
	selected = {normalize_name(d) for d in delimiters}
	unknown = selected - DELIMITERS.keys()
	if unknown:
		raise UnknownOptionError("delimiter", sorted(unknown)[0], DELIMITERS.keys())
	return {name: name in selected for name in DELIMITERS}


def format_for_extension(extension: str) -> SpreadsheetFormat:
	"""First format in the table written with the given extension"""
	ext = extension.lower()
	if not ext.startswith("."):
		ext = "." + ext
	matches = [f for f in SPREADSHEET_FORMATS.values() if f.extension == ext]
	if not matches:
		raise UnknownOptionError("file extension", extension, {f.extension for f in SPREADSHEET_FORMATS.values()})
	return matches[0]
