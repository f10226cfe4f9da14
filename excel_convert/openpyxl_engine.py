#!/usr/bin/env python3
"""
OpenPyXL-based engine for cross-platform environments without local Excel.
Provides the same session API as XlwingsEngine using openpyxl.
Limitations:
- Only OpenXML workbooks (.xlsx/.xlsm/.xltx/.xltm) can be read
- Text outputs carry cached cell values; formulas are not recalculated
- Publishing to PDF/XPS and interactive viewing need a live Excel
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from openpyxl import Workbook, load_workbook
from openpyxl.chartsheet import Chartsheet
from openpyxl.worksheet.worksheet import Worksheet

from .errors import AutomationError, UnsupportedOperationError
from .formats import DELIMITERS, PublishFormat, SpreadsheetFormat

READABLE_SUFFIXES = {".xlsx", ".xlsm", ".xltx", ".xltm"}
MACRO_FORMATS = {"xlsm", "xltm"}
TEMPLATE_FORMATS = {"xltx", "xltm"}

# Delimiter and encoding of each text format, matching what Excel writes
TEXT_WRITERS: Dict[str, Tuple[str, str]] = {
	"csv": (",", "cp1252"),
	"csv-utf8": (",", "utf-8-sig"),
	"csv-windows": (",", "cp1252"),
	"csv-msdos": (",", "cp437"),
	"csv-mac": (",", "mac_roman"),
	"txt": ("\t", "cp1252"),
	"text-windows": ("\t", "cp1252"),
	"text-msdos": ("\t", "cp437"),
	"text-mac": ("\t", "mac_roman"),
	"unicode-text": ("\t", "utf-16"),
}

# Excel text origins (XlPlatform / code pages) to Python codecs
ORIGIN_ENCODINGS: Dict[int, str] = {
	1: "mac_roman",
	2: "cp1252",
	3: "cp437",
	65001: "utf-8-sig",
}

MAX_SHEET_TITLE = 31


class OpenpyxlBook:
	"""An open workbook plus the cached-values view used for text output"""

	def __init__(self, path: Optional[Path], workbook: Workbook):
		self.path = path
		self.workbook = workbook
		self._values: Optional[Workbook] = None

	def values(self) -> Workbook:
		# Formula cells only carry their last computed value in a data_only load
		if self.path is None:
			return self.workbook
		if self._values is None:
			self._values = load_workbook(filename=str(self.path), data_only=True)
		return self._values

	def close(self) -> None:
		for wb in (self.workbook, self._values):
			try:
				if wb is not None:
					wb.close()
			except Exception:
				pass


def encoding_for_origin(origin: int) -> str:
	if origin in ORIGIN_ENCODINGS:
		return ORIGIN_ENCODINGS[origin]
	return f"cp{origin}"


def split_line(line: str, delimiters: str, quote: str, consecutive: bool) -> List[str]:
	"""Split one line on any of several delimiter characters, honouring quotes"""
	fields: List[str] = []
	current: List[str] = []
	in_quotes = False
	i = 0
	while i < len(line):
		ch = line[i]
		if quote and ch == quote:
			if in_quotes and i + 1 < len(line) and line[i + 1] == quote:
				current.append(quote)
				i += 1
			else:
				in_quotes = not in_quotes
		elif ch in delimiters and not in_quotes:
			fields.append("".join(current))
			current = []
			if consecutive:
				while i + 1 < len(line) and line[i + 1] in delimiters:
					i += 1
		else:
			current.append(ch)
		i += 1
	fields.append("".join(current))
	return fields


def coerce_value(text: str, decimal_separator: Optional[str] = None, thousands_separator: Optional[str] = None) -> Any:
	"""Turn numeric text into int/float the way Excel's General format would"""
	candidate = text.strip()
	if not candidate:
		return None
	if thousands_separator:
		candidate = candidate.replace(thousands_separator, "")
	if decimal_separator and decimal_separator != ".":
		candidate = candidate.replace(decimal_separator, ".")
	# int() and float() accept digit-group underscores, Excel does not
	if "_" in candidate:
		return text
	try:
		return int(candidate)
	except ValueError:
		pass
	try:
		number = float(candidate)
	except ValueError:
		return text
	# inf/nan are text to Excel
	if number != number or number in (float("inf"), float("-inf")):
		return text
	return number


class OpenpyxlEngine:
	"""Convert workbooks with openpyxl (cross-platform)."""

	name = "openpyxl"

	def __init__(self, visible: bool = False):
		self.visible = visible

	def __enter__(self):
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		pass

	def open_workbook(self, path: Path) -> OpenpyxlBook:
		path = Path(path)
		if path.suffix.lower() not in READABLE_SUFFIXES:
			raise UnsupportedOperationError(
				f"The openpyxl engine cannot read '{path.suffix}' files; use the xlwings engine"
			)
		keep_vba = path.suffix.lower() in {".xlsm", ".xltm"}
		try:
			wb = load_workbook(filename=str(path), keep_vba=keep_vba)
		except Exception as e:
			raise AutomationError("open", path, e) from e
		print(f"Successfully opened: {path.name}")
		return OpenpyxlBook(path, wb)

	def _read_rows(self, path: Path, options: Dict[str, Any]) -> List[List[str]]:
		flags = options["delimiters"]
		delimiters = "".join(DELIMITERS[name] for name, on in flags.items() if on)
		if options.get("other_delimiter"):
			delimiters += options["other_delimiter"]
		quote = options["quote_char"]
		encoding = encoding_for_origin(options["origin"])
		with path.open("r", encoding=encoding, errors="replace", newline="") as f:
			text = f.read()
		lines = io.StringIO(text, newline="")
		for _ in range(max(options["start_row"], 1) - 1):
			lines.readline()
		if not delimiters:
			# No delimiter selected: each line is one field
			return [[line.rstrip("\r\n")] for line in lines]
		if len(delimiters) == 1 and not options["consecutive_delimiters"]:
			if quote:
				reader = csv.reader(lines, delimiter=delimiters, quotechar=quote)
			else:
				reader = csv.reader(lines, delimiter=delimiters, quoting=csv.QUOTE_NONE)
			return [row for row in reader]
		rows = []
		for line in lines:
			line = line.rstrip("\r\n")
			rows.append(split_line(line, delimiters, quote, options["consecutive_delimiters"]))
		return rows

	def open_text(self, path: Path, options: Dict[str, Any]) -> OpenpyxlBook:
		path = Path(path)
		try:
			rows = self._read_rows(path, options)
		except (OSError, LookupError, csv.Error) as e:
			raise AutomationError("open text file", path, e) from e
		wb = Workbook()
		ws = wb.active
		ws.title = path.stem[:MAX_SHEET_TITLE] or "Sheet1"
		for row in rows:
			ws.append([
				coerce_value(v, options.get("decimal_separator"), options.get("thousands_separator"))
				for v in row
			])
		print(f"Successfully opened: {path.name}")
		return OpenpyxlBook(None, wb)

	def sheet_names(self, book: OpenpyxlBook) -> List[str]:
		# Chart sheets hold no cells; Excel's Worksheets collection leaves them out too
		names = []
		for name in book.workbook.sheetnames:
			if isinstance(book.workbook[name], Chartsheet):
				print(f"Chart sheet has no cells, skipped: {name}")
				continue
			names.append(name)
		return names

	def _write_text(self, ws: Worksheet, dest: Path, file_format: SpreadsheetFormat) -> None:
		if file_format.name not in TEXT_WRITERS:
			raise UnsupportedOperationError(
				f"The openpyxl engine cannot write '{file_format.name}'; use the xlwings engine"
			)
		if not isinstance(ws, Worksheet):
			raise UnsupportedOperationError(f"Sheet '{ws.title}' has no cells to write")
		delimiter, encoding = TEXT_WRITERS[file_format.name]
		with dest.open("w", newline="", encoding=encoding, errors="replace") as f:
			writer = csv.writer(f, delimiter=delimiter)
			for row in ws.iter_rows(values_only=True):
				writer.writerow(["" if v is None else v for v in row])

	def save_workbook(self, book: OpenpyxlBook, dest: Path, file_format: SpreadsheetFormat) -> Path:
		dest = Path(dest)
		if not file_format.multi_sheet:
			# Like Excel, a text format only receives the active sheet
			self._write_text(book.values().active, dest, file_format)
			print(f"Saved: {dest}")
			return dest
		writable = {"xlsx", "xltx"}
		if book.workbook.vba_archive is not None:
			writable |= MACRO_FORMATS
		if file_format.name not in writable:
			raise UnsupportedOperationError(
				f"The openpyxl engine cannot write '{file_format.name}' from this workbook; use the xlwings engine"
			)
		# openpyxl picks the macro content type whenever a VBA archive is attached
		if file_format.name not in MACRO_FORMATS:
			book.workbook.vba_archive = None
		book.workbook.template = file_format.name in TEMPLATE_FORMATS
		try:
			book.workbook.save(str(dest))
		except Exception as e:
			print(f"Error saving workbook: {e}")
			raise AutomationError("save", dest, e) from e
		print(f"Saved: {dest}")
		return dest

	def save_sheet(self, book: OpenpyxlBook, sheet_name: str, dest: Path, file_format: SpreadsheetFormat) -> Path:
		dest = Path(dest)
		self._write_text(book.values()[sheet_name], dest, file_format)
		print(f"Saved: {dest}")
		return dest

	def export_fixed_format(self, book: OpenpyxlBook, dest: Path, publish_format: PublishFormat, options: Dict[str, Any]) -> Path:
		raise UnsupportedOperationError(
			f"Publishing to {publish_format.name.upper()} needs Excel; use the xlwings engine"
		)

	def show(self, book: OpenpyxlBook) -> None:
		raise UnsupportedOperationError("Viewing a workbook needs Excel; use the xlwings engine")

	def close_workbook(self, book: Optional[OpenpyxlBook]) -> None:
		if book is not None:
			book.close()
