#!/usr/bin/env python3
"""
Excel automation engine using xlwings
Drives a live Excel instance to open, save, publish and display workbooks
"""

import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import xlwings as xw

from .errors import AutomationError
from .formats import PublishFormat, SpreadsheetFormat, TEXT_PARSING_DELIMITED


class XlwingsEngine:
	"""Run conversions inside Excel through xlwings"""

	name = "xlwings"

	def __init__(self, visible: bool = False):
		"""
		Args:
			visible (bool): Show the Excel window while working
		"""
		self.visible = visible
		self.app = None
		self._keep_open = False
		self._staging_dirs: List[Path] = []

	def __enter__(self):
		"""Context manager entry"""
		self.start()
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		"""Context manager exit"""
		self.quit()

	def start(self):
		"""Start a dedicated Excel instance"""
		try:
			self.app = xw.App(visible=self.visible, add_book=False)
			# SaveAs over an existing file would otherwise block on a prompt
			self.app.display_alerts = False
		except Exception as e:
			print(f"Error starting Excel: {e}")
			raise

	def quit(self):
		"""Quit Excel unless a workbook was handed over to the user"""
		try:
			if self.app and not self._keep_open:
				self.app.quit()
		except Exception as e:
			print(f"Error closing Excel: {e}")
		finally:
			self.app = None
			# A workbook left open for viewing still holds its staged text file
			if not self._keep_open:
				for staged in self._staging_dirs:
					shutil.rmtree(staged, ignore_errors=True)
			self._staging_dirs = []

	def open_workbook(self, path: Path):
		try:
			book = self.app.books.open(str(path), update_links=False, read_only=True)
		except Exception as e:
			print(f"Error opening workbook: {e}")
			raise AutomationError("open", path, e) from e
		print(f"Successfully opened: {Path(path).name}")
		return book

	def _stage_text_source(self, path: Path) -> Path:
		# Excel ignores OpenText parsing options for files named *.csv
		if path.suffix.lower() != ".csv":
			return path
		staging = Path(tempfile.mkdtemp(prefix="excel_convert_"))
		self._staging_dirs.append(staging)
		staged = staging / f"{path.stem}.txt"
		shutil.copyfile(path, staged)
		return staged

	def open_text(self, path: Path, options: Dict[str, Any]):
		"""
		Open a delimited text file with Workbooks.OpenText

		Args:
			path (Path): Text file to parse
			options (dict): Resolved OpenText arguments (see commands.import_text)

		Returns:
			xlwings Book for the parsed text
		"""
		source = self._stage_text_source(Path(path))
		flags = options["delimiters"]
		kwargs: Dict[str, Any] = {
			"Filename": str(source),
			"Origin": options["origin"],
			"StartRow": options["start_row"],
			"DataType": TEXT_PARSING_DELIMITED,
			"TextQualifier": options["text_qualifier"],
			"ConsecutiveDelimiter": options["consecutive_delimiters"],
			"Tab": flags["tab"],
			"Semicolon": flags["semicolon"],
			"Comma": flags["comma"],
			"Space": flags["space"],
			"Other": bool(options.get("other_delimiter")),
		}
		if options.get("other_delimiter"):
			kwargs["OtherChar"] = options["other_delimiter"]
		if options.get("decimal_separator"):
			kwargs["DecimalSeparator"] = options["decimal_separator"]
		if options.get("thousands_separator"):
			kwargs["ThousandsSeparator"] = options["thousands_separator"]
		try:
			self.app.api.Workbooks.OpenText(**kwargs)
			book = self.app.books.active
		except Exception as e:
			print(f"Error opening text file: {e}")
			raise AutomationError("open text file", path, e) from e
		print(f"Successfully opened: {Path(path).name}")
		return book

	def sheet_names(self, book) -> List[str]:
		return [sheet.name for sheet in book.sheets]

	def save_workbook(self, book, dest: Path, file_format: SpreadsheetFormat) -> Path:
		try:
			book.api.SaveAs(str(dest), FileFormat=file_format.code)
		except Exception as e:
			print(f"Error saving workbook: {e}")
			raise AutomationError("save", dest, e) from e
		print(f"Saved: {dest}")
		return dest

	def save_sheet(self, book, sheet_name: str, dest: Path, file_format: SpreadsheetFormat) -> Path:
		"""Copy one sheet into a new workbook and save that workbook alone"""
		try:
			# Worksheet.Copy with no arguments creates a new workbook holding the copy
			book.sheets[sheet_name].api.Copy()
			single = self.app.books.active
		except Exception as e:
			print(f"Error copying sheet '{sheet_name}': {e}")
			raise AutomationError("copy sheet", sheet_name, e) from e
		try:
			return self.save_workbook(single, dest, file_format)
		finally:
			self.close_workbook(single)

	def export_fixed_format(self, book, dest: Path, publish_format: PublishFormat, options: Dict[str, Any]) -> Path:
		"""
		Publish the workbook with Workbook.ExportAsFixedFormat

		Args:
			book: xlwings Book
			dest (Path): Output file
			publish_format (PublishFormat): pdf or xps
			options (dict): quality, include_doc_properties, ignore_print_areas,
				from_page, to_page, open_after_publish

		Returns:
			dest
		"""
		kwargs: Dict[str, Any] = {
			"Type": publish_format.code,
			"Filename": str(dest),
			"Quality": options["quality"],
			"IncludeDocProperties": options["include_doc_properties"],
			"IgnorePrintAreas": options["ignore_print_areas"],
			"OpenAfterPublish": options["open_after_publish"],
		}
		if options.get("from_page") is not None:
			kwargs["From"] = options["from_page"]
		if options.get("to_page") is not None:
			kwargs["To"] = options["to_page"]
		try:
			book.api.ExportAsFixedFormat(**kwargs)
		except Exception as e:
			print(f"Error publishing workbook: {e}")
			raise AutomationError("publish", dest, e) from e
		print(f"Published: {dest}")
		return dest

	def show(self, book) -> None:
		"""Leave Excel running with the workbook in front of the user"""
		self.app.visible = True
		self.app.display_alerts = True
		book.activate()
		self._keep_open = True

	def close_workbook(self, book: Optional[Any]) -> None:
		if book is None or self._keep_open:
			return
		try:
			book.close()
		except Exception as e:
			print(f"Error closing workbook: {e}")
