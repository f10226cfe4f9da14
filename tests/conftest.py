"""Shared fixtures: sample workbooks and a recording engine that needs no Excel."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest
from openpyxl import Workbook


class RecordingEngine:
	"""Engine stand-in that records every automation call."""

	name = "recording"

	def __init__(self, sheets: List[str] | None = None):
		self.sheets = sheets or ["Sheet1"]
		self.calls: List[tuple] = []
		self.entered = 0
		self.exited = 0

	def __enter__(self):
		self.entered += 1
		return self

	def __exit__(self, exc_type, exc_val, exc_tb):
		self.exited += 1

	def open_workbook(self, path):
		self.calls.append(("open_workbook", Path(path)))
		return {"path": Path(path)}

	def open_text(self, path, options: Dict[str, Any]):
		self.calls.append(("open_text", Path(path), options))
		return {"path": Path(path)}

	def sheet_names(self, book):
		return list(self.sheets)

	def save_workbook(self, book, dest, file_format):
		self.calls.append(("save_workbook", Path(dest), file_format.name))
		return Path(dest)

	def save_sheet(self, book, sheet_name, dest, file_format):
		self.calls.append(("save_sheet", sheet_name, Path(dest), file_format.name))
		return Path(dest)

	def export_fixed_format(self, book, dest, publish_format, options):
		self.calls.append(("export_fixed_format", Path(dest), publish_format.name, options))
		return Path(dest)

	def show(self, book):
		self.calls.append(("show",))

	def close_workbook(self, book):
		self.calls.append(("close_workbook",))

	def names(self) -> List[str]:
		return [c[0] for c in self.calls]


@pytest.fixture
def recording_engine() -> RecordingEngine:
	return RecordingEngine(sheets=["Summary", "Data", "Notes"])


@pytest.fixture
def sample_workbook(tmp_path: Path) -> Path:
	"""Two-sheet workbook saved by openpyxl."""
	wb = Workbook()
	ws = wb.active
	ws.title = "Sales"
	ws.append(["region", "amount"])
	ws.append(["north", 10])
	ws.append(["south", 32])
	costs = wb.create_sheet("Costs")
	costs.append(["item", "cost"])
	costs.append(["rent", 1200])
	path = tmp_path / "report.xlsx"
	wb.save(path)
	return path


@pytest.fixture
def tab_text_file(tmp_path: Path) -> Path:
	path = tmp_path / "people.txt"
	path.write_text("name\tage\nAda\t36\nGrace\t45\n", encoding="cp1252")
	return path


@pytest.fixture
def make_recording_engine():
	"""Build a recording engine whose workbook has the given sheet names."""
	return RecordingEngine
