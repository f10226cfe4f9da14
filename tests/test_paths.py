"""Unit tests for output naming and sheet selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from excel_convert.errors import DestinationNotFoundError, SourceNotFoundError
from excel_convert.paths import (
	check_destination,
	check_source,
	missing_sheets,
	output_path,
	sanitize_sheet_name,
	select_sheets,
	sheet_output_path,
	sheet_output_paths,
)


def test_output_path_replaces_extension_beside_source() -> None:
	"""Without a destination the output sits next to the source."""
	assert output_path(Path("/data/report.xls"), None, ".xlsx") == Path("/data/report.xlsx")


def test_output_path_uses_destination_directory() -> None:
	"""With a destination only the source file name is kept."""
	assert output_path(Path("/data/report.xls"), Path("/out"), ".pdf") == Path("/out/report.pdf")


def test_output_path_keeps_inner_dots() -> None:
	"""Only the last extension is replaced."""
	assert output_path(Path("/data/q1.final.xlsx"), None, ".csv") == Path("/data/q1.final.csv")


def test_sheet_output_path_naming() -> None:
	"""Per-sheet files are named <stem>_<sheet><ext>."""
	assert sheet_output_path(Path("/data/report.xlsx"), None, "Sales", ".csv") == Path("/data/report_Sales.csv")
	assert sheet_output_path(Path("/data/report.xlsx"), Path("/out"), "Q1 Costs", ".txt") == Path("/out/report_Q1 Costs.txt")


def test_sheet_names_lose_characters_invalid_in_file_names() -> None:
	"""Characters a file system rejects become underscores."""
	assert sanitize_sheet_name('a:b"c') == "a_b_c"
	assert sanitize_sheet_name("   ") == "sheet"


def test_select_sheets_filters_and_keeps_workbook_order() -> None:
	"""Requested sheets come back in workbook order, unknown names are dropped."""
	names = ["Summary", "Data", "Notes"]
	assert select_sheets(names) == names
	assert select_sheets(names, ["notes", "Summary", "Missing"]) == ["Summary", "Notes"]
	assert select_sheets(names, []) == []
	assert missing_sheets(names, ["notes", "Missing"]) == ["Missing"]


def test_check_source_and_destination(tmp_path: Path) -> None:
	"""Missing inputs raise file-not-found errors with the path."""
	existing = tmp_path / "book.xlsx"
	existing.write_bytes(b"")
	assert check_source(existing) == existing.resolve()
	assert check_destination(None) is None
	assert check_destination(tmp_path) == tmp_path.resolve()
	with pytest.raises(SourceNotFoundError):
		check_source(tmp_path / "nope.xlsx")
	with pytest.raises(SourceNotFoundError):
		check_source(tmp_path)
	with pytest.raises(DestinationNotFoundError) as excinfo:
		check_destination(tmp_path / "missing")
	assert isinstance(excinfo.value, FileNotFoundError)


def test_sheet_output_paths_never_collide() -> None:
	"""Names that sanitise alike get numbered instead of overwriting each other."""
	paths = sheet_output_paths(Path("/data/report.xlsx"), None, ["a|b", "a_b", "A_B", "c"], ".csv")
	assert paths == {
		"a|b": Path("/data/report_a_b.csv"),
		"a_b": Path("/data/report_a_b_2.csv"),
		"A_B": Path("/data/report_A_B_3.csv"),
		"c": Path("/data/report_c.csv"),
	}
