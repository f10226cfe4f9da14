"""Unit tests for record buffering."""

from __future__ import annotations

import csv
from pathlib import Path

import pytest

from excel_convert.errors import NoRecordsError
from excel_convert.records import RecordBuffer


def _read(path: Path) -> list[list[str]]:
	with path.open("r", encoding="utf-8-sig", newline="") as f:
		return list(csv.reader(f, delimiter="\t"))


def test_mapping_columns_are_union_in_first_seen_order(tmp_path: Path) -> None:
	"""Later records may add columns; missing values are written empty."""
	buffer = RecordBuffer().extend([
		{"name": "Ada", "age": 36},
		{"name": "Grace", "team": "Navy"},
	])
	rows = _read(buffer.flush(tmp_path / "out.txt"))
	assert rows == [
		["name", "age", "team"],
		["Ada", "36", ""],
		["Grace", "", "Navy"],
	]


def test_fixed_columns_select_and_order_fields(tmp_path: Path) -> None:
	"""A caller-supplied header limits and orders mapping fields."""
	buffer = RecordBuffer(columns=["age", "name"]).extend([{"name": "Ada", "age": 36, "extra": 1}])
	assert _read(buffer.flush(tmp_path / "out.txt")) == [["age", "name"], ["36", "Ada"]]


def test_sequence_rows_get_generated_header(tmp_path: Path) -> None:
	"""Positional rows without a header get column1..N, short rows are padded."""
	buffer = RecordBuffer().extend([(1, 2, 3), [4], "scalar"])
	assert len(buffer) == 3
	assert _read(buffer.flush(tmp_path / "out.txt")) == [
		["column1", "column2", "column3"],
		["1", "2", "3"],
		["4", "", ""],
		["scalar", "", ""],
	]


def test_list_values_are_joined(tmp_path: Path) -> None:
	"""Nested lists are flattened into one cell."""
	buffer = RecordBuffer().extend([{"tags": ["a", "b"], "note": None}])
	assert _read(buffer.flush(tmp_path / "out.txt"))[1] == ["a, b", ""]


def test_flush_with_custom_delimiter(tmp_path: Path) -> None:
	"""The delimiter is configurable."""
	path = RecordBuffer().extend([{"a": 1, "b": 2}]).flush(tmp_path / "out.csv", delimiter=",")
	assert path.read_text(encoding="utf-8-sig").splitlines() == ["a,b", "1,2"]


def test_empty_buffer_cannot_flush(tmp_path: Path) -> None:
	"""Flushing nothing is an error and creates no file."""
	with pytest.raises(NoRecordsError):
		RecordBuffer().flush(tmp_path / "out.txt")
	assert not (tmp_path / "out.txt").exists()
