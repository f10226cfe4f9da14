"""Unit tests for CLI wiring."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from excel_convert import cli


def test_convert_command_passes_options(monkeypatch, capsys) -> None:
	"""convert should forward source, destination, format, sheets and engine."""
	captured = {}

	def _fake_convert(source, destination, file_format, sheets, engine=None):
		captured.update(source=source, destination=destination, file_format=file_format, sheets=sheets, engine=engine)
		return [Path("out/book_A.csv")]

	monkeypatch.setattr(cli, "convert_workbook", _fake_convert)
	exit_code = cli.main(["--engine", "openpyxl", "convert", "book.xlsx", "-d", "out", "-f", "csv", "-s", "A", "-s", "B"])
	out = capsys.readouterr().out

	assert exit_code == 0
	assert captured == {
		"source": "book.xlsx",
		"destination": "out",
		"file_format": "csv",
		"sheets": ["A", "B"],
		"engine": "openpyxl",
	}
	assert "Output file: " in out


def test_publish_command_maps_flags(monkeypatch, capsys) -> None:
	"""publish flags should become keyword options."""
	captured = {}

	def _fake_publish(source, destination, **kwargs):
		captured.update(kwargs)
		return Path("book.pdf")

	monkeypatch.setattr(cli, "publish_workbook", _fake_publish)
	exit_code = cli.main(["publish", "book.xlsx", "-q", "minimum", "--no-doc-properties", "--from", "2", "--to", "4"])
	_ = capsys.readouterr()

	assert exit_code == 0
	assert captured["quality"] == "minimum"
	assert captured["include_doc_properties"] is False
	assert captured["from_page"] == 2 and captured["to_page"] == 4
	assert captured["publish_format"] == "pdf"


def test_import_text_defaults_to_tab(monkeypatch, capsys) -> None:
	"""Without --delimiter the import uses tab."""
	captured = {}

	def _fake_import(source, destination, **kwargs):
		captured.update(kwargs)
		return None

	monkeypatch.setattr(cli, "import_text", _fake_import)
	assert cli.main(["import-text", "data.txt", "--view"]) == 0
	_ = capsys.readouterr()
	assert captured["delimiters"] == ["tab"]
	assert captured["view"] is True


def test_out_reads_json_lines_from_stdin(monkeypatch, capsys) -> None:
	"""out should parse JSON lines from stdin into records."""
	captured = {}

	def _fake_out(records, output, file_format, columns, engine=None):
		captured.update(records=records, output=output, columns=columns)
		return Path(output)

	monkeypatch.setattr(cli, "out_excel", _fake_out)
	monkeypatch.setattr("sys.stdin", io.StringIO('{"a": 1}\n{"a": 2}\n'))
	assert cli.main(["out", "-o", "rows.xlsx", "--column", "a"]) == 0
	_ = capsys.readouterr()
	assert captured == {"records": [{"a": 1}, {"a": 2}], "output": "rows.xlsx", "columns": ["a"]}


def test_read_records_formats() -> None:
	"""Records may be a JSON array or CSV."""
	assert cli.read_records(io.StringIO('[{"x": 1}]'), "json") == [{"x": 1}]
	assert cli.read_records(io.StringIO(""), "json") == []
	assert cli.read_records(io.StringIO("x,y\n1,2\n"), "csv") == [{"x": "1", "y": "2"}]


def test_errors_are_reported_with_exit_code(tmp_path, capsys) -> None:
	"""A missing source should print a message and return 1."""
	exit_code = cli.main(["--engine", "openpyxl", "convert", str(tmp_path / "missing.xlsx")])
	err = capsys.readouterr().err
	assert exit_code == 1
	assert "Source file not found" in err


def test_unknown_format_is_rejected_by_parser(capsys) -> None:
	"""argparse rejects format names outside the table."""
	with pytest.raises(SystemExit):
		cli.main(["convert", "book.xlsx", "-f", "docx"])
	_ = capsys.readouterr()


def test_read_records_json_lines_of_arrays() -> None:
	"""JSON lines may hold array rows as well as objects."""
	assert cli.read_records(io.StringIO("[1, 2]\n[3, 4]\n"), "json") == [[1, 2], [3, 4]]
	assert cli.read_records(io.StringIO('{"a": 1}\n{"a": 2}'), "json") == [{"a": 1}, {"a": 2}]
	assert cli.read_records(io.StringIO('{"a": 1}'), "json") == [{"a": 1}]
