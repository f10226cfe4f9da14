#!/usr/bin/env python3
"""
Command-line interface for the excel_convert package.
Usage:
  python -m excel_convert convert <workbook> [options]
  python -m excel_convert publish <workbook> [options]
  python -m excel_convert import-text <text_file> [options]
  python -m excel_convert out [records_file] [options]
"""

import argparse
import csv
import json
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, TextIO

from . import config
from .commands import convert_workbook, import_text, out_excel, publish_workbook
from .errors import ExcelConvertError
from .formats import DELIMITERS, PUBLISH_FORMATS, PUBLISH_QUALITY, SPREADSHEET_FORMATS, TEXT_QUALIFIERS


def read_records(stream: TextIO, input_format: str) -> List[Any]:
	"""Parse records from a JSON array, JSON lines or CSV text stream"""
	if input_format == "csv":
		return list(csv.DictReader(stream))
	text = stream.read()
	stripped = text.strip()
	if not stripped:
		return []
	try:
		document = json.loads(stripped)
	except json.JSONDecodeError:
		# JSON lines: one record per line, objects or arrays
		return [json.loads(line) for line in stripped.splitlines() if line.strip()]
	if isinstance(document, list):
		return document
	return [document]


def _guess_input_format(path: Optional[str]) -> str:
	if path and Path(path).suffix.lower() in {".csv", ".tsv"}:
		return "csv"
	return "json"


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="excel-convert", description="Convert documents through Microsoft Excel")
	parser.add_argument('--engine', choices=list(config.ENGINES), help='Backend engine to use (default: xlwings on Windows/macOS, openpyxl elsewhere)')
	sub = parser.add_subparsers(dest="command", required=True)

	p = sub.add_parser("convert", help="Save a workbook in another format")
	p.add_argument('source', help='Path to the workbook')
	p.add_argument('--destination', '-d', help='Output directory (default: beside the source)')
	p.add_argument('--format', '-f', default='xlsx', choices=sorted(SPREADSHEET_FORMATS), help='Target format (default: xlsx)')
	p.add_argument('--sheet', '-s', action='append', dest='sheets', help='Sheet to export for single-sheet formats (repeatable)')

	p = sub.add_parser("publish", help="Publish a workbook as PDF or XPS")
	p.add_argument('source', help='Path to the workbook')
	p.add_argument('--destination', '-d', help='Output directory (default: beside the source)')
	p.add_argument('--format', '-f', default='pdf', choices=sorted(PUBLISH_FORMATS), help='Publish format (default: pdf)')
	p.add_argument('--quality', '-q', default='standard', choices=sorted(PUBLISH_QUALITY), help='Output quality (default: standard)')
	p.add_argument('--no-doc-properties', action='store_true', help='Leave document properties out of the output')
	p.add_argument('--ignore-print-areas', action='store_true', help='Ignore print areas set in the workbook')
	p.add_argument('--from', dest='from_page', type=int, help='First page to publish')
	p.add_argument('--to', dest='to_page', type=int, help='Last page to publish')
	p.add_argument('--open', dest='open_after_publish', action='store_true', help='Open the file after publishing')

	p = sub.add_parser("import-text", help="Open a delimited text file and save it as a workbook")
	p.add_argument('source', help='Path to the text file')
	p.add_argument('--destination', '-d', help='Output directory (default: beside the source)')
	p.add_argument('--format', '-f', default='xlsx', choices=sorted(SPREADSHEET_FORMATS), help='Target format (default: xlsx)')
	p.add_argument('--delimiter', action='append', dest='delimiters', choices=sorted(DELIMITERS), help='Field delimiter (repeatable, default: tab)')
	p.add_argument('--other', dest='other_delimiter', help='Additional single-character delimiter')
	p.add_argument('--qualifier', default='double-quote', choices=sorted(TEXT_QUALIFIERS), help='Text qualifier (default: double-quote)')
	p.add_argument('--consecutive', action='store_true', help='Treat consecutive delimiters as one')
	p.add_argument('--start-row', type=int, default=1, help='First line to import (default: 1)')
	p.add_argument('--origin', default='windows', help='File origin: windows, msdos, macintosh, utf-8 or a code page')
	p.add_argument('--decimal-separator', help='Decimal separator used in the file')
	p.add_argument('--thousands-separator', help='Thousands separator used in the file')
	p.add_argument('--view', action='store_true', help='Show the data in Excel instead of saving it')

	p = sub.add_parser("out", help="Show records in Excel or save them as a workbook")
	p.add_argument('input', nargs='?', help='JSON or CSV records file (default: stdin)')
	p.add_argument('--output', '-o', help='Save to this file instead of showing it')
	p.add_argument('--format', '-f', choices=sorted(SPREADSHEET_FORMATS), help='Target format (default: from output extension)')
	p.add_argument('--input-format', choices=['json', 'csv'], help='Input format (default: from input extension, else json)')
	p.add_argument('--column', action='append', dest='columns', help='Column to include, in order (repeatable)')
	return parser


def _print_written(paths: Iterable[Path]) -> None:
	for path in paths:
		print(f"Output file: {path}")


def run(args: argparse.Namespace) -> None:
	if args.command == "convert":
		written = convert_workbook(args.source, args.destination, args.format, args.sheets, engine=args.engine)
		_print_written(written)
	elif args.command == "publish":
		path = publish_workbook(
			args.source,
			args.destination,
			publish_format=args.format,
			quality=args.quality,
			include_doc_properties=not args.no_doc_properties,
			ignore_print_areas=args.ignore_print_areas,
			from_page=args.from_page,
			to_page=args.to_page,
			open_after_publish=args.open_after_publish,
			engine=args.engine,
		)
		_print_written([path])
	elif args.command == "import-text":
		path = import_text(
			args.source,
			args.destination,
			file_format=args.format,
			delimiters=args.delimiters or ["tab"],
			other_delimiter=args.other_delimiter,
			text_qualifier=args.qualifier,
			consecutive_delimiters=args.consecutive,
			start_row=args.start_row,
			origin=args.origin,
			decimal_separator=args.decimal_separator,
			thousands_separator=args.thousands_separator,
			view=args.view,
			engine=args.engine,
		)
		if path is not None:
			_print_written([path])
	elif args.command == "out":
		input_format = args.input_format or _guess_input_format(args.input)
		if args.input:
			with open(args.input, 'r', encoding='utf-8-sig', newline='') as f:
				records = read_records(f, input_format)
		else:
			records = read_records(sys.stdin, input_format)
		path = out_excel(records, args.output, args.format, args.columns, engine=args.engine)
		if path is not None:
			_print_written([path])


def main(argv: Optional[Sequence[str]] = None) -> int:
	parser = build_parser()
	args = parser.parse_args(argv)
	try:
		run(args)
	except (ExcelConvertError, ValueError, OSError) as e:
		print(f"Error: {e}", file=sys.stderr)
		return 1
	print("\nConversion completed successfully!")
	return 0


if __name__ == "__main__":
	sys.exit(main())
