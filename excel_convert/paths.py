"""
Source validation and output file naming.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .errors import DestinationNotFoundError, SourceNotFoundError

PathLike = Union[str, Path]


def sanitize_sheet_name(name: str) -> str:
	# Excel forbids \ / : * ? in sheet names, but quotes, <, > and | are allowed
	name = re.sub(r"[\\/:*?\"<>|]", "_", name.strip())
	return name or "sheet"


def check_source(source: PathLike) -> Path:
	path = Path(source)
	if not path.is_file():
		raise SourceNotFoundError(source)
	return path.resolve()


def check_destination(destination: Optional[PathLike]) -> Optional[Path]:
	if destination is None:
		return None
	path = Path(destination)
	if not path.is_dir():
		raise DestinationNotFoundError(destination)
	return path.resolve()


def output_path(source: PathLike, destination: Optional[PathLike], extension: str) -> Path:
	"""
	Path of the converted file

	Args:
		source: file being converted
		destination: target directory, or None to write beside the source
		extension: new extension including the dot

	Returns:
		source with its extension replaced, moved into destination when given
	"""
	source = Path(source)
	if destination is None:
		return source.with_suffix(extension)
	return Path(destination) / f"{source.stem}{extension}"


def sheet_output_path(source: PathLike, destination: Optional[PathLike], sheet_name: str, extension: str) -> Path:
	"""Path for one sheet of a workbook: <stem>_<sheet><extension>"""
	source = Path(source)
	directory = source.parent if destination is None else Path(destination)
	return directory / f"{source.stem}_{sanitize_sheet_name(sheet_name)}{extension}"


def select_sheets(sheet_names: Iterable[str], wanted: Optional[Iterable[str]] = None) -> List[str]:
	"""Sheets to export, in workbook order; Excel sheet names are case-insensitive"""
	names = list(sheet_names)
	if wanted is None:
		return names
	wanted_keys = {w.lower() for w in wanted}
	return [n for n in names if n.lower() in wanted_keys]


def missing_sheets(sheet_names: Iterable[str], wanted: Iterable[str]) -> List[str]:
	existing = {n.lower() for n in sheet_names}
	return [w for w in wanted if w.lower() not in existing]


def sheet_output_paths(
	source: PathLike, destination: Optional[PathLike], sheet_names: Iterable[str], extension: str
) -> Dict[str, Path]:
	"""
	Per-sheet paths that never collide

	Sheet names that sanitise to the same file name (e.g. "a|b" and "a_b")
	get a numeric suffix, compared case-insensitively for Windows file systems.
	"""
	paths: Dict[str, Path] = {}
	used = set()
	for name in sheet_names:
		path = sheet_output_path(source, destination, name, extension)
		counter = 2
		while str(path).lower() in used:
			path = sheet_output_path(source, destination, f"{name}_{counter}", extension)
			counter += 1
		used.add(str(path).lower())
		paths[name] = path
	return paths
