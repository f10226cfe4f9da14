"""
Runtime defaults for excel_convert.

Values come from the environment so scripted runs can pick an engine or keep
Excel visible without changing code.
"""

import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

ENGINES = ("xlwings", "openpyxl")


def _to_bool(value: Optional[str], default: bool) -> bool:
	if value is None:
		return default
	return value.strip().lower() in {"1", "true", "yes", "on"}


def default_engine() -> str:
	"""Engine used when the caller does not name one"""
	configured = os.getenv("EXCEL_CONVERT_ENGINE")
	if configured:
		return configured.strip().lower()
	# Excel automation needs a desktop Excel: Windows or macOS
	system = platform.system().lower()
	if system.startswith("win") or system == "darwin":
		return "xlwings"
	return "openpyxl"


def app_visible() -> bool:
	return _to_bool(os.getenv("EXCEL_CONVERT_VISIBLE"), False)


def temp_dir() -> Path:
	configured = os.getenv("EXCEL_CONVERT_TEMP_DIR")
	if configured:
		return Path(configured)
	return Path(tempfile.gettempdir())
