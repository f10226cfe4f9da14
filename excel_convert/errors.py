"""
Exceptions raised by the excel_convert commands and engines.
"""

from typing import Iterable, Optional


class ExcelConvertError(Exception):
	"""Base class for all conversion failures"""


class SourceNotFoundError(ExcelConvertError, FileNotFoundError):
	def __init__(self, path):
		super().__init__(f"Source file not found: {path}")
		self.path = path


class DestinationNotFoundError(ExcelConvertError, FileNotFoundError):
	def __init__(self, path):
		super().__init__(f"Destination directory not found: {path}")
		self.path = path


class UnknownOptionError(ExcelConvertError, ValueError):
	"""Raised when an option name is not in its lookup table"""

	def __init__(self, kind: str, name: str, choices: Iterable[str]):
		self.kind = kind
		self.name = name
		self.choices = sorted(choices)
		super().__init__(f"Unknown {kind} '{name}'. Valid choices: {', '.join(self.choices)}")


class SameFileError(ExcelConvertError, ValueError):
	def __init__(self, path):
		super().__init__(f"Output would overwrite the source file: {path}")
		self.path = path


class NoRecordsError(ExcelConvertError, ValueError):
	"""Raised when there is nothing to write"""


class UnsupportedOperationError(ExcelConvertError):
	"""Raised when the selected engine cannot perform an operation"""


class AutomationError(ExcelConvertError):
	"""
	Wraps a failure raised inside the spreadsheet application.
	The original exception is chained as __cause__.
	"""

	def __init__(self, action: str, target, detail: Optional[BaseException] = None):
		message = f"Excel failed to {action} {target}"
		if detail is not None:
			message += f": {detail}"
		super().__init__(message)
		self.action = action
		self.target = target
