"""
In-memory accumulation of tabular records before they are handed to Excel.
"""

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .errors import NoRecordsError


class RecordBuffer:
	"""
	Collects rows and writes them as one delimited text file.

	Mapping records contribute their keys as columns, in first-seen order.
	Sequence records are positional and take their header from `columns`
	(or column1..N when no header is given).
	"""

	def __init__(self, columns: Optional[Sequence[str]] = None):
		self.columns: List[str] = list(columns) if columns else []
		self._fixed_columns = bool(columns)
		self.rows: List[Any] = []

	def __len__(self) -> int:
		return len(self.rows)

	def add(self, record: Any) -> None:
		if isinstance(record, Mapping):
			if not self._fixed_columns:
				for key in record.keys():
					if str(key) not in self.columns:
						self.columns.append(str(key))
		elif isinstance(record, (str, bytes)) or not isinstance(record, Iterable):
			# Scalars become a single-column row
			record = [record]
		else:
			record = list(record)
		self.rows.append(record)

	def extend(self, records: Iterable[Any]) -> "RecordBuffer":
		for record in records:
			self.add(record)
		return self

	def header(self) -> List[str]:
		width = max((len(r) for r in self.rows if not isinstance(r, Mapping)), default=0)
		columns = list(self.columns)
		for i in range(len(columns), width):
			columns.append(f"column{i + 1}")
		return columns

	def _row_values(self, record: Any, header: List[str]) -> List[Any]:
		if isinstance(record, Mapping):
			by_name: Dict[str, Any] = {str(k): v for k, v in record.items()}
			return [_cell(by_name.get(col)) for col in header]
		values = [_cell(v) for v in record]
		return values + [""] * (len(header) - len(values))

	def flush(self, path: Path, delimiter: str = "\t") -> Path:
		"""
		Write header and rows to path

		Args:
			path: file to create (overwritten if present)
			delimiter: field separator

		Returns:
			The written path
		"""
		if not self.rows:
			raise NoRecordsError("No records to write")
		header = self.header()
		with Path(path).open("w", newline="", encoding="utf-8-sig") as f:
			writer = csv.writer(f, delimiter=delimiter)
			writer.writerow(header)
			for record in self.rows:
				writer.writerow(self._row_values(record, header))
		return Path(path)


def _cell(value: Any) -> Any:
	if value is None:
		return ""
	if isinstance(value, (list, tuple, set)):
		return ", ".join(str(x) for x in value)
	return value
