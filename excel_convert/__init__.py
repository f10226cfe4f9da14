from .commands import convert_workbook, get_engine, import_text, out_excel, publish_workbook
from .errors import ExcelConvertError
from .records import RecordBuffer

__all__ = [
	"convert_workbook",
	"publish_workbook",
	"import_text",
	"out_excel",
	"get_engine",
	"RecordBuffer",
	"ExcelConvertError",
]

__version__ = "0.1.0"
