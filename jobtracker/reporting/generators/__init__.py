from jobtracker.core.models import ExportFormat
from .base import BaseGenerator
from .excel_generator import ExcelReportGenerator
from .pdf_generator import PDFReportGenerator
from .table_generator import TableReportGenerator

GENERATORS = {
    ExportFormat.PDF: PDFReportGenerator,
    ExportFormat.EXCEL: ExcelReportGenerator,
}


def get_generator(export_format: ExportFormat, output_dir: str = None) -> BaseGenerator:
    """Renderer instance for an export format."""
    return GENERATORS[ExportFormat(export_format)](output_dir)


__all__ = [
    "BaseGenerator",
    "ExcelReportGenerator",
    "PDFReportGenerator",
    "TableReportGenerator",
    "GENERATORS",
    "get_generator",
]
