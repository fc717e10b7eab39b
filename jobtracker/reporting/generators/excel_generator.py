"""Excel report generator, one sheet per dataset present in the report."""

import io
import os
from datetime import datetime
from typing import List, Sequence
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet
from openpyxl.writer.excel import ExcelWriter

from jobtracker.reporting.schemas import Insight, JobRow, ReportConfig, ReportData
from .base import BaseGenerator

HEADER_FILL = PatternFill(start_color="4F81BD", end_color="4F81BD", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")


def clean_cell_value(value):
    """Strip control characters that openpyxl refuses to write."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


class _PinnedTimeZipFile(ZipFile):
    """ZipFile that stamps every member with one fixed time instead of the wall clock."""

    def __init__(self, file, date_time: tuple):
        super().__init__(file, "w", ZIP_DEFLATED, allowZip64=True)
        self.pinned_date_time = date_time

    def writestr(self, zinfo_or_arcname, data, compress_type=None, compresslevel=None):
        if not isinstance(zinfo_or_arcname, ZipInfo):
            zinfo = ZipInfo(zinfo_or_arcname, date_time=self.pinned_date_time)
            zinfo.compress_type = compress_type or self.compression
            zinfo.external_attr = 0o600 << 16
            zinfo_or_arcname = zinfo
        super().writestr(zinfo_or_arcname, data, compress_type, compresslevel)

    def write(self, filename, arcname=None, compress_type=None, compresslevel=None):
        # openpyxl streams worksheets through temp files; copy their bytes so mtime is ignored
        with open(filename, "rb") as fh:
            data = fh.read()
        self.writestr(arcname or os.path.basename(filename), data, compress_type, compresslevel)


class ExcelReportGenerator(BaseGenerator):
    """Generate multi-sheet Excel workbooks."""

    extension = "xlsx"
    media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def render(self, report_data: ReportData, config: ReportConfig) -> bytes:
        """Generate Excel bytes."""
        wb = Workbook()
        wb.remove(wb.active)  # Remove default sheet
        wb.properties.creator = "Job Tracker Reports"
        wb.properties.title = clean_cell_value(report_data.report_name)

        # Summary is always present; the rest only when their dataset is non-empty
        self._create_summary_sheet(wb, report_data)
        if report_data.applications_by_status:
            self._create_table_sheet(
                wb, "By Status", ["Status", "Count", "Percentage"], [20, 15, 15],
                [(s.status, s.count, f"{s.percentage}%") for s in report_data.applications_by_status],
            )
        if report_data.applications_by_industry:
            self._create_table_sheet(
                wb, "By Industry", ["Industry", "Count", "Percentage"], [30, 15, 15],
                [
                    (i.industry, i.count, f"{i.percentage}%" if i.percentage is not None else "")
                    for i in report_data.applications_by_industry
                ],
            )
        if report_data.applications_by_company:
            self._create_table_sheet(
                wb, "By Company", ["Company", "Count"], [30, 15],
                [(c.company, c.count) for c in report_data.applications_by_company],
            )
        if report_data.application_trend:
            self._create_table_sheet(
                wb, "Application Trend", ["Period", "Count"], [20, 15],
                [(p.period, p.count) for p in report_data.application_trend],
            )
        if report_data.jobs:
            self._create_jobs_sheet(wb, report_data.jobs)
        if report_data.ai_insights:
            self._create_insights_sheet(wb, report_data.ai_insights)

        return self._save(wb, report_data.generated_at)

    def _save(self, wb: Workbook, generated_at: datetime) -> bytes:
        """Serialize with document and archive timestamps pinned to the report's generation time."""
        wb.properties.created = generated_at
        wb.properties.modified = generated_at
        buffer = io.BytesIO()
        archive = _PinnedTimeZipFile(buffer, generated_at.timetuple()[:6])
        ExcelWriter(wb, archive).save()
        return buffer.getvalue()

    def _create_summary_sheet(self, wb: Workbook, report_data: ReportData):
        """Create summary sheet."""
        ws = wb.create_sheet("Summary", 0)

        # Title
        ws.merge_cells("A1:B1")
        ws["A1"] = clean_cell_value(report_data.report_name or "Custom Report")
        ws["A1"].font = Font(size=16, bold=True)
        ws["A1"].alignment = Alignment(horizontal="center")

        ws.merge_cells("A2:B2")
        ws["A2"] = f"Generated: {self._format_timestamp(report_data.generated_at)}"
        ws["A2"].alignment = Alignment(horizontal="center")

        ws.merge_cells("A3:B3")
        ws["A3"] = clean_cell_value(self._format_period(report_data))
        ws["A3"].alignment = Alignment(horizontal="center")

        # Metric / value table
        ws["A5"] = "Metric"
        ws["B5"] = "Value"
        for col in range(1, 3):
            cell = ws.cell(5, col)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL

        for row, (label, value) in enumerate(self._summary_metrics(report_data), start=6):
            ws.cell(row, 1, clean_cell_value(label)).font = Font(bold=True)
            ws.cell(row, 2, clean_cell_value(value))

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 20

    def _write_header(self, ws: Worksheet, headers: Sequence[str], widths: Sequence[int]):
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(1, col, header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.alignment = Alignment(horizontal="center", vertical="center")
        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width

        # Freeze top row
        ws.freeze_panes = "A2"

    def _create_table_sheet(
        self,
        wb: Workbook,
        title: str,
        headers: Sequence[str],
        widths: Sequence[int],
        rows: List[tuple],
    ):
        """Header row followed by one row per item."""
        ws = wb.create_sheet(title)
        self._write_header(ws, headers, widths)
        for row in rows:
            ws.append([clean_cell_value(value) for value in row])

    def _create_jobs_sheet(self, wb: Workbook, jobs: List[JobRow]):
        """Create raw data sheet, one row per job record."""
        ws = wb.create_sheet("Raw Data")
        self._write_header(
            ws,
            ["Company", "Title", "Status", "Industry", "Location", "Applied Date", "Source"],
            [25, 30, 15, 20, 20, 15, 15],
        )
        for job in jobs:
            ws.append([clean_cell_value(value) for value in (
                job.company or "",
                job.title or "",
                job.status or "",
                job.industry or "",
                job.location or "",
                job.applied_date.strftime("%Y-%m-%d") if job.applied_date else "",
                job.source or "",
            )])

    def _create_insights_sheet(self, wb: Workbook, insights: List[Insight]):
        ws = wb.create_sheet("AI Insights")
        self._write_header(ws, ["Insight", "Details"], [30, 80])
        for row, insight in enumerate(insights, start=2):
            ws.cell(row, 1, clean_cell_value(insight.title)).font = Font(bold=True)
            ws.cell(row, 1).alignment = Alignment(vertical="top")
            ws.cell(row, 2, clean_cell_value(insight.content)).alignment = Alignment(wrap_text=True, vertical="top")
