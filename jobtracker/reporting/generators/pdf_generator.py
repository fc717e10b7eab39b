"""PDF report generator."""

import io
from typing import List

from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from jobtracker.reporting.schemas import ReportConfig, ReportData
from .base import BaseGenerator
from .layout import Block, Page, PageGeometry, Paragraph, TextStyle, layout

TOP_N = 10
# Offsets from the top of an A4 page past which a block starts on a new page.
INSIGHTS_SECTION_BREAK = 650
INSIGHT_BREAK = 700

TITLE = TextStyle(font="Helvetica-Bold", size=24, leading=29, align="center")
SUBTITLE = TextStyle(font="Helvetica", size=10, leading=13, align="center")
SECTION = TextStyle(font="Helvetica-Bold", size=16, leading=20, underline=True)
SUBSECTION = TextStyle(font="Helvetica-Bold", size=14, leading=18)
METRIC = TextStyle(font="Helvetica", size=11, leading=15)
LIST_ITEM = TextStyle(font="Helvetica", size=10, leading=13, indent=10)
INSIGHT_TITLE = TextStyle(font="Helvetica-Bold", size=11, leading=15)
INSIGHT_BODY = TextStyle(font="Helvetica", size=10, leading=13, indent=20)
FOOTER = TextStyle(font="Helvetica", size=8, leading=10, align="center")


class PDFReportGenerator(BaseGenerator):
    """Generate paginated PDF reports from ReportData."""

    extension = "pdf"
    media_type = "application/pdf"

    def __init__(self, output_dir: str = None, geometry: PageGeometry = PageGeometry()):
        super().__init__(output_dir)
        self.geometry = geometry

    def render(self, report_data: ReportData, config: ReportConfig) -> bytes:
        """Generate PDF bytes."""
        pages = layout(self.build_blocks(report_data), self.geometry)

        buffer = io.BytesIO()
        # invariant=1 pins creation date and document id
        pdf = canvas.Canvas(buffer, pagesize=(self.geometry.width, self.geometry.height), invariant=1)
        pdf.setTitle(report_data.report_name)
        pdf.setCreator("Job Tracker Reports")

        for page in pages:
            self._draw_page(pdf, page)
            self._draw_footer(pdf, page.number, len(pages))
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()

    def build_blocks(self, report_data: ReportData) -> List[Block]:
        """Sections in fixed order; sections without data are left out."""
        blocks = [self._header_block(report_data)]

        metrics = self._summary_metrics(report_data)
        if metrics:
            blocks.append(Block(
                headings=[Paragraph("Summary", SECTION, space_after=6)],
                body=[Paragraph(f"{label}: {value}", METRIC) for label, value in metrics],
                space_after=20,
            ))

        if report_data.applications_by_status:
            blocks.append(Block(
                headings=[Paragraph("Applications by Status", SUBSECTION, space_after=6)],
                body=[
                    Paragraph(f"{item.status}: {item.count} ({item.percentage}%)", LIST_ITEM)
                    for item in report_data.applications_by_status
                ],
                space_after=13,
            ))

        if report_data.top_companies:
            blocks.append(Block(
                headings=[Paragraph("Top Companies", SUBSECTION, space_after=6)],
                body=[
                    Paragraph(f"{rank}. {item.company}: {item.count} applications", LIST_ITEM)
                    for rank, item in enumerate(report_data.top_companies[:TOP_N], start=1)
                ],
                space_after=13,
            ))

        if report_data.top_industries:
            blocks.append(Block(
                headings=[Paragraph("Top Industries", SUBSECTION, space_after=6)],
                body=[
                    Paragraph(f"{rank}. {item.industry}: {item.count} applications", LIST_ITEM)
                    for rank, item in enumerate(report_data.top_industries[:TOP_N], start=1)
                ],
                space_after=13,
            ))

        if report_data.ai_insights:
            for index, insight in enumerate(report_data.ai_insights, start=1):
                headings = [Paragraph(f"{index}. {insight.title}", INSIGHT_TITLE)]
                if index == 1:
                    headings.insert(0, Paragraph("AI-Powered Insights", SECTION, space_after=6))
                blocks.append(Block(
                    headings=headings,
                    body=[Paragraph(insight.content, INSIGHT_BODY)],
                    break_if_below=INSIGHTS_SECTION_BREAK if index == 1 else INSIGHT_BREAK,
                    space_after=6,
                ))

        return blocks

    def _header_block(self, report_data: ReportData) -> Block:
        return Block(
            body=[
                Paragraph(report_data.report_name or "Custom Report", TITLE, space_after=6),
                Paragraph(f"Generated: {self._format_timestamp(report_data.generated_at)}", SUBTITLE),
                Paragraph(self._format_period(report_data), SUBTITLE),
            ],
            space_after=26,
        )

    def _draw_page(self, pdf: canvas.Canvas, page: Page):
        for line in page.lines:
            style = line.style
            y = self.geometry.height - line.baseline
            pdf.setFont(style.font, style.size)
            if style.align == "center":
                pdf.drawCentredString(self.geometry.width / 2, y, line.text)
                continue
            pdf.drawString(line.x, y, line.text)
            if style.underline:
                width = stringWidth(line.text, style.font, style.size)
                pdf.setLineWidth(0.8)
                pdf.line(line.x, y - 2, line.x + width, y - 2)

    def _draw_footer(self, pdf: canvas.Canvas, number: int, total: int):
        pdf.setFont(FOOTER.font, FOOTER.size)
        pdf.drawCentredString(self.geometry.width / 2, self.geometry.margin_bottom / 2, f"Page {number} of {total}")
