"""Console table generator using Rich."""

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from jobtracker.reporting.schemas import ReportConfig, ReportData
from .base import BaseGenerator


class TableReportGenerator(BaseGenerator):
    """Print report data as console tables."""

    extension = "txt"
    media_type = "text/plain"

    def __init__(self, console: Optional[Console] = None):
        """Initialize without output dir (prints to console)."""
        super().__init__(None)
        self.console = console or Console()

    def render(self, report_data: ReportData, config: ReportConfig) -> bytes:
        """Print the report and return the plain-text rendering."""
        recorder = Console(record=True, width=self.console.width, file=self.console.file)
        self._print(recorder, report_data)
        return recorder.export_text().encode("utf-8")

    def _print(self, console: Console, report_data: ReportData):
        console.print(f"\n[bold blue]📊 {report_data.report_name}[/bold blue]")
        console.print(
            f"[dim]Generated: {self._format_timestamp(report_data.generated_at)} | "
            f"{self._format_period(report_data)}[/dim]\n"
        )

        metrics = self._summary_metrics(report_data)
        if metrics:
            stats_text = "\n".join(f"[bold]{label}:[/bold] {value}" for label, value in metrics)
            console.print(Panel(stats_text, title="Summary", border_style="blue"))

        if report_data.applications_by_status:
            self._print_table(
                console, "Applications by Status", ["Status", "Count", "%"],
                [[s.status, str(s.count), f"{s.percentage}%"] for s in report_data.applications_by_status],
            )
        if report_data.top_companies:
            self._print_table(
                console, "Top Companies", ["#", "Company", "Applications"],
                [[str(rank), c.company, str(c.count)] for rank, c in enumerate(report_data.top_companies, start=1)],
            )
        if report_data.top_industries:
            self._print_table(
                console, "Top Industries", ["#", "Industry", "Applications"],
                [[str(rank), i.industry, str(i.count)] for rank, i in enumerate(report_data.top_industries, start=1)],
            )
        for insight in report_data.ai_insights or []:
            console.print(Panel(insight.content, title=insight.title, border_style="green"))

    def _print_table(self, console: Console, title: str, headers: List[str], rows: List[List[str]]):
        table = Table(title=title, show_header=True, header_style="bold magenta")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        console.print(table)
