"""Command-line export workflow."""

from typing import List, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from jobtracker.core.ai_client import LLMTextGenerator
from jobtracker.core.config import settings
from jobtracker.core.database import async_session_factory
from jobtracker.core.models import ExportFormat
from jobtracker.reporting.generators import TableReportGenerator, get_generator
from jobtracker.reporting.insights import InsightOrchestrator
from jobtracker.reporting.service import ReportNotFoundError, ReportService

FORMAT_CHOICES = ["pdf", "excel", "table", "all"]


def default_service() -> ReportService:
    """Report service wired to the configured text generator."""
    orchestrator = InsightOrchestrator(LLMTextGenerator(), timeout=settings.insight_timeout_seconds)
    return ReportService(insights=orchestrator)


async def generate_report(
    config_id: int,
    user_id: str,
    output_format: str = "pdf",
    output_dir: Optional[str] = None,
    service: Optional[ReportService] = None,
    session_factory=async_session_factory,
    console: Optional[Console] = None,
) -> List[str]:
    """
    Generate a saved report configuration to disk and/or the console.

    Args:
        config_id: Saved configuration (own or public template)
        user_id: Owner whose jobs are aggregated
        output_format: 'pdf', 'excel', 'table' or 'all'
        output_dir: Output directory path (defaults to settings.output_dir)

    Returns:
        List of generated file paths
    """
    console = console or Console()
    service = service or default_service()
    output_dir = output_dir or str(settings.output_dir)

    console.print("\n[bold blue]📊 JOB SEARCH REPORTS[/bold blue]\n")

    async with session_factory() as session:
        try:
            report_data, row = await service.generate(session, user_id, config_id=config_id)
        except ReportNotFoundError:
            console.print(f"[red]Report configuration {config_id} not found.[/red]")
            return []
        config = row.to_config()

    console.print(f"[green]✓ {report_data.total_jobs} jobs in range for '{config.name}'[/green]")
    console.print(f"\n[bold]🎨 Generating {output_format.upper()} report(s)...[/bold]\n")

    output_files = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        for export_format in (ExportFormat.PDF, ExportFormat.EXCEL):
            if output_format not in (export_format.value, "all"):
                continue
            task = progress.add_task(f"Generating {export_format.value.upper()}...", total=None)
            path = get_generator(export_format, output_dir).generate(report_data, config)
            output_files.append(path)
            progress.remove_task(task)
            console.print(f"   ✅ {export_format.value.upper()}: {path}")

    if output_format in ("table", "all"):
        TableReportGenerator(console=console).render(report_data, config)
        console.print("\n   ✅ Table: Displayed above")

    console.print("\n[bold green]✨ Report generation complete![/bold green]")
    return output_files
