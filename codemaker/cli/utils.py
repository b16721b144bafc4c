"""Utility functions for the CodeMaker CLI."""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from codemaker.cli.config import get_service
from codemaker.core.client import CodeMakerError, UnauthorizedError
from codemaker.core.service import CodeMakerService
from codemaker.models.domain.jobs import FileOutcome, JobReport

console = Console()


def echo_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {message}[/green]")


def echo_error(message: str) -> None:
    """Print error message."""
    console.print(f"[red]✗ {message}[/red]")


def echo_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[yellow]⚠ {message}[/yellow]")


def echo_info(message: str) -> None:
    """Print info message."""
    console.print(f"[blue]ℹ {message}[/blue]")


def run(coro: Awaitable[Any]) -> Any:
    """Run a service coroutine, turning failures into CLI errors."""
    try:
        return asyncio.run(coro)
    except UnauthorizedError as e:
        echo_error(f"Unauthorized: {e.message}")
        echo_info("Configure the API key with: codemaker config set api_key <key>")
        sys.exit(1)
    except CodeMakerError as e:
        echo_error(str(e))
        sys.exit(1)
    except (OSError, ValueError) as e:
        echo_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        echo_warning("Cancelled")
        sys.exit(130)


def run_job(start: Callable[[CodeMakerService], Awaitable[JobReport]]) -> JobReport:
    """Run a background job with a spinner and print its report."""
    service = get_service()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting...", total=None)

        def on_file(path: Path, outcome: FileOutcome) -> None:
            progress.update(task, description=f"{outcome.value}: {path}")

        service.runner.on_progress = on_file

        try:
            report = asyncio.run(start(service))
        except KeyboardInterrupt:
            report = None

    if report is None:
        job = service.runner.current
        if job is not None:
            job.report.cancelled = True
            print_report(job.report)
        echo_warning("Cancelled; files already processed were kept")
        sys.exit(130)

    print_report(report)
    if report.error:
        sys.exit(1)
    return report


def print_report(report: JobReport) -> None:
    """Print a job report as a table."""
    table = Table(title=report.title)
    table.add_column("Outcome")
    table.add_column("Files", justify="right")
    table.add_row("[green]Processed[/green]", str(len(report.processed)))
    table.add_row("[yellow]Skipped[/yellow]", str(len(report.skipped)))
    table.add_row("[red]Failed[/red]", str(len(report.failed)))
    console.print(table)

    for path in report.failed:
        echo_error(f"Failed: {path}")

    if report.error:
        echo_error(f"Stopped: {report.error}")
    elif report.cancelled:
        echo_warning("Job cancelled")
    elif report.total == 0:
        echo_info("No supported files found")
    elif not report.failed:
        echo_success(f"{report.title} finished")
