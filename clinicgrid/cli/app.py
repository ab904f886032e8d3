"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.snapshot_loader import SnapshotSource, load_snapshot
from ..config import AppConfig, get_default_config_path
from ..domain.intervals import Interval
from ..domain.models import WorkingHours, to_time_point
from ..services.schedule_view import DayView, ScheduleViewService

app = typer.Typer(
    name="clinicgrid",
    help="Inspect effective clinic hours, appointment layout and conflicts",
    add_completion=False
)

console = Console()


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    if not config_path.exists() and config_file is None:
        # No config anywhere: fall back to defaults
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def format_hour(hour: float) -> str:
    """Render a fractional hour as HH:MM."""
    full_hour = int(hour)
    minutes = round((hour % 1) * 60)
    return f"{full_hour:02d}:{minutes:02d}"


def format_hours(hours: Optional[WorkingHours]) -> str:
    if hours is None:
        return "closed (blackout)"
    if hours.is_closed:
        return "closed"
    return f"{format_hour(hours.start)} - {format_hour(hours.end)}"


def _render_day(view: DayView) -> None:
    console.print(f"[bold]Effective hours:[/bold] {format_hours(view.hours)}")

    if not view.entries:
        console.print("[yellow]No appointments to show for this day.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Time")
    table.add_column("Patient")
    table.add_column("Column", justify="right")
    table.add_column("Conflicts", style="red")

    for entry in view.entries:
        appointment = entry.appointment
        table.add_row(
            appointment.id,
            f"{appointment.start.format('HH:mm')} - {appointment.end.format('HH:mm')}",
            appointment.patient_name or appointment.patient_id,
            f"{entry.assignment.column + 1}/{entry.assignment.total_columns}",
            ", ".join(entry.conflict_ids),
        )

    console.print()
    console.print(table)


@app.command()
def day(
    date: Annotated[str, typer.Argument(help="Day to inspect (YYYY-MM-DD, UTC)")],
    snapshot: Annotated[Path, typer.Option("--snapshot", "-s", help="YAML/JSON file with exceptions and appointments")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    all_hours: Annotated[bool, typer.Option("--all-hours", help="Include non-working hours.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Show effective working hours and the appointment layout of one day.

    Examples:

        clinicgrid day 2024-08-12 --snapshot snapshot.yaml
        clinicgrid day 2024-08-12 -s snapshot.json --all-hours
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        target = pendulum.from_format(date, "YYYY-MM-DD", tz="UTC")
        source = SnapshotSource(load_snapshot(snapshot))

        service = ScheduleViewService(
            exception_source=source,
            appointment_source=source,
            grid=config.grid.to_time_grid(),
        )
        view = asyncio.run(
            service.build_day(
                target,
                config.base_hours_for(target),
                show_non_working=all_hours or config.show_non_working_hours,
            )
        )
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{target.format('YYYY-MM-DD')}[/bold cyan]")
    _render_day(view)
    console.print()


@app.command()
def conflicts(
    start: Annotated[str, typer.Argument(help="Candidate start (ISO-8601)")],
    end: Annotated[str, typer.Argument(help="Candidate end (ISO-8601)")],
    snapshot: Annotated[Path, typer.Option("--snapshot", "-s", help="YAML/JSON file with appointments")],
    exclude: Annotated[Optional[str], typer.Option("--exclude", "-x", help="Appointment id being edited")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    List appointments that overlap a candidate time range.
    """
    _setup_logging(verbose)

    try:
        candidate = Interval(start=to_time_point(start), end=to_time_point(end))
        existing = load_snapshot(snapshot).appointments
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    found = ScheduleViewService.check_candidate(candidate, existing, exclude_id=exclude)

    if not found:
        console.print("[green]✓ No conflicts.[/green]")
        return

    console.print(f"[bold red]⚠ {len(found)} conflicting appointment(s):[/bold red]")
    for appointment in found:
        console.print(f"  {appointment.id}: {appointment.interval}")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]clinicgrid[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
