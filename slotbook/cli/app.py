"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_store import JsonBookingStore
from ..config import AppConfig, SettingsResolver, get_default_config_path, parse_day
from ..domain.exceptions import BookingConflictError, SlotbookError
from ..domain.models import DayStatus
from ..domain.recurrence import Frequency, RecurrenceRule
from ..services.booking_service import BookingQueryService

app = typer.Typer(
    name="slotbook",
    help="Compute bookable meeting slots and day occupancy",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    DayStatus.FULL: "bold red",
    DayStatus.BUSY: "dark_orange",
    DayStatus.MIXED: "orange1",
    DayStatus.PARTIAL: "green3",
    DayStatus.PENDING: "yellow",
    DayStatus.AVAILABLE: "green",
    DayStatus.NON_WORKING: "dim",
}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
BookingsOption = Annotated[
    Optional[Path],
    typer.Option("--bookings", "-b", help="Path to bookings JSON. Overrides the config file.")
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Slot generation and occupancy for meeting bookings.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the config file, falling back to built-in defaults when absent."""
    config_path = config_file or get_default_config_path()

    if config_file is None and not config_path.exists():
        logger.info("No config file found, using defaults")
        return AppConfig()

    return AppConfig.load_from_yaml(config_path)


def _build_service(config_file: Optional[Path], bookings_file: Optional[Path]) -> BookingQueryService:
    config = _load_config(config_file)
    store = JsonBookingStore(bookings_file or config.bookings_file, timezone=config.timezone)
    return BookingQueryService(store=store, settings_resolver=SettingsResolver(config))


def _fail(message: str, code: int = 1) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {message}")
    return typer.Exit(code)


@app.command()
def slots(
    day: Annotated[str, typer.Argument(help="Day to inspect (YYYY-MM-DD)")],
    config_file: ConfigOption = None,
    bookings_file: BookingsOption = None,
    as_json: JsonOption = False,
    only_free: Annotated[bool, typer.Option("--free", help="Only list available slots.")] = False,
):
    """
    List the meeting slots of a day and whether they are still free.

    Examples:

        slotbook slots 2025-03-10
        slotbook slots 2025-03-10 --free --json
    """
    try:
        service = _build_service(config_file, bookings_file)
        result = service.available_slots(day)
    except (SlotbookError, FileNotFoundError, ValueError) as e:
        raise _fail(str(e))

    if as_json:
        console.print_json(json.dumps(result.to_dict()))
        return

    if not result.is_working_day:
        console.print(f"[yellow]{result.day} is not a working day.[/yellow]")
        return

    shown = result.available_slots if only_free else result.slots
    if not shown:
        console.print(f"[yellow]No slots on {result.day}.[/yellow]")
        return

    settings = result.settings
    table = Table(
        title=(
            f"Slots {result.day} ({settings.working_hours_start}-{settings.working_hours_end}, "
            f"{settings.meeting_duration} min + {settings.buffer_time} min buffer)"
        ),
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold")
    table.add_column("Until")
    table.add_column("Available")

    for slot in shown:
        table.add_row(
            slot.label,
            slot.end.format("HH:mm"),
            "[green]yes[/green]" if slot.available else "[red]no[/red]"
        )

    console.print()
    console.print(table)
    console.print(f"{len(result.available_slots)} of {len(result.slots)} slot(s) free\n")


@app.command("day-status")
def day_status(
    day: Annotated[Optional[str], typer.Argument(help="Day (YYYY-MM-DD). Without it, show an overview.")] = None,
    config_file: ConfigOption = None,
    bookings_file: BookingsOption = None,
    as_json: JsonOption = False,
    past_days: Annotated[int, typer.Option("--past-days", help="Overview: days before today.")] = 30,
    future_days: Annotated[int, typer.Option("--future-days", help="Overview: days after today.")] = 60,
):
    """
    Show how occupied a day is, or an overview of booked days.
    """
    try:
        service = _build_service(config_file, bookings_file)
        if day is None:
            today = pendulum.today(service.timezone)
            summaries = service.days_overview(today, past_days=past_days, future_days=future_days)
        else:
            occupancy = service.day_status(day)
    except (SlotbookError, FileNotFoundError, ValueError) as e:
        raise _fail(str(e))

    if day is None:
        if as_json:
            console.print_json(json.dumps({"days": [s.to_dict() for s in summaries]}))
            return

        table = Table(title="Booked days", show_header=True, header_style="bold cyan")
        table.add_column("Date", style="bold")
        table.add_column("Active", justify="right")
        table.add_column("Pending")
        table.add_column("Confirmed")
        table.add_column("Cancelled")
        table.add_column("Completed")
        for summary in summaries:
            table.add_row(
                summary.day,
                str(summary.total),
                *("x" if flag else "" for flag in (
                    summary.has_pending,
                    summary.has_confirmed,
                    summary.has_cancelled,
                    summary.has_completed,
                ))
            )
        console.print()
        console.print(table)
        console.print()
        return

    if as_json:
        console.print_json(json.dumps(occupancy.to_dict()))
        return

    style = STATUS_STYLES[occupancy.status]
    console.print(f"\n[bold]{occupancy.day}[/bold]: [{style}]{occupancy.status.value}[/{style}]")
    if occupancy.is_working_day:
        console.print(
            f"   Occupation: {occupancy.occupation_rate}% "
            f"({occupancy.occupied_slots} of {occupancy.total_slots} slots, "
            f"{occupancy.available_slots} free)"
        )
    console.print()


@app.command()
def check(
    start: Annotated[str, typer.Argument(help="Requested start (ISO 8601, e.g. 2025-03-10T09:00)")],
    end: Annotated[str, typer.Argument(help="Requested end (ISO 8601)")],
    config_file: ConfigOption = None,
    bookings_file: BookingsOption = None,
    frequency: Annotated[Optional[Frequency], typer.Option("--frequency", "-f", help="Repeat the booking.")] = None,
    interval: Annotated[int, typer.Option("--interval", help="Repeat every N units.")] = 1,
    count: Annotated[Optional[int], typer.Option("--count", help="Number of occurrences.")] = None,
    until: Annotated[Optional[str], typer.Option("--until", help="Last day of the series (YYYY-MM-DD).")] = None,
    weekday: Annotated[Optional[List[int]], typer.Option("--weekday", "-w", help="Weekly: weekday (0=Sunday). Repeatable.")] = None,
    month_day: Annotated[Optional[int], typer.Option("--month-day", help="Monthly: day of month.")] = None,
):
    """
    Check that a requested booking does not conflict with active bookings.
    """
    try:
        service = _build_service(config_file, bookings_file)
        tz = service.timezone
        requested_start = pendulum.parse(start, tz=tz)
        requested_end = pendulum.parse(end, tz=tz)

        rule = None
        if frequency is not None:
            rule = RecurrenceRule(
                frequency=frequency,
                interval=interval,
                by_weekday=tuple(weekday or ()),
                by_month_day=month_day,
                until=parse_day(until, tz).end_of("day") if until else None,
                count=count
            )

        instances = service.check_booking_request(requested_start, requested_end, rule)
    except BookingConflictError as e:
        console.print(f"[bold red]Conflict:[/bold red] {e.requested} overlaps")
        for booking in e.conflicts:
            console.print(f"   {booking.time_range} ({booking.status.value}) {booking.title or ''}")
        raise typer.Exit(2)
    except (SlotbookError, FileNotFoundError, ValueError) as e:
        raise _fail(str(e))

    if rule is not None:
        console.print(f"Series: {rule.describe()}")
    console.print(f"[green]✓ {len(instances)} occurrence(s) free[/green]")
    for instance in instances:
        console.print(f"   {instance}")


@app.command()
def settings(
    config_file: ConfigOption = None,
):
    """
    Show the scheduling settings in effect.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        raise _fail(str(e))

    effective = SettingsResolver(config).resolve()

    table = Table(title="Scheduling settings", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="bold yellow")
    table.add_column("Value")

    table.add_row("Timezone", config.timezone)
    table.add_row("Working hours", f"{effective.working_hours_start} - {effective.working_hours_end}")
    table.add_row("Working days", ",".join(str(d) for d in effective.working_days))
    table.add_row("Meeting duration", f"{effective.meeting_duration} min")
    table.add_row("Buffer", f"{effective.buffer_time} min")
    table.add_row("Reminder", f"{effective.reminder_hours} h before")
    table.add_row("Auto approval", "yes" if effective.auto_approval else "no")
    table.add_row("Defaults applied", "yes" if config.scheduling is None else "no")

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotbook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
