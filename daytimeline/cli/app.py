"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.mock_schedule_client import MockScheduleClient
from ..adapters.schedule_client import ScheduleClient
from ..adapters.token_store import TokenStore
from ..config import AppConfig, get_default_config_path
from ..domain.clock import format_minute, format_range
from ..domain.compositor import TimelineCompositor
from ..domain.exceptions import DataFetchError, TimelineError
from ..domain.models import Segment, SegmentKind, ShiftWindow
from ..services.day_schedule import DayScheduleService, DayStatus, DayView

app = typer.Typer(
    name="daytimeline",
    help="Show a staff member's working day as a timeline of appointments, blocks and free time",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock data and skip the API.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")]
DateOption = Annotated[Optional[str], typer.Option("--date", help="Day to show (YYYY-MM-DD). Defaults to today.")]

KIND_STYLES = {
    SegmentKind.AVAILABLE: "green",
    SegmentKind.APPOINTMENT: "bold cyan",
    SegmentKind.BLOCK: "red",
    SegmentKind.BREAK: "yellow",
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _resolve_date(date_option: Optional[str], tz: str) -> str:
    """Return the requested day as YYYY-MM-DD, defaulting to today."""
    if not date_option:
        return pendulum.now(tz).format("YYYY-MM-DD")

    try:
        return pendulum.from_format(date_option, "YYYY-MM-DD", tz=tz).format("YYYY-MM-DD")
    except ValueError as e:
        console.print(f"[red]Could not parse date '{date_option}': {e}[/red]")
        raise typer.Exit(1)


def _build_service(config: AppConfig, mock: bool) -> DayScheduleService:
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using bundled test data[/yellow]\n")
        client = MockScheduleClient(
            default_appointment_minutes=config.default_appointment_minutes
        )
    else:
        token = TokenStore(config.api_base_url).require_token()
        client = ScheduleClient(
            base_url=config.api_base_url,
            access_token=token,
            timeout=config.request_timeout,
            default_appointment_minutes=config.default_appointment_minutes,
        )

    return DayScheduleService(schedule_client=client, compositor=TimelineCompositor())


def _status_label(status: str) -> str:
    return status.replace("_", " ")


def _describe_segment(segment: Segment) -> str:
    """One-line description of a timeline row."""
    if segment.is_available:
        return f"Available ({segment.duration_minutes()} min)"

    ref: Any = segment.ref if isinstance(segment.ref, dict) else {}

    if segment.kind is SegmentKind.APPOINTMENT:
        parts = [
            ref.get("clientName") or "Appointment",
            ref.get("service"),
            _status_label(ref["status"]) if ref.get("status") else None,
        ]
        details = " · ".join(part for part in parts if part)
        return f"{details} ({segment.duration_minutes()} min)"

    if segment.kind is SegmentKind.BLOCK:
        reason = ref.get("reason") or "Blocked time"
        return f"{reason} [dim]({segment.source_id})[/dim]"

    if segment.kind is SegmentKind.BREAK:
        return "Break"

    return segment.kind.value


def _shift_summary(shift: Optional[ShiftWindow]) -> str:
    if shift is None or not shift.is_working:
        return "Day Off"

    hours, minutes = divmod(shift.duration_minutes(), 60)
    summary = f"{format_range(shift.start, shift.end)} ({hours}h {minutes:02d}m)"
    if shift.has_break():
        summary += f"   Break: {format_range(shift.break_start, shift.break_end)}"
    return summary


def _render_day(view: DayView, staff_name: str) -> None:
    schedule = view.schedule
    name = schedule.staff_name or staff_name

    if view.status is DayStatus.NO_SHIFT:
        summary = "Not configured"
    else:
        summary = _shift_summary(view.shift)

    console.print(Panel.fit(
        f"[bold]{name}[/bold]\n"
        f"{pendulum.from_format(schedule.date, 'YYYY-MM-DD').format('dddd, MMM D, YYYY', locale='en')}\n\n"
        f"[bold]Today's Shift:[/bold] {summary}",
        title="Schedule"
    ))

    if view.status is DayStatus.NO_SHIFT:
        console.print(
            "\n[yellow]⚙  No Shift Configured[/yellow]\n"
            "Working hours have not been set up for this staff member.\n"
        )
        return

    if view.status is DayStatus.DAY_OFF:
        console.print("\n[cyan]🌴 Day Off[/cyan]\nNo appointments scheduled.\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold", no_wrap=True)
    table.add_column("Type")
    table.add_column("Details")

    for segment in view.segments:
        style = KIND_STYLES[segment.kind]
        table.add_row(
            format_range(segment.start, segment.end),
            f"[{style}]{segment.kind.value}[/{style}]",
            _describe_segment(segment),
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def day(
    staff: Annotated[str, typer.Argument(help="Staff name (alias) or staff id")],
    date: DateOption = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show the timeline of one working day.

    Examples:

        daytimeline day anna
        daytimeline day anna --date 2025-03-10
        daytimeline day anna --mock
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        member = config.resolve_staff(staff)
        day_str = _resolve_date(date, config.timezone)

        service = _build_service(config, mock)
        view = service.get_day_view(staff_id=member.staff_id, date=day_str)

        _render_day(view, member.display_name())

    except DataFetchError as e:
        console.print(f"[bold red]Failed to load schedule:[/bold red] {e}")
        console.print("Please check your connection and try again.")
        raise typer.Exit(1)

    except (TimelineError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def week(
    staff: Annotated[str, typer.Argument(help="Staff name (alias) or staff id")],
    date: DateOption = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show the weekly shift pattern of a staff member.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        member = config.resolve_staff(staff)
        day_str = _resolve_date(date, config.timezone)

        service = _build_service(config, mock)
        schedule = service.fetch_day(staff_id=member.staff_id, date=day_str)

        if not schedule.shifts:
            console.print(
                "[yellow]⚙  No Shift Configured[/yellow]\n"
                "Working hours have not been set up for this staff member."
            )
            return

        table = Table(
            title=f"Weekly Schedule - {schedule.staff_name or member.display_name()}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Day", style="bold yellow")
        table.add_column("Hours")
        table.add_column("Break", style="dim")

        for shift in schedule.shifts:
            if shift.is_working:
                hours = format_range(shift.start, shift.end)
                pause = format_range(shift.break_start, shift.break_end) if shift.has_break() else ""
            else:
                hours = "[dim]Day Off[/dim]"
                pause = ""
            table.add_row(shift.weekday or "?", hours, pause)

        console.print()
        console.print(table)
        console.print()

    except DataFetchError as e:
        console.print(f"[bold red]Failed to load schedule:[/bold red] {e}")
        raise typer.Exit(1)

    except (TimelineError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("block-add")
def block_add(
    staff: Annotated[str, typer.Argument(help="Staff name (alias) or staff id")],
    start: Annotated[str, typer.Option("--start", help="Block start (HH:MM)")],
    end: Annotated[str, typer.Option("--end", help="Block end (HH:MM)")],
    reason: Annotated[str, typer.Option("--reason", "-r", help="Why the time is blocked")] = "",
    date: DateOption = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Block time in a staff member's day.
    """
    _setup_logging(verbose)

    try:
        config = _load_config(config_file)
        member = config.resolve_staff(staff)
        day_str = _resolve_date(date, config.timezone)

        service = _build_service(config, mock)
        block = service.create_block(
            staff_id=member.staff_id,
            date=day_str,
            start_time=start,
            end_time=end,
            reason=reason,
        )

        console.print(
            f"[green]✓ Time block created:[/green] {format_minute(block.start)} - "
            f"{format_minute(block.end)} {block.reason} [dim]({block.id})[/dim]"
        )

    except (TimelineError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("block-remove")
def block_remove(
    staff: Annotated[str, typer.Argument(help="Staff name (alias) or staff id")],
    block_id: Annotated[str, typer.Argument(help="Id of the block to remove")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Remove a blocked interval.
    """
    _setup_logging(verbose)

    if not yes and not typer.confirm("Are you sure you want to remove this blocked time?"):
        console.print("Cancelled.")
        return

    try:
        config = _load_config(config_file)
        member = config.resolve_staff(staff)

        service = _build_service(config, mock)
        service.delete_block(staff_id=member.staff_id, block_id=block_id)

        console.print(f"[green]✓ Block {block_id} removed.[/green]")

    except (TimelineError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command("list-staff")
def list_staff(
    config_file: ConfigOption = None,
):
    """
    List all configured staff members.
    """
    try:
        config = _load_config(config_file)

        if not config.staff:
            console.print("[yellow]No staff members defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured Staff",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name (Alias)", style="bold yellow")
        table.add_column("Staff ID", style="dim")

        for member in config.staff:
            table.add_row(member.name, member.staff_id)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def login(
    token: Annotated[Optional[str], typer.Option("--token", help="API token. Prompted for when omitted.")] = None,
    config_file: ConfigOption = None,
):
    """
    Store the schedule API token in the system keyring.
    """
    try:
        config = _load_config(config_file)

        if token is None:
            token = typer.prompt("API token", hide_input=True)

        TokenStore(config.api_base_url).save_token(token)
        console.print(f"[green]✓ Token stored for {config.api_base_url}[/green]")

    except (TimelineError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def logout(
    config_file: ConfigOption = None,
):
    """
    Remove the stored API token.
    """
    try:
        config = _load_config(config_file)
        TokenStore(config.api_base_url).clear()
        console.print("[green]✓ Token removed.[/green]")

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]daytimeline[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
