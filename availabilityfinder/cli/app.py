"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.store_factory import create_calendar_store
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import AvailabilityError
from ..domain.models import SearchConfig
from ..domain.parsing import build_search_config
from ..services.availability_finder import AvailabilityService

app = typer.Typer(
    name="availabilityfinder",
    help="Find bookable time slots from calendar busy times",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
StartOption = Annotated[Optional[str], typer.Option("--start", help="Search start (YYYY-MM-DD or ISO date-time). Defaults to now.")]
EndOption = Annotated[Optional[str], typer.Option("--end", help="Search end (YYYY-MM-DD or ISO date-time). Defaults to now + 7 days.")]
DurationOption = Annotated[Optional[str], typer.Option("--duration", "-d", help="Slot duration in minutes")]
IncrementOption = Annotated[Optional[str], typer.Option("--increment", "-i", help="Slot alignment in minutes")]
JsonOption = Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> Tuple[AppConfig, Path]:
    """Load the configuration and return it with its directory."""
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    logger.debug("Loaded configuration from %s", config_path)
    return config, config_path.resolve().parent


def _build_search(
    config: AppConfig,
    identities: Optional[List[str]],
    start: Optional[str],
    end: Optional[str],
    duration: Optional[str],
    increment: Optional[str],
) -> SearchConfig:
    """Resolve identities and apply configured defaults to the raw options."""
    return build_search_config(
        identities=config.resolve_identities(identities or []),
        start=start,
        end=end,
        duration=duration,
        increment=increment,
        working_days=config.working_days,
        work_start=config.defaults.start_time,
        work_end=config.defaults.end_time,
        timezone=config.timezone,
        search_days=config.defaults.search_days,
        default_duration=config.defaults.duration_minutes,
        default_increment=config.defaults.increment_minutes,
    )


def _print_search_summary(search: SearchConfig) -> None:
    console.print("[bold cyan]Search summary:[/bold cyan]")
    console.print(f"   Calendars: {', '.join(search.identities)}")
    console.print(
        f"   Range: {search.search_start.format('YYYY-MM-DD HH:mm')} - "
        f"{search.search_end.format('YYYY-MM-DD HH:mm')} ({search.timezone})"
    )
    console.print(
        f"   Slots: {search.duration_minutes} min every {search.increment_minutes} min, "
        f"{search.working_hours.start_time:%H:%M} - {search.working_hours.end_time:%H:%M}"
    )
    console.print()


def _fail(message: object) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


@app.command()
def find(
    identities: Annotated[Optional[List[str]], typer.Argument(help="Calendar names, e.g. 'krissy'. Several names union their busy times.")] = None,
    config_file: ConfigOption = None,
    start: StartOption = None,
    end: EndOption = None,
    duration: DurationOption = None,
    increment: IncrementOption = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
):
    """
    Find available slots for one or more calendars.

    Examples:

        availabilityfinder find krissy

        availabilityfinder find krissy client --duration 30

        availabilityfinder find krissy --start 2025-03-27 --end 2025-04-03 --json
    """
    _configure_logging(verbose)

    try:
        config, base_dir = _load_config(config_file)
        search = _build_search(config, identities, start, end, duration, increment)
        service = AvailabilityService(create_calendar_store(config, base_dir))
        slots = service.compute_available_slots(search)
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps([slot.to_dict() for slot in slots], indent=2))
        return

    _print_search_summary(search)

    if not slots:
        console.print(
            "[yellow]No available slots found.[/yellow]\n"
            "Try a longer range or a shorter duration."
        )
        return

    console.print(f"[bold green]{len(slots)} available slot(s) found:[/bold green]\n")
    for slot in slots:
        console.print(f"  {slot.format_display()}")
    console.print()


@app.command()
def suggest(
    identities: Annotated[Optional[List[str]], typer.Argument(help="Calendar names, e.g. 'krissy'.")] = None,
    config_file: ConfigOption = None,
    start: StartOption = None,
    end: EndOption = None,
    duration: DurationOption = None,
    increment: IncrementOption = None,
    top: Annotated[Optional[int], typer.Option("--top", "-n", help="Only show the N best days.")] = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
):
    """
    Rank days by free time and highlight the best day.
    """
    _configure_logging(verbose)

    try:
        config, base_dir = _load_config(config_file)
        search = _build_search(config, identities, start, end, duration, increment)
        service = AvailabilityService(create_calendar_store(config, base_dir))
        suggestion = service.suggest(search)
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(e)

    days = suggestion.days[:top] if top and top > 0 else suggestion.days

    if as_json:
        payload = {
            "days": [
                {
                    "date": day.date.to_date_string(),
                    "slot_count": day.slot_count,
                    "total_free_minutes": day.total_free_minutes,
                    "slots": [slot.to_dict() for slot in day.slots],
                }
                for day in days
            ],
            "best_day": suggestion.best_day.to_dict() if suggestion.best_day else None,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    _print_search_summary(search)

    if not days:
        console.print("[yellow]No available slots found.[/yellow]")
        return

    table = Table(
        title="Days by free time",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Day")
    table.add_column("Slots", justify="right")
    table.add_column("Free hours", justify="right")

    for day in days:
        table.add_row(
            day.date.to_date_string(),
            day.date.format("dddd", locale="en"),
            str(day.slot_count),
            f"{day.total_free_minutes / 60:.1f}",
        )

    console.print(table)

    best = suggestion.best_day
    if best:
        console.print(Panel.fit(
            f"[bold]{best.day_name}, {best.date.to_date_string()}[/bold]\n"
            f"{best.slot_count} slot(s), {best.total_hours} free hour(s)",
            title="Best day"
        ))
    console.print()


@app.command()
def calendars(
    config_file: ConfigOption = None,
):
    """
    List all configured calendars.
    """
    try:
        config, base_dir = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)

    if not config.calendars:
        console.print("[yellow]No calendars defined in the config file.[/yellow]")
        return

    table = Table(
        title=f"Configured calendars ({config.store.type}: {config.store.resolve_path(base_dir)})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Name (Alias)", style="bold yellow")
    table.add_column("Calendar ID", style="dim")

    for calendar in config.calendars:
        table.add_row(calendar.name, calendar.source_id())

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]availabilityfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
