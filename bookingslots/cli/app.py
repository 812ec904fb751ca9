"""
Main CLI application using Typer.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from pendulum import Date
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.ical_client import CalendarFeedClient
from ..adapters.mailer import LoggingMailer
from ..adapters.memory_store import MemoryStore
from ..adapters.mock_ical_client import MockCalendarFeedClient
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookingSlotsError, CalendarImportError
from ..services.notifications import location_label
from ..services.scheduling import SchedulingService

app = typer.Typer(
    name="bookingslots",
    help="Offer meeting slots from weekly availability templates",
    add_completion=False
)

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

WEEKDAY_NAMES = {1: "Mon", 2: "Tue", 3: "Wed", 4: "Thu", 5: "Fri", 6: "Sat", 7: "Sun"}

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml, then demo data."),
]
MockOption = Annotated[bool, typer.Option("--mock", help="Use bundled mock calendar data instead of real feeds.")]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Bookingslots - weekly availability templates and bookable slots.
    """
    _configure_logging(verbose)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the configuration, falling back to the demo data when no file exists.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if config_path.exists():
        return AppConfig.load_from_yaml(config_path)

    logger.debug("No config file found, using demo data")
    return AppConfig.demo()


def _build_service(
    config: AppConfig,
    mock: bool,
    mailer: Optional[LoggingMailer] = None,
) -> SchedulingService:
    """
    Wire the store, feed client and mailer together.

    In mock mode every host without a feed gets a ``mock://<username>`` feed.
    """
    store = MemoryStore.from_config(config)

    if mock:
        feed_client = MockCalendarFeedClient(
            timezone=config.timezone,
            data_file=config.mock_calendar_file,
        )
        for host in config.hosts:
            user = store.get_user_by_username(host.username)
            if user is not None and not user.calendar_url:
                store.update_user(user.id, calendar_url=f"mock://{user.username}")
    else:
        feed_client = CalendarFeedClient(timezone=config.timezone)

    return SchedulingService(
        store=store,
        feed_client=feed_client,
        mailer=mailer or LoggingMailer(sender=config.sender_email),
    )


def _parse_day(value: Optional[str], tz: str) -> Date:
    """Parse a YYYY-MM-DD option, defaulting to today."""
    if value is None:
        return pendulum.today(tz).date()

    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz).date()
    except Exception as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _sync_host_calendar(service: SchedulingService, username: str) -> None:
    """Import the host's feed if one is configured; failures only warn."""
    host = service.get_host_by_username(username)
    if not host.calendar_url:
        return

    try:
        count = service.sync_calendar(host.id)
    except CalendarImportError as e:
        err_console.print(f"[yellow]⚠ Calendar sync failed, continuing without it: {e}[/yellow]")
        return

    logger.info("Imported %d calendar event(s) for %s", count, username)


@app.command()
def slots(
    username: Annotated[str, typer.Argument(help="Host username")],
    slug: Annotated[str, typer.Argument(help="Template slug")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Day to check (YYYY-MM-DD). Defaults to today.")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="Display timezone for the slots.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    sync: Annotated[bool, typer.Option("--sync/--no-sync", help="Import the host's calendar feed first.")] = True,
    as_json: Annotated[bool, typer.Option("--json", help="Print slot starts as a JSON array.")] = False,
):
    """
    Show the bookable slots of a template on one day.

    Examples:

        bookingslots slots janesmith 30min --date 2024-11-25

        bookingslots slots janesmith coffee --timezone America/New_York --json

        bookingslots slots janesmith 30min --mock
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)

        host = service.get_host_by_username(username)
        template = service.get_template(username, slug)
        day = _parse_day(date, host.timezone)

        if sync:
            _sync_host_calendar(service, username)

        found = service.available_slots(username, slug, day, display_timezone=timezone)

        if as_json:
            typer.echo(json.dumps([slot.to_iso8601() for slot in found]))
            return

        console.print()
        if not found:
            console.print(
                f"[yellow]⚠ No available slots for {template.name} on {day.format('dddd, YYYY-MM-DD')}.[/yellow]"
            )
            console.print()
            return

        table = Table(
            title=f"{template.name} ({template.duration} min) with {host.full_name}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("#", style="dim")
        table.add_column("Slot", style="bold green")

        for idx, slot in enumerate(found, 1):
            table.add_row(str(idx), slot.format_display())

        console.print(table)
        console.print(f"[bold green]✓ {len(found)} slot(s) available[/bold green]\n")

    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def templates(
    username: Annotated[str, typer.Argument(help="Host username")],
    config_file: ConfigOption = None,
):
    """
    List the meeting templates of a host.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, mock=False)
        found = service.list_templates(username)

        if not found:
            console.print(f"[yellow]No templates configured for {username}.[/yellow]")
            return

        table = Table(
            title=f"Templates of {username}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Slug", style="bold yellow")
        table.add_column("Name")
        table.add_column("Duration")
        table.add_column("Days")
        table.add_column("Hours")
        table.add_column("Location", style="dim")

        for template in found:
            table.add_row(
                template.slug,
                template.name,
                f"{template.duration} min",
                ", ".join(WEEKDAY_NAMES[d] for d in template.days_of_week),
                f"{template.start_time} - {template.end_time}",
                location_label(template.location),
            )

        console.print()
        console.print(table)
        console.print()

    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def book(
    username: Annotated[str, typer.Argument(help="Host username")],
    slug: Annotated[str, typer.Argument(help="Template slug")],
    date: Annotated[str, typer.Option("--date", "-d", help="Day of the meeting (YYYY-MM-DD)")],
    time: Annotated[str, typer.Option("--time", help="Start time in the host timezone (HH:MM)")],
    name: Annotated[str, typer.Option("--name", help="Invitee name")],
    email: Annotated[str, typer.Option("--email", help="Invitee email")],
    phone: Annotated[Optional[str], typer.Option("--phone", help="Invitee phone number")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="Invitee timezone. Defaults to the host's.")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Book a slot and preview the notification emails.

    Bookings live in memory only; this command is meant for trying out a
    template configuration.
    """
    try:
        config = _load_config(config_file)
        mailer = LoggingMailer(sender=config.sender_email)
        service = _build_service(config, mock, mailer=mailer)

        host = service.get_host_by_username(username)
        template = service.get_template(username, slug)
        _sync_host_calendar(service, username)

        try:
            start = pendulum.from_format(f"{date} {time}", "YYYY-MM-DD HH:mm", tz=host.timezone)
        except Exception as e:
            console.print(f"[red]Could not parse start '{date} {time}': {e}[/red]")
            raise typer.Exit(1)

        booking = service.create_booking(
            template_id=template.id,
            invitee_name=name,
            invitee_email=email,
            invitee_phone=phone,
            start=start,
            timezone=timezone or host.timezone,
        )

        console.print(f"\n[bold green]✓ Booking #{booking.id} confirmed[/bold green]\n")

        for message in mailer.sent:
            console.print(Panel.fit(
                message.body,
                title=f"To: {message.to}",
                subtitle=message.subject,
            ))
        console.print()

    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def test_feed(
    url: Annotated[str, typer.Argument(help="iCalendar (.ics) feed URL")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Check that a calendar feed can be fetched and parsed.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config, mock)
        count = service.test_feed_url(url)

        console.print(Panel.fit(
            f"[bold green]✓ Successfully fetched {count} event(s)[/bold green]\n\n"
            f"[bold]Feed:[/bold] {url}",
            title="✓ Feed check"
        ))

    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
