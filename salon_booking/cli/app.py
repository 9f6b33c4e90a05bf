"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..config import AppConfig
from ..adapters.availability_client import AvailabilityClient
from ..adapters.booking_client import BookingClient
from ..adapters.mock_provider import MockAvailabilityProvider, MockBookingStore
from ..domain.booking_window import BookingWindowValidator
from ..domain.catalog import DEFAULT_CATALOG, ServiceCategory
from ..domain.exceptions import BookingEngineError, ValidationError
from ..domain.interval import IntervalComposer
from ..domain.models import SubmissionState
from ..services.availability import AvailabilityService
from ..services.booking_flow import BookingFlow
from ..services.booking_submitter import BookingSubmitter

app = typer.Typer(
    name="salon-booking",
    help="Book salon appointments against an availability provider",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
MockOption = Annotated[
    bool,
    typer.Option("--mock", help="Use the in-memory provider instead of the HTTP services."),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _load_config(config_file: Optional[Path], verbose: bool) -> AppConfig:
    config = AppConfig.load(config_file)
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    return config


def build_flow(config: AppConfig, mock: bool = False) -> BookingFlow:
    """Wire validator, adapters and services for one booking session."""
    if mock:
        store = MockBookingStore(timezone=config.timezone)
        provider = MockAvailabilityProvider(store=store, timezone=config.timezone)
        persistence = store
    else:
        timeout = config.provider.timeout_seconds
        provider = AvailabilityClient(config.provider.availability_url(), timeout=timeout)
        persistence = BookingClient(config.provider.booking_url(), timeout=timeout)

    return BookingFlow(
        validator=BookingWindowValidator(
            window_days=config.booking_window_days,
            timezone=config.timezone,
        ),
        availability=AvailabilityService(provider),
        submitter=BookingSubmitter(
            persistence=persistence,
            composer=IntervalComposer(timezone=config.timezone),
        ),
    )


def _prompt_category(console: Console) -> ServiceCategory:
    console.print("[bold]1️⃣  Category[/bold]")
    for idx, category in enumerate(ServiceCategory, 1):
        console.print(f"  {idx}. {category.value.title()}")

    while True:
        answer = typer.prompt("\n→ Category (name or number)", default="1").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(ServiceCategory):
            return list(ServiceCategory)[int(answer) - 1]
        try:
            return ServiceCategory.parse(answer)
        except BookingEngineError as e:
            console.print(f"[red]{e}[/red]")


def _prompt_email(console: Console, flow: BookingFlow) -> None:
    while True:
        answer = typer.prompt("\n2️⃣  Email")
        try:
            flow.set_email(answer)
            return
        except ValidationError as e:
            console.print(f"[red]{e}[/red]")


def _prompt_services(console: Console, category: ServiceCategory) -> List[str]:
    console.print("\n[bold]3️⃣  Services[/bold]")
    offered = category.services
    for idx, service in enumerate(offered, 1):
        console.print(f"  {idx}. {service.value} ({service.duration_minutes} min)")

    answer = typer.prompt("\n→ Services (numbers separated by spaces)", default="1")
    selected: List[str] = []
    for token in answer.replace(",", " ").split():
        if token.isdigit() and 1 <= int(token) <= len(offered):
            selected.append(offered[int(token) - 1].value)
        else:
            selected.append(token)
    return selected


def _prompt_time(console: Console, times) -> str:
    console.print("\n[bold]5️⃣  Time[/bold]")
    for idx, time_of_day in enumerate(times, 1):
        console.print(f"  {idx:>2}. {time_of_day}")

    answer = typer.prompt("\n→ Time (number or HH:MM AM/PM)", default="1").strip()
    if answer.isdigit() and 1 <= int(answer) <= len(times):
        return times[int(answer) - 1]
    return answer


async def _run_booking(
    flow: BookingFlow,
    category: Optional[str],
    email: Optional[str],
    date: Optional[str],
    services: Optional[List[str]],
    time: Optional[str],
) -> None:
    """Collect every selection (prompting for missing ones) and submit."""
    flow.choose_category(category or _prompt_category(console))

    if email:
        flow.set_email(email)
    else:
        _prompt_email(console, flow)

    session = flow.session
    service_ids = services or _prompt_services(console, session.category)
    await flow.choose_services(service_ids)

    first_day = flow.validator.today()
    last_day = flow.validator.last_bookable_day(first_day)
    while True:
        picked = date or typer.prompt(
            f"\n4️⃣  Date (YYYY-MM-DD, {first_day.to_date_string()} to {last_day.to_date_string()})",
            default=first_day.to_date_string(),
        )
        session = await flow.choose_date(picked)
        if not session.date_error:
            break
        console.print(f"[red]{session.date_error}[/red]")
        if date:
            raise typer.Exit(1)

    if not session.available_times:
        console.print(
            "[yellow]⚠ No free times for this date and these services.[/yellow]\n"
            "Try another date or fewer services."
        )
        raise typer.Exit(1)

    flow.choose_time(time or _prompt_time(console, session.available_times))

    session = flow.session
    console.print("\n[bold cyan]📊 Summary:[/bold cyan]")
    console.print(f"   Email: {session.email}")
    console.print(f"   Date: {session.selected_date.to_date_string()} at {session.selected_time}")
    console.print(f"   Services: {', '.join(s.value for s in session.services)}")
    console.print()

    with console.status("Booking..."):
        status = await flow.submit()

    if status.state is SubmissionState.SUCCEEDED:
        console.print(Panel.fit(
            "[bold green]✓ Appointment successfully booked![/bold green]",
            title="Booking",
        ))
    else:
        console.print(f"[bold red]✗ {status.reason}[/bold red]")
        raise typer.Exit(1)


@app.command()
def book(
    config_file: ConfigOption = None,
    category: Annotated[Optional[str], typer.Option("--category", help="woman, man or child")] = None,
    email: Annotated[Optional[str], typer.Option("--email", help="Contact email")] = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Appointment date (YYYY-MM-DD)")] = None,
    service: Annotated[Optional[List[str]], typer.Option("--service", "-s", help="Service name, repeatable")] = None,
    time: Annotated[Optional[str], typer.Option("--time", "-t", help="Start time, e.g. '10:15 AM'")] = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Book an appointment - interactive, or fully driven by options.

    Examples:

        # Interactive mode
        salon-booking book

        # Batch mode
        salon-booking book --category woman --email a@example.com \\
            --date 2026-10-20 -s "Women's Haircut" -s "Full Hair Color" -t "10:15 AM"

        # Use the in-memory provider
        salon-booking book --mock
    """
    try:
        config = _load_config(config_file, verbose)

        console.print("\n" + "="*60)
        console.print("[bold cyan]💇  Book an Appointment[/bold cyan]")
        console.print("="*60 + "\n")

        if mock:
            console.print("[yellow]⚠  MOCK MODE: using in-memory availability[/yellow]\n")

        flow = build_flow(config, mock=mock)
        asyncio.run(_run_booking(flow, category, email, date, service, time))

    except typer.Exit:
        raise

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (BookingEngineError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def services():
    """
    List categories, services and durations.
    """
    table = Table(
        title="Services",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Category", style="bold yellow")
    table.add_column("Service")
    table.add_column("Duration", justify="right", style="dim")

    for category in ServiceCategory:
        for service in category.services:
            table.add_row(
                category.value,
                service.value,
                f"{service.duration_minutes} min"
            )

    console.print()
    console.print(table)
    console.print()


@app.command("free-times")
def free_times(
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    service_ids: Annotated[List[str], typer.Argument(metavar="SERVICE...", help="Service names")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show free start times for a date and a set of services.
    """
    try:
        config = _load_config(config_file, verbose)
        flow = build_flow(config, mock=mock)

        services = DEFAULT_CATALOG.resolve(service_ids)
        validation = flow.validator.validate(date)
        if not validation:
            console.print(f"[bold red]Error:[/bold red] {validation.reason}")
            raise typer.Exit(1)

        times = asyncio.run(flow.availability.refresh(validation.date, services)) or ()

        if not times:
            console.print("[yellow]⚠ No free times found.[/yellow]")
            return

        console.print(f"[bold green]✓ {len(times)} free time(s) on {validation.date.to_date_string()}:[/bold green]\n")
        for time_of_day in times:
            console.print(f"  {time_of_day}")
        console.print()

    except typer.Exit:
        raise

    except (FileNotFoundError, BookingEngineError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salon-booking[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
