"""Command-line interface for togglcli.

Each subcommand resolves credentials, builds one API client for the
invocation and runs a single time-entry operation against it.

COMMANDS:
---------
- auth <token>      Verify a token and store it
- current/running   Show the running time entry (default)
- stop              Stop the running time entry
- start <desc>      Start a new time entry
- continue [-i]     Restart the most recent (or a picked) time entry
- list [-n N]       List recent time entries
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, NoReturn

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from togglcli import __version__
from togglcli.api import ApiClient, TogglApiClient
from togglcli.api.wire import elapsed_seconds
from togglcli.config import settings
from togglcli.credentials import CredentialStorage
from togglcli.errors import FzfNotInstalled, PickerCancelled, TogglCliError
from togglcli.models import NO_DESCRIPTION, Credentials, TimeEntry
from togglcli.picker import FzfPicker
from togglcli.time_tracking import TimeEntryEngine, format_duration, utc_now

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

NO_RUNNING_ENTRY = "No time entry is running at the moment"

ClientFactory = Callable[[Credentials], ApiClient]


def setup_logging(verbose: bool = False) -> RichHandler:
    """Route togglcli and httpx log records to stderr.

    Command output stays on stdout. httpx reports each request at INFO, so
    its records only come through with --verbose.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=err_console, show_time=verbose, show_path=False, rich_tracebacks=verbose)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s" if verbose else "%(message)s"))

    for name in ("togglcli", "httpx"):
        named = logging.getLogger(name)
        named.setLevel(level)
        named.handlers[:] = [handler]
    return handler


def get_storage() -> CredentialStorage:
    """Credential storage at the configured location."""
    return CredentialStorage(settings.get_credentials_path())


def resolve_credentials(storage: CredentialStorage) -> Credentials | None:
    """Find credentials, preferring TOGGL_API_TOKEN over the stored file."""
    if settings.api_token:
        logger.debug("Using API token from environment")
        return Credentials(api_token=settings.api_token)
    return storage.read()


def _describe(entry: TimeEntry) -> str:
    text = f"[bold]{escape(entry.description or NO_DESCRIPTION)}[/bold]"
    if entry.project_id is not None:
        text += f" [dim](project {entry.project_id})[/dim]"
    return text


# -- flows --------------------------------------------------------------


async def run_authenticated(
    callback: Callable[[ApiClient], Awaitable[None]],
    storage: CredentialStorage | None = None,
    client_factory: ClientFactory | None = None,
) -> int:
    """Run ``callback`` with an API client built from stored credentials.

    Returns:
        Exit code; 1 when no credentials are available
    """
    credentials = resolve_credentials(storage or get_storage())
    if credentials is None:
        console.print("Please set your API token first by calling [bold]toggl auth <API_TOKEN>[/bold].")
        console.print("You can find your API token at https://track.toggl.com/profile.")
        return 1

    api_client = (client_factory or TogglApiClient.from_credentials)(credentials)
    await callback(api_client)
    return 0


async def authenticate(api_client: ApiClient, storage: CredentialStorage) -> None:
    """Verify the client's token and store it."""
    user = await api_client.get_user()
    storage.persist(user.api_token)
    console.print(f"[green]Successfully authenticated[/green] for user with email {user.email}")


async def display_running_time_entry(api_client: ApiClient) -> None:
    running = await api_client.get_running_time_entry()
    if running is None:
        console.print(NO_RUNNING_ENTRY)
        return

    elapsed = format_duration(elapsed_seconds(running, utc_now()))
    console.print(f"{_describe(running)} running for {elapsed}")


async def stop_running_time_entry(api_client: ApiClient) -> None:
    running = await api_client.get_running_time_entry()
    if running is None:
        console.print(NO_RUNNING_ENTRY)
        return

    stopped = await TimeEntryEngine(api_client).stop(running)
    console.print(f"[green]Stopped[/green] {_describe(stopped)} after {format_duration(stopped.duration)}")


async def start_time_entry(
    api_client: ApiClient,
    description: str,
    project_id: int | None = None,
    billable: bool = False,
) -> None:
    user = await api_client.get_user()
    template = TimeEntry(
        workspace_id=user.default_workspace_id,
        project_id=project_id,
        billable=billable,
        description=description,
    )
    started = await TimeEntryEngine(api_client).start(template)
    console.print(f"[green]Started[/green] {_describe(started)}")


async def continue_time_entry(api_client: ApiClient, interactive: bool = False) -> None:
    entries = await api_client.get_time_entries()
    engine = TimeEntryEngine(api_client)
    if interactive:
        started = await engine.continue_picked(entries, FzfPicker())
    else:
        started = await engine.continue_most_recent(entries)
    console.print(f"[green]Continued[/green] {_describe(started)}")


async def list_time_entries(api_client: ApiClient, number: int | None = None) -> None:
    entries = await api_client.get_time_entries()
    if number is not None:
        entries = entries[:number]

    if not entries:
        console.print("[yellow]No time entries found[/yellow]")
        return

    now = utc_now()
    table = Table(title="Time entries")
    table.add_column("Start", style="cyan")
    table.add_column("Duration", justify="right")
    table.add_column("Description")
    table.add_column("Project", style="dim")
    table.add_column("Billable", justify="center")

    for entry in entries:
        start = entry.start.astimezone().strftime("%Y-%m-%d %H:%M") if entry.start else ""
        duration = format_duration(elapsed_seconds(entry, now))
        if entry.is_running:
            duration = f"[green]{duration} (running)[/green]"
        table.add_row(
            start,
            duration,
            escape(entry.description or NO_DESCRIPTION),
            str(entry.project_id) if entry.project_id is not None else "",
            "$" if entry.billable else "",
        )

    console.print(table)


# -- command handlers ---------------------------------------------------


def _execute(coro: Coroutine[Any, Any, int]) -> int:
    """Run a flow and render any error it raises."""
    try:
        return asyncio.run(coro)
    except PickerCancelled:
        console.print("[dim]Cancelled[/dim]")
        return 0
    except FzfNotInstalled as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        console.print("Install fzf (https://github.com/junegunn/fzf) to pick entries interactively.")
        return 1
    except TogglCliError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1


def cmd_auth(args: argparse.Namespace) -> int:
    """Verify and store an API token."""

    async def _auth() -> int:
        api_client = TogglApiClient.from_credentials(Credentials(api_token=args.api_token))
        await authenticate(api_client, get_storage())
        return 0

    return _execute(_auth())


def cmd_current(args: argparse.Namespace) -> int:
    """Show the running time entry."""
    return _execute(run_authenticated(display_running_time_entry))


def cmd_stop(args: argparse.Namespace) -> int:
    """Stop the running time entry."""
    return _execute(run_authenticated(stop_running_time_entry))


def cmd_start(args: argparse.Namespace) -> int:
    """Start a new time entry."""

    async def _start(api_client: ApiClient) -> None:
        await start_time_entry(api_client, args.description, args.project, args.billable)

    return _execute(run_authenticated(_start))


def cmd_continue(args: argparse.Namespace) -> int:
    """Continue a previous time entry."""

    async def _continue(api_client: ApiClient) -> None:
        await continue_time_entry(api_client, interactive=args.interactive)

    return _execute(run_authenticated(_continue))


def cmd_list(args: argparse.Namespace) -> int:
    """List recent time entries."""

    async def _list(api_client: ApiClient) -> None:
        await list_time_entries(api_client, args.number)

    return _execute(run_authenticated(_list))


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="toggl",
        description="togglcli - track time on Toggl Track from the terminal",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed output")
    parser.add_argument("--version", action="version", version=f"togglcli {__version__}")
    parser.set_defaults(func=cmd_current)

    subparsers = parser.add_subparsers(dest="command")

    auth_parser = subparsers.add_parser(
        "auth",
        help="Store your API token",
        description="Verify an API token against Toggl Track and store it for later commands.",
        epilog="Find your API token at https://track.toggl.com/profile",
    )
    auth_parser.add_argument("api_token", help="Toggl Track API token")
    auth_parser.set_defaults(func=cmd_auth)

    for name in ("current", "running"):
        current_parser = subparsers.add_parser(name, help="Show the running time entry")
        current_parser.set_defaults(func=cmd_current)

    stop_parser = subparsers.add_parser("stop", help="Stop the running time entry")
    stop_parser.set_defaults(func=cmd_stop)

    start_parser = subparsers.add_parser(
        "start",
        help="Start a new time entry",
        epilog="""Examples:
  toggl start "Code review"                 Start without a project
  toggl start "Sprint planning" -p 123 -b   Start a billable entry on project 123""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    start_parser.add_argument("description", help="Description of the time entry")
    start_parser.add_argument("-p", "--project", type=int, default=None, help="Project ID")
    start_parser.add_argument("-b", "--billable", action="store_true", help="Mark the entry as billable")
    start_parser.set_defaults(func=cmd_start)

    continue_parser = subparsers.add_parser(
        "continue",
        help="Start a new time entry copying a previous one",
        description="Restart the most recent time entry, or pick one with fzf.",
    )
    continue_parser.add_argument(
        "-i", "--interactive", action="store_true",
        help="Pick the entry to continue with fzf",
    )
    continue_parser.set_defaults(func=cmd_continue)

    list_parser = subparsers.add_parser("list", help="List recent time entries")
    list_parser.add_argument(
        "-n", "--number", type=_positive_int, default=None,
        help="Maximum number of entries to show",
    )
    list_parser.set_defaults(func=cmd_list)

    return parser


def main() -> NoReturn:
    """Main entry point for the toggl CLI."""
    parser = create_parser()
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        sys.exit(args.func(args))
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted[/dim]")
        sys.exit(130)


if __name__ == "__main__":
    main()
