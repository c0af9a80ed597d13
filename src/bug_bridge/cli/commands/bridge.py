"""Bridge CLI commands: configure, show, list and remove."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from bug_bridge.cli.errors import format_error
from bug_bridge.cli.progress import (
    api_spinner,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from bug_bridge.github import (
    BridgeError,
    BridgeParams,
    RemoteValidator,
    build_client,
    build_configurator,
)
from bug_bridge.store import BridgeStore

console = Console()

DEFAULT_BRIDGE = "default"


def _verbose() -> bool:
    return logging.getLogger("bug_bridge").isEnabledFor(logging.DEBUG)


def mask_token(token: str) -> str:
    """Show only the first characters of a token."""
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}{'*' * 8}"


def do_configure(
    name: Annotated[
        str,
        typer.Argument(help="Name of the bridge"),
    ] = DEFAULT_BRIDGE,
    owner: Annotated[
        str | None,
        typer.Option("--owner", "-o", help="Owner of the GitHub project"),
    ] = None,
    project: Annotated[
        str | None,
        typer.Option("--project", "-p", help="Name of the GitHub project"),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", "-u", help="URL of the GitHub project"),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            "-t",
            help="Existing access token; skips the interactive login",
            envvar="BUG_BRIDGE_TOKEN",
        ),
    ] = None,
):
    """
    Configure a GitHub bridge.

    Without --token you are asked for your GitHub login and a new access
    token is generated. Your credentials are only used for that request.

    Examples:
        bug-bridge configure --url https://github.com/alice/proj
        bug-bridge configure work --owner alice --project proj --token ghp_xxx
    """
    params = BridgeParams(
        owner=owner or "",
        project=project or "",
        url=url or "",
        token=token or "",
    )

    try:
        with build_configurator(console=console) as configurator:
            record = configurator.configure(params)
    except BridgeError as e:
        format_error(e, console, name=name, verbose=_verbose())
        raise typer.Exit(1)
    except (KeyboardInterrupt, EOFError):
        console.print()
        print_warning("Aborted, nothing was configured.")
        raise typer.Exit(1)

    try:
        BridgeStore().save(name, record)
    except BridgeError as e:
        format_error(e, console, name=name, verbose=_verbose())
        raise typer.Exit(1)

    print_success(f"Bridge [bold]{name}[/bold] configured")
    console.print(f"  Project: [cyan]{record.owner}/{record.project}[/cyan]")


def do_show(
    name: Annotated[
        str,
        typer.Argument(help="Name of the bridge"),
    ] = DEFAULT_BRIDGE,
    check: Annotated[
        bool,
        typer.Option("--check", "-c", help="Verify the token still reaches the project"),
    ] = False,
):
    """Show a configured bridge."""
    try:
        record = BridgeStore().load(name)
    except BridgeError as e:
        format_error(e, console, name=name, verbose=_verbose())
        raise typer.Exit(1)

    if record is None:
        print_error(f"No bridge named {name}")
        print_info(f"Configure it with: [cyan]bug-bridge configure {name}[/cyan]")
        raise typer.Exit(1)

    console.print(f"Bridge: [bold]{name}[/bold]")
    console.print(f"  Owner: [cyan]{record.owner}[/cyan]")
    console.print(f"  Project: [cyan]{record.project}[/cyan]")
    console.print(f"  Token: [dim]{mask_token(record.token)}[/dim]")

    if not check:
        return

    try:
        with build_client() as client:
            with api_spinner("Checking project access..."):
                ok = RemoteValidator(client).project_accessible(
                    record.owner, record.project, record.token
                )
    except BridgeError as e:
        format_error(e, console, name=name, verbose=_verbose())
        raise typer.Exit(1)

    if ok:
        print_success("Token can access the project")
    else:
        print_warning("Project doesn't exist or the token has a wrong scope")
        raise typer.Exit(1)


def do_list():
    """List configured bridges."""
    store = BridgeStore()
    names = store.list_names()

    if not names:
        print_info("No bridges configured.")
        return

    table = Table(title="Bridges", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Project", style="green")

    for bridge_name in names:
        conf = store.get_raw(bridge_name) or {}
        project = f"{conf.get('owner', '?')}/{conf.get('project', '?')}"
        table.add_row(bridge_name, project)

    console.print(table)


def do_remove(
    name: Annotated[
        str,
        typer.Argument(help="Name of the bridge"),
    ] = DEFAULT_BRIDGE,
):
    """Remove a configured bridge and its stored token."""
    if BridgeStore().remove(name):
        print_success(f"Bridge {name} removed.")
    else:
        print_warning(f"No bridge named {name}.")
