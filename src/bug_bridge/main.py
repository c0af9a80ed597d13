"""Main CLI entry point for bug-bridge."""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from bug_bridge.cli.commands import bridge
from bug_bridge.cli.progress import console

app = typer.Typer(
    name="bug-bridge",
    help="Configure bridges between a repository and its GitHub project",
    no_args_is_help=True,
)

app.command("configure")(bridge.do_configure)
app.command("show")(bridge.do_show)
app.command("list")(bridge.do_list)
app.command("remove")(bridge.do_remove)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
):
    """Configure bridges between a repository and its GitHub project."""
    if verbose:
        logger = logging.getLogger("bug_bridge")
        logger.setLevel(logging.DEBUG)
        if not any(isinstance(h, RichHandler) for h in logger.handlers):
            logger.addHandler(RichHandler(console=console, rich_tracebacks=True))


if __name__ == "__main__":
    app()
