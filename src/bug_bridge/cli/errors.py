"""User-friendly error messages with actionable suggestions."""

from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from bug_bridge.github.exceptions import (
    AuthenticationError,
    InvalidOwnerError,
    MalformedTokenResponseError,
    MalformedURLError,
    MissingConfigurationKeyError,
    ProjectInaccessibleError,
    TokenCreationError,
    TokenStorageError,
    TransportError,
)


@dataclass
class ErrorInfo:
    """Structured error information for display."""

    title: str
    message: str
    suggestion: str
    command: str | None = None


ERROR_MESSAGES = {
    "malformed_url": ErrorInfo(
        title="Invalid project URL",
        message="The URL does not point to a GitHub project.",
        suggestion="Use a URL of the form https://github.com/<owner>/<project>.",
    ),
    "invalid_owner": ErrorInfo(
        title="Unknown owner",
        message="The project owner {owner!r} does not exist on GitHub.",
        suggestion="Check the spelling of the owner.",
    ),
    "transport": ErrorInfo(
        title="Connection failed",
        message="Could not reach the GitHub API.",
        suggestion="Check your internet connection and try again.",
    ),
    "authentication": ErrorInfo(
        title="Login failed",
        message="GitHub rejected the username, password or two-factor code.",
        suggestion="Run the command again and re-enter your credentials.",
        command="bug-bridge configure {name}",
    ),
    "token_creation": ErrorInfo(
        title="Token not created",
        message="GitHub refused to create the access token (status {status_code}).",
        suggestion="Check the details below; a token with the same note may already exist.",
    ),
    "malformed_token": ErrorInfo(
        title="Unexpected response",
        message="GitHub reported success but returned no usable token.",
        suggestion="Try again later.",
    ),
    "project_inaccessible": ErrorInfo(
        title="Project not accessible",
        message="The project doesn't exist or the token has a wrong scope.",
        suggestion="Check the project name; for private projects choose the private visibility.",
    ),
    "missing_key": ErrorInfo(
        title="Incomplete bridge",
        message="The stored bridge configuration is missing the {key!r} key.",
        suggestion="Configure the bridge again.",
        command="bug-bridge configure {name}",
    ),
    "token_storage": ErrorInfo(
        title="Token not stored",
        message="The access token could not be saved in the system keyring.",
        suggestion="Install or unlock a keyring backend, then configure the bridge again.",
        command="bug-bridge configure {name}",
    ),
    "unknown": ErrorInfo(
        title="Unexpected error",
        message="An unexpected error occurred.",
        suggestion="Run again with --verbose for details.",
    ),
}


def get_error_type(error: Exception) -> str:
    """Determine error type from exception."""
    if isinstance(error, MalformedURLError):
        return "malformed_url"
    elif isinstance(error, InvalidOwnerError):
        return "invalid_owner"
    elif isinstance(error, TransportError):
        return "transport"
    elif isinstance(error, AuthenticationError):
        return "authentication"
    elif isinstance(error, TokenCreationError):
        return "token_creation"
    elif isinstance(error, MalformedTokenResponseError):
        return "malformed_token"
    elif isinstance(error, ProjectInaccessibleError):
        return "project_inaccessible"
    elif isinstance(error, MissingConfigurationKeyError):
        return "missing_key"
    elif isinstance(error, TokenStorageError):
        return "token_storage"
    return "unknown"


def format_error(
    error: Exception,
    console: Console,
    name: str | None = None,
    verbose: bool = False,
) -> None:
    """Format and display a user-friendly error message."""
    error_type = get_error_type(error)
    info = ERROR_MESSAGES.get(error_type, ERROR_MESSAGES["unknown"])

    context = {
        "name": name or "<name>",
        "owner": getattr(error, "owner", ""),
        "key": getattr(error, "key", ""),
        "status_code": getattr(error, "status_code", None),
    }
    message = info.message.format(**context)
    command = info.command.format(**context) if info.command else None

    content_lines = [
        f"[white]{escape(message)}[/white]",
        "",
        f"[yellow]Suggestion:[/yellow] {info.suggestion}",
    ]

    if command:
        content_lines.append("")
        content_lines.append(f"[cyan]{command}[/cyan]")

    # Token creation failures are only diagnosable from the raw reply
    if verbose or isinstance(error, TokenCreationError):
        content_lines.append("")
        content_lines.append("[dim]" + "─" * 40 + "[/dim]")
        content_lines.append(f"[dim]Type: {type(error).__name__}[/dim]")
        content_lines.append(f"[dim]Details: {escape(str(error))}[/dim]")

    console.print()
    console.print(Panel(
        "\n".join(content_lines),
        title=f"[red bold]Error: {info.title}[/red bold]",
        border_style="red",
        padding=(1, 2),
    ))
    console.print()
