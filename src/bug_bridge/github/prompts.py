"""Interactive prompts collecting project and login details.

Every prompt blocks on the terminal and loops until the input passes
local validation. Invalid input is reported inline and asked again;
it is never silently accepted. End of input (``EOFError``) and Ctrl-C
(``KeyboardInterrupt``) propagate to the caller.
"""

import logging
from typing import Protocol

from rich.console import Console

from bug_bridge.github.exceptions import MalformedURLError, TransportError
from bug_bridge.github.identity import split_url
from bug_bridge.github.models import ProjectIdentity
from bug_bridge.github.validator import RemoteValidator

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


class Terminal(Protocol):
    """Line-oriented terminal the prompts read from."""

    def read_line(self, prompt: str) -> str: ...

    def read_secret(self, prompt: str) -> str: ...


class ConsoleTerminal:
    """Terminal backed by a rich Console; secrets are read without echo."""

    def __init__(self, console: Console):
        self.console = console

    def read_line(self, prompt: str) -> str:
        return self.console.input(prompt)

    def read_secret(self, prompt: str) -> str:
        return self.console.input(prompt, password=True)


def _strip_newline(line: str) -> str:
    return line.rstrip("\r\n")


class CredentialPrompter:
    """Collects the project URL, visibility and login credentials."""

    def __init__(
        self,
        terminal: Terminal,
        validator: RemoteValidator,
        console: Console | None = None,
    ):
        """Initialize the prompter.

        Args:
            terminal: Source of user input
            validator: Used to check that an entered username exists
            console: Where inline error messages are printed
        """
        self._terminal = terminal
        self._validator = validator
        self._console = console or Console()

    def _say(self, message: str) -> None:
        self._console.print(message, markup=False, highlight=False)

    def prompt_url(self) -> ProjectIdentity:
        """Ask for a GitHub project URL until it holds an owner/project pair."""
        while True:
            line = _strip_newline(self._terminal.read_line("Github project URL: "))
            if not line:
                self._say("URL is empty")
                continue

            try:
                return split_url(line)
            except MalformedURLError as e:
                self._say(str(e))

    def prompt_username(self) -> str:
        """Ask for a username until the remote service knows it.

        A network failure during the check is reported the same way as an
        unknown user.
        """
        while True:
            line = _strip_newline(self._terminal.read_line("username: "))

            try:
                if line and self._validator.username_exists(line):
                    return line
            except TransportError as e:
                logger.warning(f"Username check failed: {e}")

            self._say("invalid username")

    def prompt_password(self) -> str:
        """Ask for a non-empty password without echoing it."""
        while True:
            password = self._terminal.read_secret("password: ")
            if password:
                return password
            self._say("password is empty")

    def prompt_2fa(self) -> str:
        """Ask for a six digit one-time passcode without echoing it."""
        while True:
            code = self._terminal.read_secret("two-factor authentication code: ")

            if len(code) != OTP_LENGTH:
                self._say("invalid 2FA code size")
                continue

            if not (code.isascii() and code.isdigit()):
                self._say("2fa code must be digits only")
                continue

            return code

    def prompt_project_visibility(self) -> bool:
        """Ask whether the project is public.

        Returns:
            True for "0" (public), False for "1" (private)
        """
        self._say("[0]: public")
        self._say("[1]: private")

        while True:
            line = _strip_newline(self._terminal.read_line("repository visibility type: "))
            if line not in ("0", "1"):
                self._say("invalid input")
                continue
            return line == "0"
