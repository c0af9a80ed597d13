"""End-to-end configuration of a GitHub bridge.

Resolves the project, obtains an access token (given, or minted through
an interactive login) and verifies the token reaches the project. Any
failure aborts the whole flow; a ConfigurationRecord is only returned
once both the owner and the project access have been confirmed.
"""

import logging
import random
from collections.abc import Mapping

import httpx
from rich.console import Console

from bug_bridge import __version__
from bug_bridge.config import Settings, get_settings
from bug_bridge.github.exceptions import MissingConfigurationKeyError, ProjectInaccessibleError
from bug_bridge.github.identity import IdentityResolver
from bug_bridge.github.models import (
    KEY_OWNER,
    KEY_PROJECT,
    KEY_TOKEN,
    PRIVATE_SCOPE,
    PUBLIC_SCOPE,
    BridgeParams,
    ConfigurationRecord,
    Credentials,
    ProjectIdentity,
    scope_for_visibility,
    token_note,
)
from bug_bridge.github.prompts import ConsoleTerminal, CredentialPrompter, Terminal
from bug_bridge.github.provisioner import TokenProvisioner
from bug_bridge.github.validator import RemoteValidator

logger = logging.getLogger(__name__)

REQUIRED_KEYS = (KEY_TOKEN, KEY_OWNER, KEY_PROJECT)

TOKEN_INTRO = f"""
git-bug will now generate an access token in your Github profile. Your credentials are not stored and are only used to generate the token. The token is stored in the bridge configuration.

Depending on your configuration the token will have one of the following scopes:
  - '{PUBLIC_SCOPE}': to be able to read public-only users email
  - '{PRIVATE_SCOPE}'      : to be able to read private repositories
"""


class GithubConfigurator:
    """Orchestrates identity resolution, token provisioning and access checks."""

    def __init__(
        self,
        validator: RemoteValidator,
        prompter: CredentialPrompter,
        provisioner: TokenProvisioner,
        console: Console | None = None,
        note_prefix: str = "git-bug",
        client: httpx.Client | None = None,
    ):
        self.validator = validator
        self.prompter = prompter
        self.provisioner = provisioner
        self.resolver = IdentityResolver(validator, prompter)
        self._console = console or Console()
        self._note_prefix = note_prefix
        self._client = client

    def __enter__(self) -> "GithubConfigurator":
        return self

    def __exit__(self, *args) -> None:
        """Close the owned HTTP client, if any."""
        if self._client:
            self._client.close()
            self._client = None

    def configure(self, params: BridgeParams) -> ConfigurationRecord:
        """Run the configuration flow.

        Args:
            params: Explicit owner/project/url/token; empty values are
                resolved interactively

        Returns:
            The validated token/owner/project record

        Raises:
            BridgeError: Any failure along the way; nothing is returned
                partially configured
        """
        identity = self.resolver.resolve(params.owner, params.project, params.url)

        if params.token:
            token = params.token
        else:
            token = self._generate_token(identity)

        logger.debug(f"Checking access to {identity}")
        if not self.validator.project_accessible(identity.owner, identity.project, token):
            raise ProjectInaccessibleError(identity.owner, identity.project)

        logger.info(f"Bridge configured for {identity}")
        return ConfigurationRecord(token=token, owner=identity.owner, project=identity.project)

    def _generate_token(self, identity: ProjectIdentity) -> str:
        self._console.print(TOKEN_INTRO, markup=False, highlight=False)

        is_public = self.prompter.prompt_project_visibility()
        scope = scope_for_visibility(is_public)

        credentials = Credentials(
            username=self.prompter.prompt_username(),
            password=self.prompter.prompt_password(),
        )

        note = token_note(self._note_prefix, identity)
        logger.debug(f"Requesting token with scope '{scope}' for {credentials.username}")
        record = self.provisioner.create_token(note, credentials, scope)
        return record.token


def validate_config(conf: Mapping[str, str]) -> None:
    """Check a stored bridge configuration has every required key.

    Raises:
        MissingConfigurationKeyError: Naming the first absent key
    """
    for key in REQUIRED_KEYS:
        if key not in conf:
            raise MissingConfigurationKeyError(key)


def build_client(settings: Settings | None = None) -> httpx.Client:
    """HTTP client for the GitHub API with the configured URL and timeout."""
    settings = settings or get_settings()
    return httpx.Client(
        base_url=settings.api_url,
        headers={
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"bug-bridge/{__version__}",
        },
        timeout=settings.timeout,
    )


def build_configurator(
    settings: Settings | None = None,
    console: Console | None = None,
    terminal: Terminal | None = None,
    rng: random.Random | None = None,
) -> GithubConfigurator:
    """Wire a configurator with real collaborators.

    Use it as a context manager so the HTTP client gets closed.
    """
    settings = settings or get_settings()
    console = console or Console()
    terminal = terminal or ConsoleTerminal(console)

    client = build_client(settings)

    validator = RemoteValidator(client)
    prompter = CredentialPrompter(terminal, validator, console)
    provisioner = TokenProvisioner(
        client,
        prompter.prompt_2fa,
        rng=rng,
        otp_header=settings.otp_header,
    )

    return GithubConfigurator(
        validator,
        prompter,
        provisioner,
        console=console,
        note_prefix=settings.note_prefix,
        client=client,
    )
