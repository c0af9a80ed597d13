"""GitHub bridge configuration."""

from bug_bridge.github.configurator import (
    GithubConfigurator,
    build_client,
    build_configurator,
    validate_config,
)
from bug_bridge.github.exceptions import (
    AuthenticationError,
    BridgeError,
    InvalidOwnerError,
    MalformedTokenResponseError,
    MalformedURLError,
    MissingConfigurationKeyError,
    ProjectInaccessibleError,
    TokenCreationError,
    TokenStorageError,
    TransportError,
)
from bug_bridge.github.identity import IdentityResolver, split_url
from bug_bridge.github.models import (
    BridgeParams,
    ConfigurationRecord,
    Credentials,
    ProjectIdentity,
    TokenRecord,
    scope_for_visibility,
)
from bug_bridge.github.prompts import ConsoleTerminal, CredentialPrompter, Terminal
from bug_bridge.github.provisioner import OTPState, TokenProvisioner, random_fingerprint
from bug_bridge.github.validator import RemoteValidator

__all__ = [
    # Orchestration
    "GithubConfigurator",
    "build_client",
    "build_configurator",
    "validate_config",
    # Components
    "IdentityResolver",
    "split_url",
    "RemoteValidator",
    "CredentialPrompter",
    "ConsoleTerminal",
    "Terminal",
    "TokenProvisioner",
    "OTPState",
    "random_fingerprint",
    # Models
    "BridgeParams",
    "ConfigurationRecord",
    "Credentials",
    "ProjectIdentity",
    "TokenRecord",
    "scope_for_visibility",
    # Exceptions
    "BridgeError",
    "MalformedURLError",
    "InvalidOwnerError",
    "TransportError",
    "AuthenticationError",
    "TokenCreationError",
    "MalformedTokenResponseError",
    "ProjectInaccessibleError",
    "MissingConfigurationKeyError",
    "TokenStorageError",
]
