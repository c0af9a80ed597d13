"""Exceptions raised while configuring a GitHub bridge."""


class BridgeError(Exception):
    """Base exception for bridge configuration errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedURLError(BridgeError):
    """Project URL does not contain an owner/project pair."""

    def __init__(self, url: str):
        super().__init__(f"bad github project url: {url}")
        self.url = url


class InvalidOwnerError(BridgeError):
    """Project owner is not a known user on the remote service."""

    def __init__(self, owner: str):
        super().__init__(f"invalid parameter owner: {owner}")
        self.owner = owner


class TransportError(BridgeError):
    """Network failure or timeout talking to the remote service."""


class AuthenticationError(BridgeError):
    """Basic auth rejected, or the one-time passcode rejected after its single retry."""

    def __init__(self, message: str, status_code: int | None = 401, body: str = ""):
        super().__init__(message, status_code)
        self.body = body


class TokenCreationError(BridgeError):
    """Authorization endpoint answered with an unexpected status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"error creating token {status_code}: {body}", status_code)
        self.body = body


class MalformedTokenResponseError(BridgeError):
    """Token was created but the response body carries no usable token."""


class ProjectInaccessibleError(BridgeError):
    """Token was obtained but cannot reach the configured project."""

    def __init__(self, owner: str, project: str):
        super().__init__(
            f"project {owner}/{project} doesn't exist or authentication token has a wrong scope"
        )
        self.owner = owner
        self.project = project


class MissingConfigurationKeyError(BridgeError):
    """Stored bridge configuration lacks a required key."""

    def __init__(self, key: str):
        super().__init__(f"missing {key} key")
        self.key = key


class TokenStorageError(BridgeError):
    """Token could not be written to the OS keyring."""
