"""Data model for the GitHub bridge configuration flow."""

from dataclasses import dataclass, field
from typing import Self

from pydantic import BaseModel, ConfigDict

# Token scopes requested depending on the project visibility
PUBLIC_SCOPE = "user:email"
PRIVATE_SCOPE = "repo"

# Keys of a stored bridge configuration
KEY_TOKEN = "token"
KEY_OWNER = "owner"
KEY_PROJECT = "project"


@dataclass(frozen=True)
class ProjectIdentity:
    """Owner/project pair identifying the remote repository."""

    owner: str
    project: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.project}"


@dataclass
class Credentials:
    """Login credentials, held in memory only for one token request."""

    username: str
    password: str = field(repr=False)
    otp_code: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class TokenRecord:
    """A freshly created access token and the request labels that produced it."""

    token: str
    note: str
    fingerprint: str


@dataclass(frozen=True)
class ConfigurationRecord:
    """Validated bridge configuration handed over for persistence."""

    token: str = field(repr=False)
    owner: str
    project: str

    def to_dict(self) -> dict[str, str]:
        """Convert to the flat key/value form of a stored configuration."""
        return {
            KEY_TOKEN: self.token,
            KEY_OWNER: self.owner,
            KEY_PROJECT: self.project,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create from a stored configuration mapping."""
        return cls(
            token=data[KEY_TOKEN],
            owner=data[KEY_OWNER],
            project=data[KEY_PROJECT],
        )


@dataclass
class BridgeParams:
    """Parameters a bridge configuration was invoked with."""

    owner: str = ""
    project: str = ""
    url: str = ""
    token: str = ""


class AuthorizationResponse(BaseModel):
    """Body of a successful POST /authorizations reply.

    Only ``token`` is read; every other field GitHub sends is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    token: str | None = None


def scope_for_visibility(is_public: bool) -> str:
    """Map the project visibility choice to the token scope to request.

    Public projects only need to read users' public email; private
    projects need the full ``repo`` scope.
    """
    return PUBLIC_SCOPE if is_public else PRIVATE_SCOPE


def token_note(prefix: str, identity: ProjectIdentity) -> str:
    """Human readable label attached to the token on the remote side."""
    return f"{prefix} - {identity.owner}/{identity.project}"
