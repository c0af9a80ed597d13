"""Resolution of the owner/project pair a bridge points at."""

import logging
import re
from typing import Protocol

from bug_bridge.github.exceptions import InvalidOwnerError, MalformedURLError
from bug_bridge.github.models import ProjectIdentity
from bug_bridge.github.validator import RemoteValidator

logger = logging.getLogger(__name__)

GITHUB_URL_PATTERN = re.compile(r"github\.com/([^/]+)/([^/]+)")


class URLPrompt(Protocol):
    def prompt_url(self) -> ProjectIdentity: ...


def split_url(url: str) -> ProjectIdentity:
    """Extract owner and project from a GitHub project URL.

    The first ``github.com/<owner>/<project>`` occurrence is used, so
    ``https://github.com/owner/repo`` and ``git@github.com/owner/repo``
    both resolve.

    Raises:
        MalformedURLError: If the URL holds no owner/project pair
    """
    match = GITHUB_URL_PATTERN.search(url)
    if match is None:
        raise MalformedURLError(url)
    return ProjectIdentity(owner=match.group(1), project=match.group(2))


class IdentityResolver:
    """Determines the target project and checks its owner exists."""

    def __init__(self, validator: RemoteValidator, prompter: URLPrompt):
        self._validator = validator
        self._prompter = prompter

    def resolve(self, owner: str = "", project: str = "", url: str = "") -> ProjectIdentity:
        """Resolve the project identity.

        Explicit owner and project win, then the URL, then an interactive
        prompt that loops until a well-formed URL is entered.

        Raises:
            MalformedURLError: If an explicit URL cannot be parsed
            InvalidOwnerError: If the owner is not a known user
            TransportError: If the owner check cannot reach the API
        """
        if owner and project:
            identity = ProjectIdentity(owner=owner, project=project)
        elif url:
            identity = split_url(url)
        else:
            identity = self._prompter.prompt_url()

        logger.debug(f"Resolved project {identity}")

        if not self._validator.username_exists(identity.owner):
            raise InvalidOwnerError(identity.owner)

        return identity
