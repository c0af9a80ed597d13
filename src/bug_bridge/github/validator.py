"""Read-only existence and access checks against the GitHub API."""

import logging

import httpx

from bug_bridge.github.exceptions import TransportError

logger = logging.getLogger(__name__)


class RemoteValidator:
    """Checks users and repositories on the remote service.

    Every check is a single GET. A 200 answer means True; any other
    status (404, 401, 403, ...) means False. Network failures and
    timeouts raise TransportError and are never retried.
    """

    def __init__(self, client: httpx.Client):
        """Initialize the validator.

        Args:
            client: HTTP client configured with the API base URL and timeout
        """
        self._client = client

    def _get(self, endpoint: str, **kwargs) -> httpx.Response:
        try:
            return self._client.get(endpoint, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request to {endpoint} failed: {e}")
            raise TransportError(f"Could not reach {endpoint}: {e}") from e

    def username_exists(self, username: str) -> bool:
        """Check whether a user account exists."""
        response = self._get(f"/users/{username}")
        logger.debug(f"GET /users/{username} -> {response.status_code}")
        return response.status_code == httpx.codes.OK

    def project_accessible(self, owner: str, project: str, token: str) -> bool:
        """Check whether a repository can be read with the given token.

        Args:
            owner: Repository owner
            project: Repository name
            token: Access token to authenticate with

        Returns:
            True if the API answered 200, False otherwise. A missing
            repository and a token lacking permission are not distinguished.
        """
        response = self._get(
            f"/repos/{owner}/{project}",
            headers={"Authorization": f"token {token}"},
        )
        logger.debug(f"GET /repos/{owner}/{project} -> {response.status_code}")
        return response.status_code == httpx.codes.OK
