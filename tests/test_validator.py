"""Tests for the remote validator."""

import httpx
import pytest
import respx

from bug_bridge.github.exceptions import TransportError
from bug_bridge.github.validator import RemoteValidator

API_URL = "https://api.github.com"


class TestUsernameExists:
    """Tests for RemoteValidator.username_exists."""

    @respx.mock
    def test_200_means_exists(self, client):
        """A 200 answer means the user exists."""
        respx.get(f"{API_URL}/users/alice").mock(
            return_value=httpx.Response(200, json={"login": "alice"})
        )

        assert RemoteValidator(client).username_exists("alice") is True

    @respx.mock
    @pytest.mark.parametrize("status", [404, 401, 403, 500])
    def test_other_status_means_missing(self, client, status):
        """Every non-200 status collapses to False."""
        respx.get(f"{API_URL}/users/ghost").mock(return_value=httpx.Response(status))

        assert RemoteValidator(client).username_exists("ghost") is False

    @respx.mock
    def test_request_is_unauthenticated(self, client):
        """The user lookup sends no Authorization header."""
        route = respx.get(f"{API_URL}/users/alice").mock(return_value=httpx.Response(200))

        RemoteValidator(client).username_exists("alice")

        assert "Authorization" not in route.calls[0].request.headers

    @respx.mock
    def test_repeated_calls_agree(self, client):
        """Checking twice against the same remote state gives the same answer."""
        route = respx.get(f"{API_URL}/users/alice").mock(return_value=httpx.Response(200))
        validator = RemoteValidator(client)

        first = validator.username_exists("alice")
        second = validator.username_exists("alice")

        assert first == second is True
        assert len(route.calls) == 2

    @respx.mock
    def test_connection_error_raises_transport_error(self, client):
        """Network failures are errors, not False."""
        respx.get(f"{API_URL}/users/alice").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(TransportError):
            RemoteValidator(client).username_exists("alice")

    @respx.mock
    def test_timeout_is_not_retried(self, client):
        """A timeout surfaces after a single attempt."""
        route = respx.get(f"{API_URL}/users/alice").mock(
            side_effect=httpx.ReadTimeout("timed out")
        )

        with pytest.raises(TransportError):
            RemoteValidator(client).username_exists("alice")

        assert len(route.calls) == 1


class TestProjectAccessible:
    """Tests for RemoteValidator.project_accessible."""

    @respx.mock
    def test_sends_token_header(self, client):
        """The token is sent as 'token <value>'."""
        route = respx.get(f"{API_URL}/repos/alice/proj").mock(
            return_value=httpx.Response(200, json={"full_name": "alice/proj"})
        )

        assert RemoteValidator(client).project_accessible("alice", "proj", "t1") is True
        assert route.calls[0].request.headers["Authorization"] == "token t1"

    @respx.mock
    @pytest.mark.parametrize("status", [404, 401, 403])
    def test_missing_and_forbidden_are_not_distinguished(self, client, status):
        """404, 401 and 403 all mean inaccessible."""
        respx.get(f"{API_URL}/repos/alice/proj").mock(return_value=httpx.Response(status))

        assert RemoteValidator(client).project_accessible("alice", "proj", "t1") is False

    @respx.mock
    def test_connection_error_raises_transport_error(self, client):
        """Network failures propagate as TransportError."""
        respx.get(f"{API_URL}/repos/alice/proj").mock(side_effect=httpx.ConnectError("down"))

        with pytest.raises(TransportError):
            RemoteValidator(client).project_accessible("alice", "proj", "t1")
