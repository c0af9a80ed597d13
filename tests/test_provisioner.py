"""Tests for token provisioning and the two-factor flow."""

import base64
import json
import random
from unittest.mock import MagicMock

import httpx
import pytest
import respx

from bug_bridge.github.exceptions import (
    AuthenticationError,
    MalformedTokenResponseError,
    TokenCreationError,
    TransportError,
)
from bug_bridge.github.models import Credentials
from bug_bridge.github.provisioner import (
    FINGERPRINT_LENGTH,
    TokenProvisioner,
    random_fingerprint,
)

AUTH_URL = "https://api.github.com/authorizations"
NOTE = "git-bug - alice/proj"


@pytest.fixture
def otp_prompt():
    return MagicMock(return_value="123456")


@pytest.fixture
def credentials():
    return Credentials(username="alice", password="s3cret")


def otp_challenge():
    return httpx.Response(
        401,
        headers={"X-GitHub-OTP": "required; app"},
        json={"message": "Must specify two-factor authentication OTP code."},
    )


class TestRandomFingerprint:
    """Tests for random_fingerprint."""

    def test_length_and_alphabet(self):
        """Fingerprints are 32 ASCII letters."""
        fp = random_fingerprint(random.Random())

        assert len(fp) == FINGERPRINT_LENGTH == 32
        assert fp.isascii() and fp.isalpha()

    def test_deterministic_with_seeded_generator(self):
        """Same seed, same fingerprint."""
        assert random_fingerprint(random.Random(42)) == random_fingerprint(random.Random(42))

    def test_unique_across_calls(self):
        """Consecutive fingerprints from one generator differ."""
        rng = random.Random(7)
        fingerprints = {random_fingerprint(rng) for _ in range(50)}

        assert len(fingerprints) == 50


class TestCreateToken:
    """Tests for TokenProvisioner.create_token."""

    @respx.mock
    def test_success_without_2fa(self, client, otp_prompt, credentials):
        """A 201 reply yields the token in one request."""
        route = respx.post(AUTH_URL).mock(
            return_value=httpx.Response(201, json={"id": 1, "token": "abc123", "note": NOTE})
        )
        provisioner = TokenProvisioner(client, otp_prompt, rng=random.Random(1))

        record = provisioner.create_token(NOTE, credentials, "repo")

        assert record.token == "abc123"
        assert record.note == NOTE
        assert len(record.fingerprint) == 32
        assert len(route.calls) == 1
        otp_prompt.assert_not_called()

    @respx.mock
    def test_request_body_and_auth(self, client, otp_prompt, credentials):
        """Body carries scope, note and fingerprint; auth is HTTP Basic."""
        route = respx.post(AUTH_URL).mock(return_value=httpx.Response(201, json={"token": "x"}))
        provisioner = TokenProvisioner(client, otp_prompt, rng=random.Random(3))

        record = provisioner.create_token(NOTE, credentials, "user:email")

        request = route.calls[0].request
        body = json.loads(request.content)
        assert body == {
            "scopes": ["user:email"],
            "note": NOTE,
            "fingerprint": record.fingerprint,
        }
        expected = base64.b64encode(b"alice:s3cret").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.headers["Content-Type"] == "application/json"
        assert "X-GitHub-OTP" not in request.headers

    @respx.mock
    def test_otp_challenge_then_success(self, client, otp_prompt, credentials):
        """401 with OTP header triggers one prompt and one retry carrying the code."""
        route = respx.post(AUTH_URL).mock(
            side_effect=[otp_challenge(), httpx.Response(201, json={"token": "abc123"})]
        )
        provisioner = TokenProvisioner(client, otp_prompt, rng=random.Random(5))

        record = provisioner.create_token(NOTE, credentials, "repo")

        assert record.token == "abc123"
        assert len(route.calls) == 2
        assert "X-GitHub-OTP" not in route.calls[0].request.headers
        assert route.calls[1].request.headers["X-GitHub-OTP"] == "123456"
        otp_prompt.assert_called_once()

    @respx.mock
    def test_each_attempt_gets_fresh_fingerprint(self, client, otp_prompt, credentials):
        """The retry is not a byte-identical resend."""
        route = respx.post(AUTH_URL).mock(
            side_effect=[otp_challenge(), httpx.Response(201, json={"token": "abc123"})]
        )
        provisioner = TokenProvisioner(client, otp_prompt, rng=random.Random(5))

        record = provisioner.create_token(NOTE, credentials, "repo")

        first = json.loads(route.calls[0].request.content)["fingerprint"]
        second = json.loads(route.calls[1].request.content)["fingerprint"]
        assert first != second
        assert record.fingerprint == second

    @respx.mock
    def test_second_challenge_is_not_retried(self, client, otp_prompt, credentials):
        """A rejected passcode ends the flow as an authentication failure."""
        route = respx.post(AUTH_URL).mock(side_effect=[otp_challenge(), otp_challenge()])
        provisioner = TokenProvisioner(client, otp_prompt)

        with pytest.raises(AuthenticationError) as exc_info:
            provisioner.create_token(NOTE, credentials, "repo")

        assert exc_info.value.status_code == 401
        assert len(route.calls) == 2
        otp_prompt.assert_called_once()

    @respx.mock
    def test_bad_credentials(self, client, otp_prompt, credentials):
        """401 without an OTP header is not a two-factor challenge."""
        route = respx.post(AUTH_URL).mock(
            return_value=httpx.Response(401, json={"message": "Bad credentials"})
        )
        provisioner = TokenProvisioner(client, otp_prompt)

        with pytest.raises(AuthenticationError) as exc_info:
            provisioner.create_token(NOTE, credentials, "repo")

        assert "Bad credentials" in exc_info.value.body
        assert len(route.calls) == 1
        otp_prompt.assert_not_called()

    @respx.mock
    def test_other_status_reports_code_and_body(self, client, otp_prompt, credentials):
        """Unexpected statuses surface with the raw body."""
        respx.post(AUTH_URL).mock(
            return_value=httpx.Response(422, text='{"message": "Validation Failed"}')
        )
        provisioner = TokenProvisioner(client, otp_prompt)

        with pytest.raises(TokenCreationError) as exc_info:
            provisioner.create_token(NOTE, credentials, "repo")

        assert exc_info.value.status_code == 422
        assert "Validation Failed" in exc_info.value.body
        assert "error creating token 422" in str(exc_info.value)

    @respx.mock
    def test_created_without_token_is_malformed(self, client, otp_prompt, credentials):
        """201 with {} is not a usable reply."""
        respx.post(AUTH_URL).mock(return_value=httpx.Response(201, json={}))
        provisioner = TokenProvisioner(client, otp_prompt)

        with pytest.raises(MalformedTokenResponseError):
            provisioner.create_token(NOTE, credentials, "repo")

    @respx.mock
    def test_created_with_null_token_is_malformed(self, client, otp_prompt, credentials):
        """A null token counts as missing."""
        respx.post(AUTH_URL).mock(return_value=httpx.Response(201, json={"token": None}))
        provisioner = TokenProvisioner(client, otp_prompt)

        with pytest.raises(MalformedTokenResponseError):
            provisioner.create_token(NOTE, credentials, "repo")

    @respx.mock
    def test_unexpected_extra_fields_are_ignored(self, client, otp_prompt, credentials):
        """Only the token matters; odd shapes of other fields are tolerated."""
        respx.post(AUTH_URL).mock(
            return_value=httpx.Response(
                201,
                json={"id": "x", "token": "abc123", "scopes": None, "note": None},
            )
        )
        provisioner = TokenProvisioner(client, otp_prompt)

        record = provisioner.create_token(NOTE, credentials, "repo")

        assert record.token == "abc123"

    @respx.mock
    def test_created_with_invalid_json_is_malformed(self, client, otp_prompt, credentials):
        """201 with a non-JSON body is not a usable reply."""
        respx.post(AUTH_URL).mock(return_value=httpx.Response(201, text="<html>"))
        provisioner = TokenProvisioner(client, otp_prompt)

        with pytest.raises(MalformedTokenResponseError):
            provisioner.create_token(NOTE, credentials, "repo")

    @respx.mock
    def test_transport_error(self, client, otp_prompt, credentials):
        """Network failures are terminal."""
        route = respx.post(AUTH_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))
        provisioner = TokenProvisioner(client, otp_prompt)

        with pytest.raises(TransportError):
            provisioner.create_token(NOTE, credentials, "repo")

        assert len(route.calls) == 1

    @respx.mock
    def test_custom_otp_header(self, client, otp_prompt, credentials):
        """The OTP header name is configurable."""
        route = respx.post(AUTH_URL).mock(
            side_effect=[
                httpx.Response(401, headers={"X-Example-OTP": "required"}),
                httpx.Response(201, json={"token": "abc123"}),
            ]
        )
        provisioner = TokenProvisioner(client, otp_prompt, otp_header="X-Example-OTP")

        provisioner.create_token(NOTE, credentials, "repo")

        assert route.calls[1].request.headers["X-Example-OTP"] == "123456"
