"""Creation of scoped access tokens through the GitHub authorizations API.

The exchange is a small state machine::

    NO_OTP --(401 + OTP challenge header)--> WITH_OTP

The transition happens at most once per ``create_token`` call. A 201
reply in either state yields the token; a second challenge, or any
401 without one, is an authentication failure.
"""

import logging
import random
import string
from enum import Enum
from typing import Callable

import httpx
from pydantic import ValidationError

from bug_bridge.github.exceptions import (
    AuthenticationError,
    MalformedTokenResponseError,
    TokenCreationError,
    TransportError,
)
from bug_bridge.github.models import AuthorizationResponse, Credentials, TokenRecord

logger = logging.getLogger(__name__)

AUTHORIZATIONS_ENDPOINT = "/authorizations"
DEFAULT_OTP_HEADER = "X-GitHub-OTP"
FINGERPRINT_LENGTH = 32
FINGERPRINT_ALPHABET = string.ascii_letters


class OTPState(Enum):
    """Two-factor state of a token request."""

    NO_OTP = "no_otp"
    WITH_OTP = "with_otp"


def random_fingerprint(rng: random.Random) -> str:
    """Random nonce telling apart otherwise identical token requests.

    Only needs to avoid accidental collisions, so a plain PRNG is enough.
    """
    return "".join(rng.choice(FINGERPRINT_ALPHABET) for _ in range(FINGERPRINT_LENGTH))


class TokenProvisioner:
    """Mints access tokens with username/password and optional 2FA."""

    def __init__(
        self,
        client: httpx.Client,
        otp_prompt: Callable[[], str],
        rng: random.Random | None = None,
        otp_header: str = DEFAULT_OTP_HEADER,
    ):
        """Initialize the provisioner.

        Args:
            client: HTTP client configured with the API base URL and timeout
            otp_prompt: Called once to obtain a passcode when challenged
            rng: Source of fingerprints; a fresh generator if omitted
            otp_header: Header used for the OTP challenge and answer
        """
        self._client = client
        self._otp_prompt = otp_prompt
        self._rng = rng or random.Random()
        self._otp_header = otp_header

    def _post(self, note: str, credentials: Credentials, scope: str) -> tuple[httpx.Response, str]:
        fingerprint = random_fingerprint(self._rng)
        headers = {"Content-Type": "application/json"}
        if credentials.otp_code:
            headers[self._otp_header] = credentials.otp_code

        try:
            response = self._client.post(
                AUTHORIZATIONS_ENDPOINT,
                json={"scopes": [scope], "note": note, "fingerprint": fingerprint},
                headers=headers,
                auth=(credentials.username, credentials.password),
            )
        except httpx.RequestError as e:
            logger.error(f"Token request failed: {e}")
            raise TransportError(f"Could not reach {AUTHORIZATIONS_ENDPOINT}: {e}") from e

        logger.debug(f"POST {AUTHORIZATIONS_ENDPOINT} -> {response.status_code}")
        return response, fingerprint

    def _is_otp_challenge(self, response: httpx.Response) -> bool:
        return (
            response.status_code == httpx.codes.UNAUTHORIZED
            and bool(response.headers.get(self._otp_header))
        )

    def create_token(self, note: str, credentials: Credentials, scope: str) -> TokenRecord:
        """Create an access token.

        Args:
            note: Label stored with the token on the remote side
            credentials: Username and password; ``otp_code`` is filled in
                if the account asks for a passcode
            scope: Scope to request

        Returns:
            TokenRecord of the created token

        Raises:
            AuthenticationError: Credentials or passcode rejected
            MalformedTokenResponseError: 201 reply without a token
            TokenCreationError: Any other unexpected status
            TransportError: Network failure or timeout
        """
        state = OTPState.WITH_OTP if credentials.otp_code else OTPState.NO_OTP

        while True:
            response, fingerprint = self._post(note, credentials, scope)

            if state is OTPState.NO_OTP and self._is_otp_challenge(response):
                logger.info("Two-factor authentication required")
                credentials.otp_code = self._otp_prompt()
                state = OTPState.WITH_OTP
                continue

            break

        if response.status_code == httpx.codes.CREATED:
            token = _decode_token(response)
            logger.info(f"Created token '{note}'")
            return TokenRecord(token=token, note=note, fingerprint=fingerprint)

        if response.status_code == httpx.codes.UNAUTHORIZED:
            if state is OTPState.WITH_OTP:
                message = "two-factor authentication code rejected"
            else:
                message = "bad credentials"
            raise AuthenticationError(
                f"{message} ({response.status_code}): {response.text}",
                response.status_code,
                response.text,
            )

        raise TokenCreationError(response.status_code, response.text)


def _decode_token(response: httpx.Response) -> str:
    try:
        data = AuthorizationResponse.model_validate_json(response.content)
    except ValidationError as e:
        raise MalformedTokenResponseError(f"invalid token response: {response.text}") from e

    if not data.token:
        raise MalformedTokenResponseError(f"no token found in response: {response.text}")

    return data.token
