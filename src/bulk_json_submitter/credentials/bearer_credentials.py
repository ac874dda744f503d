"""Bearer token acquisition strategies."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import httpx

from bulk_json_submitter.configuration.runtime_settings import (
    LoginCredentials,
    RunConfig,
    TokenFileCredentials,
)

logger = logging.getLogger(__name__)

BearerToken = str


class AuthError(Exception):
    """Raised when a bearer token cannot be obtained."""


class CredentialProvider(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for strategies producing a bearer token."""

    def acquire(self) -> BearerToken: ...


class NetworkLoginProvider:  # pylint: disable=too-few-public-methods
    """Exchange email and password for a token at the login endpoint."""

    def __init__(self, credentials: LoginCredentials, client: httpx.Client) -> None:
        self._credentials = credentials
        self._client = client

    def acquire(self) -> BearerToken:
        payload = {"email": self._credentials.email, "password": self._credentials.password}
        try:
            response = self._client.post(self._credentials.login_url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise AuthError(f"error sending login request: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise AuthError(f"login failed with status code: {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise AuthError(f"error decoding login response: {exc}") from exc
        if not isinstance(body, Mapping):
            raise AuthError("error decoding login response: expected a JSON object")
        token = body.get("token", "")
        if not isinstance(token, str):
            raise AuthError("error decoding login response: token must be a string")

        logger.info("Logged in at %s", self._credentials.login_url)
        return _require_header_safe(token, "login response")


class TokenFileProvider:  # pylint: disable=too-few-public-methods
    """Read a pre-issued token from local storage."""

    def __init__(self, token_path: Path) -> None:
        self._token_path = token_path

    def acquire(self) -> BearerToken:
        try:
            text = self._token_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise AuthError(f"error reading token file {self._token_path}: {exc}") from exc
        logger.info("Loaded bearer token from %s", self._token_path)
        return _require_header_safe(text.strip(), f"token file {self._token_path}")


def credential_provider_for(config: RunConfig, client: httpx.Client) -> CredentialProvider:
    """Return the credential strategy matching the configured credential mode."""
    credentials = config.credentials
    if isinstance(credentials, TokenFileCredentials):
        return TokenFileProvider(credentials.token_path)
    return NetworkLoginProvider(credentials, client)


def acquire_token(config: RunConfig, client: httpx.Client) -> BearerToken:
    """Acquire a bearer token with a single attempt, raising AuthError on failure."""
    return credential_provider_for(config, client).acquire()


def _require_header_safe(token: BearerToken, source: str) -> BearerToken:
    # Sent in an HTTP header, which only carries printable ASCII.
    if not token.isascii() or not token.isprintable():
        raise AuthError(f"{source}: token contains characters not allowed in an HTTP header")
    return token
