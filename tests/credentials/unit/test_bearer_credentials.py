"""Credential provider tests."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from bulk_json_submitter.configuration.runtime_settings import (
    HttpMethod,
    LoginCredentials,
    RunConfig,
    TokenFileCredentials,
)
from bulk_json_submitter.credentials.bearer_credentials import (
    AuthError,
    NetworkLoginProvider,
    TokenFileProvider,
    acquire_token,
    credential_provider_for,
)

LOGIN_URL = "https://api.example.com/users/login"


def _login_credentials() -> LoginCredentials:
    return LoginCredentials(email="ops@example.com", password="secret", login_url=LOGIN_URL)


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _run_config(credentials) -> RunConfig:
    return RunConfig(
        method=HttpMethod.POST,
        endpoint_url="https://api.example.com/v1/items",
        input_path=Path("items.json"),
        credentials=credentials,
    )


def test_network_login_posts_credentials_and_returns_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"token": "abc123"})

    with _client(handler) as client:
        token = NetworkLoginProvider(_login_credentials(), client).acquire()

    assert token == "abc123"
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == LOGIN_URL
    assert seen[0].headers["content-type"] == "application/json"
    assert json.loads(seen[0].content) == {"email": "ops@example.com", "password": "secret"}


def test_network_login_rejects_non_200_status() -> None:
    with _client(lambda request: httpx.Response(401, json={"error": "denied"})) as client:
        with pytest.raises(AuthError, match="login failed with status code: 401"):
            NetworkLoginProvider(_login_credentials(), client).acquire()


def test_network_login_requires_exactly_200() -> None:
    with _client(lambda request: httpx.Response(201, json={"token": "abc"})) as client:
        with pytest.raises(AuthError, match="status code: 201"):
            NetworkLoginProvider(_login_credentials(), client).acquire()


def test_network_login_rejects_undecodable_body() -> None:
    with _client(lambda request: httpx.Response(200, text="<html>oops</html>")) as client:
        with pytest.raises(AuthError, match="error decoding login response"):
            NetworkLoginProvider(_login_credentials(), client).acquire()


def test_network_login_rejects_non_object_body() -> None:
    with _client(lambda request: httpx.Response(200, json=["abc"])) as client:
        with pytest.raises(AuthError, match="expected a JSON object"):
            NetworkLoginProvider(_login_credentials(), client).acquire()


def test_network_login_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(AuthError, match="error sending login request"):
            NetworkLoginProvider(_login_credentials(), client).acquire()


def test_network_login_is_a_single_attempt() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(503)

    with _client(handler) as client:
        with pytest.raises(AuthError):
            NetworkLoginProvider(_login_credentials(), client).acquire()

    assert len(calls) == 1


def test_token_file_is_read_and_trimmed(tmp_path: Path) -> None:
    token_path = tmp_path / "token.txt"
    token_path.write_text("  pre-issued-token\n\n", encoding="utf-8")

    assert TokenFileProvider(token_path).acquire() == "pre-issued-token"


def test_missing_token_file_raises_auth_error(tmp_path: Path) -> None:
    with pytest.raises(AuthError, match="error reading token file"):
        TokenFileProvider(tmp_path / "missing.txt").acquire()


def test_provider_selection_follows_credential_mode(tmp_path: Path) -> None:
    with _client(lambda request: httpx.Response(500)) as client:
        token_provider = credential_provider_for(
            _run_config(TokenFileCredentials(token_path=tmp_path / "token.txt")), client
        )
        login_provider = credential_provider_for(_run_config(_login_credentials()), client)

    assert isinstance(token_provider, TokenFileProvider)
    assert isinstance(login_provider, NetworkLoginProvider)


def test_token_file_mode_makes_no_network_call(tmp_path: Path) -> None:
    token_path = tmp_path / "token.txt"
    token_path.write_text("file-token", encoding="utf-8")

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no network call expected")

    with _client(handler) as client:
        token = acquire_token(_run_config(TokenFileCredentials(token_path=token_path)), client)

    assert token == "file-token"


def test_network_login_wraps_invalid_login_url() -> None:
    credentials = LoginCredentials(
        email="ops@example.com", password="secret", login_url="http://localhost:abc/users/login"
    )

    with _client(lambda request: httpx.Response(200, json={"token": "t"})) as client:
        with pytest.raises(AuthError, match="error sending login request"):
            NetworkLoginProvider(credentials, client).acquire()


def test_network_login_rejects_token_unusable_in_header() -> None:
    with _client(lambda request: httpx.Response(200, json={"token": "tök"})) as client:
        with pytest.raises(AuthError, match="not allowed in an HTTP header"):
            NetworkLoginProvider(_login_credentials(), client).acquire()


def test_token_file_with_non_ascii_token_raises_auth_error(tmp_path: Path) -> None:
    token_path = tmp_path / "token.txt"
    token_path.write_text("tök\n", encoding="utf-8")

    with pytest.raises(AuthError, match="not allowed in an HTTP header"):
        TokenFileProvider(token_path).acquire()
