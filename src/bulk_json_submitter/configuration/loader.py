"""Run configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml

from .runtime_settings import (
    CredentialSettings,
    HttpMethod,
    LoginCredentials,
    RunConfig,
    TokenFileCredentials,
)

LOGIN_PATH = "/users/login"


class ConfigurationError(Exception):
    """Raised when run settings are missing or invalid."""


def load_run_config(
    cli_values: Mapping[str, Any], config_path: Path | str | None = None
) -> RunConfig:
    """Merge CLI values over an optional configuration file and validate the result.

    A credential mode given on the command line replaces the file's credential
    settings rather than combining with them.

    Args:
      cli_values: Values keyed by flag name (method, url, input, email, password,
        token, timeout). ``None`` means the flag was not given.
      config_path: Optional YAML/JSON configuration file supplying defaults.

    Returns:
      The validated, immutable run configuration.

    Raises:
      ConfigurationError: If a required value is missing or a value is invalid.
    """
    values = _read_configuration_file(config_path) if config_path else {}
    if cli_values.get("token") is not None:
        values.pop("email", None)
        values.pop("password", None)
    if cli_values.get("email") is not None or cli_values.get("password") is not None:
        values.pop("token", None)
    for key, value in cli_values.items():
        if value is not None:
            values[key] = value

    method_raw = _optional_string(values.get("method"), "method")
    endpoint_url = _optional_string(values.get("url"), "url")
    input_raw = _optional_string(values.get("input"), "input")
    email = _optional_string(values.get("email"), "email")
    password = _optional_string(values.get("password"), "password", strip=False)
    token_raw = _optional_string(values.get("token"), "token")

    if method_raw is not None:
        _parse_method(method_raw)
    missing = [
        name
        for name, value in (("method", method_raw), ("url", endpoint_url), ("input", input_raw))
        if value is None
    ]
    if token_raw is None:
        missing.extend(
            name for name, value in (("email", email), ("password", password)) if value is None
        )
    if missing or method_raw is None or endpoint_url is None or input_raw is None:
        raise ConfigurationError(f"missing required parameters: {', '.join(missing)}")

    _validate_endpoint_url(endpoint_url)
    credentials = _build_credentials(endpoint_url, email=email, password=password, token=token_raw)
    return RunConfig(
        method=_parse_method(method_raw),
        endpoint_url=endpoint_url,
        input_path=Path(input_raw),
        credentials=credentials,
        request_timeout_seconds=_optional_positive_number(values.get("timeout"), "timeout"),
    )


def derive_login_url(endpoint_url: str) -> str:
    """Return ``scheme://host[:port]/users/login`` for the given endpoint URL."""
    parts = urlsplit(endpoint_url)
    host = parts.netloc.rpartition("@")[2]
    return f"{parts.scheme}://{host}{LOGIN_PATH}"


def _build_credentials(
    endpoint_url: str, *, email: str | None, password: str | None, token: str | None
) -> CredentialSettings:
    if token is not None:
        if email is not None or password is not None:
            raise ConfigurationError("Use either --token or --email/--password, not both.")
        return TokenFileCredentials(token_path=Path(token))
    if email is None or password is None:
        raise ConfigurationError("missing required parameters: email, password")
    return LoginCredentials(
        email=email, password=password, login_url=derive_login_url(endpoint_url)
    )


def _parse_method(value: str) -> HttpMethod:
    try:
        return HttpMethod(value.upper())
    except ValueError as exc:
        raise ConfigurationError(f"invalid method: {value}. Must be POST or PUT") from exc


def _validate_endpoint_url(value: str) -> None:
    try:
        parts = urlsplit(value)
        _ = parts.port
    except ValueError as exc:
        raise ConfigurationError(f"invalid url: {value} ({exc})") from exc
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ConfigurationError(f"url must be an absolute http(s) URL: {value}")


def _read_configuration_file(config_path: Path | str) -> dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Failed to read configuration file {path}: {exc}") from exc
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    target = _optional_mapping(parsed.get("target"), "target")
    input_section = _optional_mapping(parsed.get("input"), "input")
    auth = _optional_mapping(parsed.get("auth"), "auth")
    http = _optional_mapping(parsed.get("http"), "http")

    values: dict[str, Any] = {
        "method": target.get("method"),
        "url": target.get("url"),
        "email": auth.get("email"),
        "password": auth.get("password"),
        "timeout": http.get("timeout_seconds"),
    }
    input_path = _optional_string(input_section.get("path"), "input.path")
    if input_path is not None:
        values["input"] = str(_resolve_path(path.parent, input_path))
    token_path = _optional_string(auth.get("token_file"), "auth.token_file")
    if token_path is not None:
        values["token"] = str(_resolve_path(path.parent, token_path))
    return {key: value for key, value in values.items() if value is not None}


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _optional_string(value: Any, field_name: str, *, strip: bool = True) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    if not value.strip():
        return None
    return value.strip() if strip else value


def _optional_positive_number(value: Any, field_name: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigurationError(f"{field_name} must be a number.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return float(value)
