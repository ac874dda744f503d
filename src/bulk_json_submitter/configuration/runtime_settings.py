"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class HttpMethod(str, Enum):
    """HTTP methods allowed for replaying array elements."""

    POST = "POST"
    PUT = "PUT"


@dataclass(frozen=True)
class LoginCredentials:
    """Network-login credential settings."""

    email: str
    password: str
    login_url: str


@dataclass(frozen=True)
class TokenFileCredentials:
    """Pre-issued bearer token stored in a local file."""

    token_path: Path


CredentialSettings = LoginCredentials | TokenFileCredentials


@dataclass(frozen=True)
class RunConfig:
    """Immutable run configuration shared by every dispatched request."""

    method: HttpMethod
    endpoint_url: str
    input_path: Path
    credentials: CredentialSettings
    request_timeout_seconds: float | None = None
