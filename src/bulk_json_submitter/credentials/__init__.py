"""Credential provider exports."""

from .bearer_credentials import (
    AuthError,
    BearerToken,
    CredentialProvider,
    NetworkLoginProvider,
    TokenFileProvider,
    acquire_token,
    credential_provider_for,
)

__all__ = [
    "AuthError",
    "BearerToken",
    "CredentialProvider",
    "NetworkLoginProvider",
    "TokenFileProvider",
    "acquire_token",
    "credential_provider_for",
]
