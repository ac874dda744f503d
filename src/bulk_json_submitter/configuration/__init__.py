"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import LOGIN_PATH, ConfigurationError, derive_login_url, load_run_config
from .runtime_settings import (
    CredentialSettings,
    HttpMethod,
    LoginCredentials,
    RunConfig,
    TokenFileCredentials,
)

__all__ = [
    "CredentialSettings",
    "HttpMethod",
    "LoginCredentials",
    "RunConfig",
    "TokenFileCredentials",
    "ConfigurationError",
    "LOGIN_PATH",
    "derive_login_url",
    "load_run_config",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
