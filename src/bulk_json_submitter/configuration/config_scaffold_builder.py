"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "bulk-submit.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Run configuration template for bulk-json-submitter.
# Command line flags override every value set here.
# Replace every <REQUIRED> placeholder before running.

target:
  # POST or PUT.
  method: "<REQUIRED>"
  # Absolute endpoint URL. The login URL is derived from its scheme and host.
  url: "<REQUIRED>"

input:
  # JSON file whose top-level value is an array. Relative to this file.
  path: "<REQUIRED>"

auth:
  # Choose exactly one credential mode: email/password login or a token file.
  email: "<REQUIRED>"
  password: "<REQUIRED>"
  # token_file: "<OPTIONAL>"

http:
  # Per-request timeout. Leave unset to keep the HTTP client default.
  # timeout_seconds: 30
"""


def build_placeholder_configuration() -> str:
    """Build a YAML run configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder run configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Run configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
