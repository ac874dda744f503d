"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
import threading

import click

from bulk_json_submitter.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_run_config,
    write_placeholder_configuration,
)
from bulk_json_submitter.request_execution import RequestOutcome
from bulk_json_submitter.run_execution import (
    RunExecutionError,
    RunOutcome,
    RunRequest,
    execute_bulk_submission_run,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class ConsoleResponseReporter:  # pylint: disable=too-few-public-methods
    """Print each response body to stdout as its request completes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def report(self, outcome: RequestOutcome) -> None:
        if outcome.body is not None:
            line = f"Response: {outcome.body}"
        else:
            line = f"Error sending request: {outcome.error_message}"
        with self._lock:
            click.echo(line)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="bulk-json-submitter")
@click.option("--method", help="HTTP method (POST or PUT)")
@click.option("--url", help="Endpoint URL")
@click.option(
    "--input",
    "input_path",
    type=click.Path(path_type=str),
    help="Path to the JSON input file",
)
@click.option("--email", help="Email for login")
@click.option("--password", help="Password for login")
@click.option(
    "--token",
    "token_path",
    type=click.Path(path_type=str),
    help="Path to a file holding a pre-issued bearer token (replaces --email/--password)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=str),
    help="Optional YAML/JSON run configuration; flags override its values",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Per-request timeout in seconds (defaults to the HTTP client default)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Diagnostic log level written to stderr",
)
@click.option(
    "--write-config",
    "write_config_path",
    is_flag=False,
    flag_value=DEFAULT_CONFIG_FILENAME,
    default=None,
    type=click.Path(path_type=str),
    help=f"Write a placeholder run configuration (default: {DEFAULT_CONFIG_FILENAME}) and exit",
)
@click.pass_context
def cli(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    *,
    method: str | None,
    url: str | None,
    input_path: str | None,
    email: str | None,
    password: str | None,
    token_path: str | None,
    config_path: str | None,
    timeout: float | None,
    log_level: str,
    write_config_path: str | None,
) -> None:
    """Replay every element of a JSON array file as an HTTP request."""
    logging.basicConfig(
        level=log_level.upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if write_config_path:
        try:
            resolved_output = write_placeholder_configuration(write_config_path)
        except (FileExistsError, OSError) as exc:
            raise CliError(str(exc)) from exc
        click.echo(str(resolved_output))
        return

    try:
        run_config = load_run_config(
            {
                "method": method,
                "url": url,
                "input": input_path,
                "email": email,
                "password": password,
                "token": token_path,
                "timeout": timeout,
            },
            config_path,
        )
    except ConfigurationError as exc:
        raise CliError(f"{exc}\n{ctx.get_usage()}") from exc

    try:
        outcome = execute_bulk_submission_run(
            RunRequest(run_config=run_config, reporter=ConsoleResponseReporter())
        )
    except RunExecutionError as exc:
        raise CliError(str(exc), exit_code=0) from exc
    _echo_summary(outcome)


def _echo_summary(outcome: RunOutcome) -> None:
    click.echo("\nExecution Summary:")
    click.echo(f"Successful requests: {outcome.succeeded}")
    click.echo(f"Failed requests: {outcome.failed}")
    if outcome.skipped_elements:
        click.echo(f"Skipped malformed elements: {outcome.skipped_elements}")
    if outcome.cancelled:
        click.echo("Dispatch was cancelled before the input was exhausted.")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
