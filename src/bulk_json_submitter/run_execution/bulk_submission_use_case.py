"""Run execution use-case service."""

from __future__ import annotations

import logging

import httpx

from bulk_json_submitter.array_streaming import (
    ArrayElement,
    DocumentParseError,
    InputOpenError,
    open_array_stream,
)
from bulk_json_submitter.configuration.runtime_settings import RunConfig
from bulk_json_submitter.credentials import AuthError, acquire_token
from bulk_json_submitter.dispatching import BoundedDispatcher
from bulk_json_submitter.request_execution import RequestExecutor

from .run_contracts import RunOutcome, RunRequest

logger = logging.getLogger(__name__)


class RunExecutionError(Exception):
    """Raised when a run cannot start dispatching."""


def execute_bulk_submission_run(request: RunRequest) -> RunOutcome:
    """Authenticate, stream the input array and dispatch every element.

    Failures before dispatch starts raise RunExecutionError and send no element
    requests. A read failure mid-stream also raises RunExecutionError, after the
    requests already in flight have drained. Per-element failures are counted,
    never raised.
    """
    config = request.run_config
    client_factory = request.client_factory or create_http_client
    with client_factory(config) as client:
        try:
            token = acquire_token(config, client)
        except AuthError as exc:
            raise RunExecutionError(f"Error logging in: {exc}") from exc

        try:
            stream = open_array_stream(config.input_path)
        except (InputOpenError, DocumentParseError) as exc:
            raise RunExecutionError(str(exc)) from exc
        logger.info("Streaming elements from %s", config.input_path)

        executor = RequestExecutor(config, token, client, reporter=request.reporter)
        dispatcher: BoundedDispatcher[ArrayElement] = BoundedDispatcher(
            lambda element: executor.execute(element).ok
        )
        with stream:
            try:
                totals = dispatcher.run(stream, cancel_event=request.cancel_event)
            except OSError as exc:
                raise RunExecutionError(f"error reading input: {exc}") from exc

    return RunOutcome(
        succeeded=totals.succeeded,
        failed=totals.failed,
        skipped_elements=stream.skipped_count,
        cancelled=totals.cancelled,
    )


def create_http_client(config: RunConfig) -> httpx.Client:
    """Build the HTTP client shared by login and every dispatched request."""
    if config.request_timeout_seconds is None:
        return httpx.Client()
    return httpx.Client(timeout=config.request_timeout_seconds)
