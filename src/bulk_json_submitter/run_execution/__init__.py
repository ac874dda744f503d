"""Run execution domain exports."""

from .bulk_submission_use_case import (
    RunExecutionError,
    create_http_client,
    execute_bulk_submission_run,
)
from .run_contracts import ClientFactory, RunOutcome, RunRequest

__all__ = [
    "ClientFactory",
    "RunRequest",
    "RunOutcome",
    "RunExecutionError",
    "create_http_client",
    "execute_bulk_submission_run",
]
