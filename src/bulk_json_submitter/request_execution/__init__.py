"""Request execution exports."""

from .request_executor import LoggingResponseReporter, RequestExecutor, ResponseReporter
from .request_outcomes import OutcomeStatus, RequestOutcome

__all__ = [
    "OutcomeStatus",
    "RequestOutcome",
    "LoggingResponseReporter",
    "RequestExecutor",
    "ResponseReporter",
]
