"""Request execution domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutcomeStatus(str, Enum):
    """Classification of one dispatched request."""

    SUCCEEDED = "succeeded"
    REQUEST_FAILED = "request_failed"
    RESPONSE_FAILED = "response_failed"


@dataclass(frozen=True)
class RequestOutcome:
    """Outcome of replaying one array element against the endpoint."""

    element_index: int
    status: OutcomeStatus
    status_code: int | None
    body: str | None
    error_message: str | None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED

    @staticmethod
    def succeeded(element_index: int, status_code: int, body: str) -> RequestOutcome:
        return RequestOutcome(
            element_index=element_index,
            status=OutcomeStatus.SUCCEEDED,
            status_code=status_code,
            body=body,
            error_message=None,
        )

    @staticmethod
    def request_failed(element_index: int, error: Exception) -> RequestOutcome:
        return RequestOutcome(
            element_index=element_index,
            status=OutcomeStatus.REQUEST_FAILED,
            status_code=None,
            body=None,
            error_message=str(error) or type(error).__name__,
        )

    @staticmethod
    def response_failed(element_index: int, status_code: int, body: str) -> RequestOutcome:
        return RequestOutcome(
            element_index=element_index,
            status=OutcomeStatus.RESPONSE_FAILED,
            status_code=status_code,
            body=body,
            error_message=f"unexpected status code: {status_code}",
        )
