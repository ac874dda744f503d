"""HTTP replay of single array elements."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from bulk_json_submitter.array_streaming.streaming_array_reader import ArrayElement
from bulk_json_submitter.configuration.runtime_settings import RunConfig

from .request_outcomes import RequestOutcome

logger = logging.getLogger(__name__)


class ResponseReporter(Protocol):  # pylint: disable=too-few-public-methods
    """Receives every request outcome for operator visibility."""

    def report(self, outcome: RequestOutcome) -> None: ...


class LoggingResponseReporter:  # pylint: disable=too-few-public-methods
    """Reporter writing response bodies to the module logger."""

    def report(self, outcome: RequestOutcome) -> None:
        logger.info(
            "Element %d -> %s (%s): %s",
            outcome.element_index,
            outcome.status.value,
            outcome.status_code,
            outcome.body if outcome.body is not None else outcome.error_message,
        )


class RequestExecutor:
    """Send one array element per call and classify the result.

    The client is shared by all worker threads; ``httpx.Client`` is safe for
    concurrent use. No exception escapes ``execute``.
    """

    def __init__(
        self,
        config: RunConfig,
        token: str,
        client: httpx.Client,
        *,
        reporter: ResponseReporter | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._reporter = reporter or LoggingResponseReporter()
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def execute(self, element: ArrayElement) -> RequestOutcome:
        outcome = self._send(element)
        if not outcome.ok:
            logger.warning(
                "Request for element %d failed: %s", element.index, outcome.error_message
            )
        self._reporter.report(outcome)
        return outcome

    def _send(self, element: ArrayElement) -> RequestOutcome:
        try:
            request = self._client.build_request(
                self._config.method.value,
                self._config.endpoint_url,
                content=element.raw,
                headers=self._headers,
            )
            response = self._client.send(request)
            body = response.text
        except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as exc:
            return RequestOutcome.request_failed(element.index, exc)

        if response.is_success:
            return RequestOutcome.succeeded(element.index, response.status_code, body)
        return RequestOutcome.response_failed(element.index, response.status_code, body)
