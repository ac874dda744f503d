"""Run execution entities."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from bulk_json_submitter.configuration.runtime_settings import RunConfig
from bulk_json_submitter.request_execution.request_executor import ResponseReporter

ClientFactory = Callable[[RunConfig], httpx.Client]


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one run."""

    run_config: RunConfig
    client_factory: ClientFactory | None = None
    reporter: ResponseReporter | None = None
    cancel_event: threading.Event | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    succeeded: int
    failed: int
    skipped_elements: int
    cancelled: bool = False

    @property
    def dispatched(self) -> int:
        return self.succeeded + self.failed
