"""Bounded-concurrency fan-out of streamed elements."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Generic, TypeVar

from .outcome_counters import DispatchTotals, OutcomeCounters

logger = logging.getLogger(__name__)

MAX_IN_FLIGHT = 10

_CANCEL_POLL_SECONDS = 0.1

ElementT = TypeVar("ElementT")


class BoundedDispatcher(Generic[ElementT]):
    """Launch one task per element while holding at most ``max_in_flight`` tickets.

    The dispatch loop is the only reader of ``elements``. It takes a ticket
    before each launch and blocks while none is free, so launch order follows
    input order and no more than ``max_in_flight`` calls run at once. Workers
    release their ticket when the call finishes, whatever the outcome.
    ``run`` returns only after every launched task has completed.
    """

    def __init__(
        self,
        execute: Callable[[ElementT], bool],
        *,
        max_in_flight: int = MAX_IN_FLIGHT,
    ) -> None:
        if max_in_flight < 1:
            raise ValueError("max_in_flight must be greater than zero.")
        self._execute = execute
        self._max_in_flight = max_in_flight

    @property
    def max_in_flight(self) -> int:
        return self._max_in_flight

    def run(
        self,
        elements: Iterable[ElementT],
        *,
        cancel_event: threading.Event | None = None,
    ) -> DispatchTotals:
        """Dispatch every element and return the drained totals.

        Setting ``cancel_event`` (or interrupting the dispatch thread) stops new
        launches; tasks already in flight still run to completion and are counted.
        """
        counters = OutcomeCounters()
        tickets = threading.BoundedSemaphore(self._max_in_flight)
        cancelled = False
        launched = 0
        with ThreadPoolExecutor(
            max_workers=self._max_in_flight, thread_name_prefix="bulk-dispatch"
        ) as executor:
            try:
                for element in elements:
                    if not _acquire_ticket(tickets, cancel_event):
                        cancelled = True
                        break
                    # The queued task releases the ticket. The pool is scoped to this run.
                    executor.submit(self._run_task, element, counters, tickets)
                    launched += 1
            except KeyboardInterrupt:
                cancelled = True
            if cancelled:
                logger.warning(
                    "Dispatch cancelled after %d launches; draining in-flight requests", launched
                )

        totals = counters.snapshot(cancelled=cancelled)
        logger.info(
            "Dispatch drained: %d launched, %d succeeded, %d failed",
            launched,
            totals.succeeded,
            totals.failed,
        )
        return totals

    def _run_task(
        self,
        element: ElementT,
        counters: OutcomeCounters,
        tickets: threading.BoundedSemaphore,
    ) -> None:
        try:
            try:
                ok = self._execute(element)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Unexpected error while dispatching an element")
                ok = False
            counters.record(ok)
        finally:
            tickets.release()


def _acquire_ticket(
    tickets: threading.BoundedSemaphore, cancel_event: threading.Event | None
) -> bool:
    if cancel_event is None:
        tickets.acquire()
        return True
    while not cancel_event.is_set():
        if tickets.acquire(timeout=_CANCEL_POLL_SECONDS):
            if cancel_event.is_set():
                tickets.release()
                return False
            return True
    return False
