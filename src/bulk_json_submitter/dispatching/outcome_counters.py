"""Thread-safe aggregation of per-request outcomes."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class DispatchTotals:
    """Counters observed after a dispatch has drained."""

    succeeded: int
    failed: int
    cancelled: bool = False

    @property
    def dispatched(self) -> int:
        return self.succeeded + self.failed


class OutcomeCounters:
    """Monotonic success/failure counters shared by all dispatch workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._succeeded = 0
        self._failed = 0

    def record(self, ok: bool) -> None:
        with self._lock:
            if ok:
                self._succeeded += 1
            else:
                self._failed += 1

    def snapshot(self, *, cancelled: bool = False) -> DispatchTotals:
        with self._lock:
            return DispatchTotals(
                succeeded=self._succeeded, failed=self._failed, cancelled=cancelled
            )
