"""Bounded dispatcher exports."""

from .bounded_dispatcher import MAX_IN_FLIGHT, BoundedDispatcher
from .outcome_counters import DispatchTotals, OutcomeCounters

__all__ = [
    "MAX_IN_FLIGHT",
    "BoundedDispatcher",
    "DispatchTotals",
    "OutcomeCounters",
]
