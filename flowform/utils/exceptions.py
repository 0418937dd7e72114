"""Exception hierarchy for the flow engine's outer edges.

The pure core (validator, branching, piping, scoring, analytics) never
raises for expected control flow; these are reserved for misuse of a run,
malformed wire input and admission rejections.
"""

from __future__ import annotations


class FlowformError(Exception):
    """Base exception for all flowform errors."""


class ConditionFormatError(FlowformError, ValueError):
    """A wire-format edge condition could not be converted."""


class RunStateError(FlowformError):
    """Operation is not valid for the run's current position."""


class UnknownNodeError(RunStateError):
    """The run references a node that is not in its graph snapshot."""


class AdmissionError(FlowformError):
    """Base for submission admission failures."""


class AdmissionLimitError(AdmissionError):
    """Counter exceeded its limit after the atomic increment; the increment was rolled back."""

    def __init__(self, key: str, limit: int, count: int) -> None:
        super().__init__(f"Limit of {limit} reached for {key}")
        self.key = key
        self.limit = limit
        self.count = count
