"""Flow graph engine: validation, branching, piping, scoring and runs."""

from __future__ import annotations

from flowform.engine.branching import matches, next_node
from flowform.engine.piping import find_broken_references, resolve_for_display
from flowform.engine.run import Run, RunSession
from flowform.engine.scoring import score
from flowform.engine.validator import Diagnostic, check_publishable, validate

__all__ = [
    "Diagnostic",
    "Run",
    "RunSession",
    "check_publishable",
    "find_broken_references",
    "matches",
    "next_node",
    "resolve_for_display",
    "score",
    "validate",
]
