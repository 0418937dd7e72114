"""Structural validation of a flow graph before publication.

All rules run and accumulate; nothing short-circuits. Errors block
publication, warnings are surfaced to the author.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, Field

from flowform.engine.piping import find_broken_references
from flowform.models.graph import FlowEdge, FlowNode
from flowform.utils.logging import get_logger

logger = get_logger(__name__)

Severity = Literal["error", "warning"]

MISSING_ENTRY = "missing entry"
MULTIPLE_ENTRY = "multiple entry nodes"
MISSING_EXIT = "missing exit"


class Diagnostic(BaseModel):
    severity: Severity
    node_id: str | None = None
    edge_id: str | None = None
    message: str


class PublishCheck(BaseModel):
    publishable: bool
    errors: list[Diagnostic] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)


def validate(nodes: Sequence[FlowNode], edges: Sequence[FlowEdge]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []

    # 1. Exactly one entry node
    entry_count = sum(1 for n in nodes if n.kind == "entry")
    if entry_count == 0:
        diagnostics.append(Diagnostic(severity="error", message=MISSING_ENTRY))
    elif entry_count > 1:
        diagnostics.append(Diagnostic(severity="error", message=MULTIPLE_ENTRY))

    # 2. At least one exit node
    if not any(n.kind == "exit" for n in nodes):
        diagnostics.append(Diagnostic(severity="error", message=MISSING_EXIT))

    # 3. Orphans; a lone node is never flagged
    connected: set[str] = set()
    for edge in edges:
        connected.add(edge.source_node_id)
        connected.add(edge.target_node_id)
    if len(nodes) > 1:
        for node in nodes:
            if node.id not in connected:
                diagnostics.append(Diagnostic(
                    severity="warning",
                    node_id=node.id,
                    message=f'Node "{node.kind}" is not connected to any other node',
                ))

    # 4. Question text must be present
    questions = [n for n in nodes if n.kind == "question"]
    for node in questions:
        if not node.payload.text or not node.payload.text.strip():
            diagnostics.append(Diagnostic(
                severity="error",
                node_id=node.id,
                message="Question text cannot be empty",
            ))

    # 5. Pipe tokens pointing at deleted questions
    existing_ids = {n.id for n in nodes}
    for node in questions:
        broken = find_broken_references(node.payload.text, existing_ids)
        if broken:
            diagnostics.append(Diagnostic(
                severity="warning",
                node_id=node.id,
                message=(
                    f"Question references {len(broken)} deleted question(s): "
                    "piped answers will show fallback text"
                ),
            ))

    return diagnostics


def has_blocking_errors(diagnostics: Sequence[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)


def check_publishable(nodes: Sequence[FlowNode], edges: Sequence[FlowEdge]) -> PublishCheck:
    """Run validation and split the result for the publishing workflow."""
    diagnostics = validate(nodes, edges)
    errors = [d for d in diagnostics if d.severity == "error"]
    warnings = [d for d in diagnostics if d.severity == "warning"]
    logger.info(
        "flow_validated",
        node_count=len(nodes),
        edge_count=len(edges),
        errors=len(errors),
        warnings=len(warnings),
    )
    return PublishCheck(publishable=not errors, errors=errors, warnings=warnings)
