"""Answer piping: ``{{nodeId:label}}`` tokens that embed earlier answers in question text.

The label is an author-supplied fallback shown when the referenced question
has no recorded answer. Resolution never fails: unknown or deleted targets
degrade to their label.
"""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from flowform.models.graph import FlowGraph, QuestionNode
from flowform.utils.values import is_empty_answer, join_values

PIPE_PATTERN = re.compile(r"\{\{([^:}]+):([^}]+)\}\}")


@dataclass(frozen=True)
class PipeToken:
    node_id: str
    label: str
    start: int
    end: int


def tokenize(text: str) -> list[PipeToken]:
    """Find every pipe token in ``text``, in order of appearance."""
    if not text:
        return []
    return [
        PipeToken(node_id=m.group(1), label=m.group(2), start=m.start(), end=m.end())
        for m in PIPE_PATTERN.finditer(text)
    ]


def _substitute(text: str, tokens: list[PipeToken], render: Callable[[PipeToken], str]) -> str:
    if not tokens:
        return text
    parts: list[str] = []
    cursor = 0
    for token in tokens:
        parts.append(text[cursor:token.start])
        parts.append(render(token))
        cursor = token.end
    parts.append(text[cursor:])
    return "".join(parts)


def resolve_for_display(text: str, answered_values: Mapping[str, Any]) -> str:
    """Replace each token with the recorded answer, or its label when there is none.

    List answers are joined with ``", "``.
    """

    def render(token: PipeToken) -> str:
        value = answered_values.get(token.node_id)
        if is_empty_answer(value):
            return token.label
        return join_values(value, ", ")

    return _substitute(text, tokenize(text), render)


def editor_display_text(text: str) -> str:
    """Render tokens as ``@label`` for the editor canvas."""
    return _substitute(text, tokenize(text), lambda token: f"@{token.label}")


def has_references(text: str) -> bool:
    return bool(text) and PIPE_PATTERN.search(text) is not None


def find_broken_references(text: str, existing_node_ids: Iterable[str]) -> list[str]:
    """Referenced node ids missing from ``existing_node_ids``, in token order."""
    existing = set(existing_node_ids)
    return [t.node_id for t in tokenize(text) if t.node_id not in existing]


def build_token(node_id: str, label: str) -> str:
    return f"{{{{{node_id}:{label}}}}}"


def ancestor_question_nodes(node_id: str, graph: FlowGraph) -> list[QuestionNode]:
    """Question nodes upstream of ``node_id`` (reverse BFS), nearest first.

    These are the legal insertion candidates for a pipe token in the
    question at ``node_id``.
    """
    nodes = graph.nodes_by_id()
    visited: set[str] = set()
    queue: deque[str] = deque([node_id])
    ancestors: list[QuestionNode] = []

    while queue:
        current = queue.popleft()
        for edge in graph.incoming_edges(current):
            source = edge.source_node_id
            if source in visited:
                continue
            visited.add(source)
            queue.append(source)
            node = nodes.get(source)
            if node is not None and node.kind == "question" and source != node_id:
                ancestors.append(node)

    return ancestors
