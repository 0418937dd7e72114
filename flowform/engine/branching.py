"""Branching resolution: choose the next node from a respondent's answer.

Outgoing edges are considered in authoring order. The first conditional edge
whose condition matches wins; otherwise the default (unconditioned) edge is
taken; otherwise the flow dead-ends and ``None`` is returned. Conditions
never raise on a type mismatch, they just don't match.

A list operand matches when any element matches, for every comparator, so
``not_equals ["a", "b"]`` matches ``"a"``. ``greater_than``/``less_than``
are false for a blank or non-numeric answer; the browser runtime coerced
``""`` to 0 instead.
"""

from __future__ import annotations

from typing import Any

from flowform.models.graph import (
    FlowGraph,
    MultiOptionMatch,
    ScalarCompare,
    SingleOptionMatch,
)
from flowform.utils.values import as_list, to_number, to_text


def _selected_ids(answer: Any) -> set[str]:
    return {to_text(v) for v in as_list(answer)}


def _match_multi(condition: MultiOptionMatch, answer: Any) -> bool:
    selected = _selected_ids(answer)
    expected = set(condition.option_ids)
    if condition.match_mode == "all":
        return expected <= selected
    if condition.match_mode == "exactly":
        return expected == selected
    return bool(expected & selected)


def _match_single(condition: SingleOptionMatch, answer: Any) -> bool:
    selected = as_list(answer)
    if len(selected) != 1:
        return False
    return to_text(selected[0]) == condition.option_id


def _compare_one(comparator: str, answer: Any, operand: Any) -> bool:
    if comparator in ("greater_than", "less_than"):
        left = to_number(answer)
        right = to_number(operand)
        if left is None or right is None:
            return False
        return left > right if comparator == "greater_than" else left < right

    expected = to_text(operand)
    if comparator == "contains":
        if isinstance(answer, (list, tuple)):
            haystack = ",".join(to_text(v) for v in answer)
        else:
            haystack = to_text(answer)
        return expected.lower() in haystack.lower()

    if isinstance(answer, (list, tuple)):
        hit = any(to_text(v) == expected for v in answer)
    else:
        hit = to_text(answer) == expected
    return hit if comparator == "equals" else not hit


def _match_scalar(condition: ScalarCompare, answer: Any) -> bool:
    if answer is None:
        return False
    operands = condition.operand if isinstance(condition.operand, list) else [condition.operand]
    return any(_compare_one(condition.comparator, answer, op) for op in operands)


def matches(condition: SingleOptionMatch | MultiOptionMatch | ScalarCompare, answer: Any) -> bool:
    """Evaluate one edge condition against an answer value."""
    if isinstance(condition, MultiOptionMatch):
        return _match_multi(condition, answer)
    if isinstance(condition, SingleOptionMatch):
        return _match_single(condition, answer)
    if isinstance(condition, ScalarCompare):
        return _match_scalar(condition, answer)
    return False


def next_node(graph: FlowGraph, from_node_id: str, answer: Any = None) -> str | None:
    """Return the id of the node that follows ``from_node_id``, or ``None`` on a dead end."""
    outgoing = graph.outgoing_edges(from_node_id)

    default_edge = None
    for edge in outgoing:
        if edge.condition is None:
            if default_edge is None:
                default_edge = edge
            continue
        if matches(edge.condition, answer):
            return edge.target_node_id

    if default_edge is not None:
        return default_edge.target_node_id
    return None
