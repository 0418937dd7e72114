"""Node and edge constructors with caller-supplied id generation."""

from __future__ import annotations

import itertools
import uuid
from typing import Protocol

from flowform.models.graph import (
    EdgeCondition,
    EntryNode,
    EntryPayload,
    ExitNode,
    ExitPayload,
    FlowEdge,
    Position,
    QuestionKind,
    QuestionNode,
    QuestionOption,
    QuestionPayload,
)


class IdGenerator(Protocol):
    def __call__(self, prefix: str) -> str: ...


class UuidIdGenerator:
    """Ids of the form ``<prefix>-<uuid4 hex>``."""

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex}"


class CounterIdGenerator:
    """Deterministic ``<prefix>-<n>`` ids; one counter per generator instance."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def __call__(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"


def create_entry_node(new_id: IdGenerator, position: Position | None = None) -> EntryNode:
    return EntryNode(
        id=new_id("entry"),
        payload=EntryPayload(
            title="Welcome",
            description="Thank you for taking this assessment.",
            button_label="Start",
        ),
        position=position,
    )


def _options(new_id: IdGenerator, *texts: str) -> list[QuestionOption]:
    return [QuestionOption(id=new_id("opt"), text=t) for t in texts]


def default_question_payload(
    question_kind: QuestionKind,
    new_id: IdGenerator,
) -> QuestionPayload:
    """Editor defaults for a freshly created question of ``question_kind``."""
    payload = QuestionPayload(
        question_kind=question_kind,
        text="Your question here",
        required=True,
    )

    if question_kind in ("multiple_choice_single", "multiple_choice_multi"):
        payload.options = _options(new_id, "Option 1", "Option 2")
    elif question_kind == "dropdown":
        payload.options = _options(new_id, "Option 1", "Option 2", "Option 3")
    elif question_kind == "yes_no":
        payload.options = _options(new_id, "Yes", "No")
    elif question_kind == "rating":
        payload.min_value, payload.max_value = 1, 5
        payload.min_label, payload.max_label = "Poor", "Excellent"
    elif question_kind == "nps":
        payload.min_value, payload.max_value = 0, 10
        payload.min_label, payload.max_label = "Not likely", "Very likely"
    elif question_kind == "short_text":
        payload.placeholder = "Enter your answer..."
        payload.max_length = 100
    elif question_kind == "long_text":
        payload.placeholder = "Enter your answer..."
        payload.max_length = 1000
    elif question_kind == "number":
        payload.placeholder = "Enter a number..."
    elif question_kind == "email":
        payload.placeholder = "you@example.com"
    elif question_kind == "date":
        payload.placeholder = "Select a date..."

    return payload


def create_question_node(
    new_id: IdGenerator,
    question_kind: QuestionKind = "multiple_choice_single",
    position: Position | None = None,
) -> QuestionNode:
    return QuestionNode(
        id=new_id("question"),
        payload=default_question_payload(question_kind, new_id),
        position=position,
    )


def create_exit_node(new_id: IdGenerator, position: Position | None = None) -> ExitNode:
    return ExitNode(
        id=new_id("exit"),
        payload=ExitPayload(
            title="Thank You!",
            description="Your response has been recorded.",
            show_score=False,
        ),
        position=position,
    )


def create_edge(
    new_id: IdGenerator,
    source_node_id: str,
    target_node_id: str,
    condition: EdgeCondition | None = None,
    output_slot: str | None = None,
) -> FlowEdge:
    return FlowEdge(
        id=new_id("edge"),
        source_node_id=source_node_id,
        target_node_id=target_node_id,
        output_slot=output_slot,
        condition=condition,
    )
