"""Respondent run: the state machine that walks a fixed graph snapshot.

A ``Run`` belongs to exactly one respondent session. ``RunSession`` wraps it
with the graph it executes against and exposes the respondent operations:
answer, advance, go back and complete.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from flowform.config import get_settings
from flowform.engine.branching import next_node
from flowform.engine.piping import resolve_for_display
from flowform.engine.scoring import score
from flowform.models.graph import AnswerValue, EntryNode, ExitNode, FlowGraph, QuestionNode
from flowform.models.response import Answer, CompletedResponse, ResponseMetadata
from flowform.utils.exceptions import RunStateError, UnknownNodeError
from flowform.utils.logging import get_logger
from flowform.utils.values import is_empty_answer

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Run(BaseModel):
    current_node_id: str
    answers: dict[str, AnswerValue] = Field(default_factory=dict)
    visited_history: list[str] = Field(default_factory=list)
    started_at: datetime
    completed: bool = False
    # Completed without reaching an exit node (no matching edge, no default)
    dead_end: bool = False


class RunSession:
    """One respondent's traversal of an assessment."""

    def __init__(
        self,
        graph: FlowGraph,
        run: Run,
        allow_back_navigation: bool = True,
    ) -> None:
        self.graph = graph
        self.run = run
        self.allow_back_navigation = allow_back_navigation

    @classmethod
    def start(
        cls,
        graph: FlowGraph,
        now: datetime | None = None,
        allow_back_navigation: bool | None = None,
    ) -> RunSession:
        """Position a new run on the entry node.

        Back navigation defaults to the ``ALLOW_BACK_NAVIGATION`` setting.
        """
        if allow_back_navigation is None:
            allow_back_navigation = get_settings().ALLOW_BACK_NAVIGATION
        entry = graph.entry_node()
        if entry is None:
            raise RunStateError("Graph has no entry node")
        run = Run(current_node_id=entry.id, started_at=now or _utcnow())
        return cls(graph, run, allow_back_navigation=allow_back_navigation)

    @property
    def current_node(self) -> EntryNode | QuestionNode | ExitNode:
        node = self.graph.get_node(self.run.current_node_id)
        if node is None:
            raise UnknownNodeError(f"Node {self.run.current_node_id!r} is not in the graph")
        return node

    @property
    def is_complete(self) -> bool:
        return self.run.completed

    def record_answer(self, value: AnswerValue) -> None:
        if self.run.completed:
            raise RunStateError("Run is already complete")
        node = self.current_node
        if node.kind != "question":
            raise RunStateError(f"Cannot answer a {node.kind} node")
        self.run.answers[node.id] = value

    def advance(self) -> EntryNode | QuestionNode | ExitNode | None:
        """Move to the next node; ``None`` when the flow dead-ends.

        Reaching an exit node or a dead end completes the run.
        """
        if self.run.completed:
            raise RunStateError("Run is already complete")

        node = self.current_node
        if node.kind == "exit":
            raise RunStateError("Cannot advance past an exit node")

        answer: Any = None
        if node.kind == "question":
            answer = self.run.answers.get(node.id)
            if node.payload.required and is_empty_answer(answer):
                raise RunStateError(f"Question {node.id!r} requires an answer")

        target_id = next_node(self.graph, node.id, answer)
        self.run.visited_history.append(node.id)

        if target_id is None:
            logger.warning("flow_dead_end", node_id=node.id)
            self.run.completed = True
            self.run.dead_end = True
            return None

        target = self.graph.get_node(target_id)
        if target is None:
            raise UnknownNodeError(f"Edge from {node.id!r} targets missing node {target_id!r}")

        self.run.current_node_id = target.id
        if target.kind == "exit":
            self.run.completed = True
        return target

    def go_back(self) -> bool:
        """Return to the previously visited node. Recorded answers are kept."""
        if not self.allow_back_navigation:
            raise RunStateError("Back navigation is disabled for this assessment")
        if self.run.completed:
            raise RunStateError("Run is already complete")
        if not self.run.visited_history:
            return False
        self.run.current_node_id = self.run.visited_history.pop()
        return True

    def progress(self) -> int:
        """Answered questions as a whole percentage of all questions."""
        question_ids = {n.id for n in self.graph.question_nodes()}
        if not question_ids:
            return 0
        answered = sum(1 for node_id in self.run.answers if node_id in question_ids)
        return round(answered / len(question_ids) * 100)

    def display_text(self) -> str:
        node = self.current_node
        if node.kind == "question":
            return resolve_for_display(node.payload.text, self.run.answers)
        return node.payload.title

    def submitted_answers(self) -> list[Answer]:
        nodes = self.graph.nodes_by_id()
        answers: list[Answer] = []
        for node_id, value in self.run.answers.items():
            node = nodes.get(node_id)
            text = node.payload.text if node is not None and node.kind == "question" else ""
            answers.append(Answer(node_id=node_id, question_text=text, value=value))
        return answers

    def complete(
        self,
        response_id: str,
        assessment_id: str,
        now: datetime | None = None,
        metadata: ResponseMetadata | None = None,
        scoring_enabled: bool = True,
    ) -> CompletedResponse:
        """Convert the finished run into an immutable ``CompletedResponse``."""
        if not self.run.completed:
            raise RunStateError("Run has not reached an exit node")

        answers = self.submitted_answers()
        result = score(answers, self.graph.nodes_by_id()) if scoring_enabled else None

        response = CompletedResponse(
            id=response_id,
            assessment_id=assessment_id,
            answers=answers,
            score=result.score if result else None,
            max_score=result.max_score if result else None,
            started_at=self.run.started_at,
            submitted_at=now or _utcnow(),
            metadata=metadata or ResponseMetadata(),
        )
        logger.info(
            "run_completed",
            assessment_id=assessment_id,
            response_id=response_id,
            answers=len(answers),
            dead_end=self.run.dead_end,
        )
        return response
