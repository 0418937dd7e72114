"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from flowform.models.graph import FlowGraph
from flowform.models.response import Answer, CompletedResponse, ResponseMetadata


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Keep tests independent of any local .env."""
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("LOG_FORMAT", "console")


@pytest.fixture
def yes_no_graph() -> FlowGraph:
    """entry -> q1 (Yes/No) -> A on Yes, B on No; no default edge."""
    return FlowGraph.model_validate({
        "nodes": [
            {"id": "start", "kind": "entry", "payload": {"title": "Hi"}},
            {
                "id": "q1",
                "kind": "question",
                "payload": {
                    "question_kind": "yes_no",
                    "text": "Do you agree?",
                    "options": [{"id": "Yes", "text": "Yes"}, {"id": "No", "text": "No"}],
                    "enable_branching": True,
                },
            },
            {"id": "A", "kind": "exit", "payload": {"title": "Agreed"}},
            {"id": "B", "kind": "exit", "payload": {"title": "Disagreed"}},
        ],
        "edges": [
            {"id": "e0", "source_node_id": "start", "target_node_id": "q1"},
            {
                "id": "e1",
                "source_node_id": "q1",
                "target_node_id": "A",
                "output_slot": "Yes",
                "condition": {"comparator": "equals", "operand": "Yes", "option_id": "Yes"},
            },
            {
                "id": "e2",
                "source_node_id": "q1",
                "target_node_id": "B",
                "output_slot": "No",
                "condition": {"comparator": "equals", "operand": "No", "option_id": "No"},
            },
        ],
    })


def _multi_graph(match_mode: str) -> FlowGraph:
    return FlowGraph.model_validate({
        "nodes": [
            {"id": "start", "kind": "entry"},
            {
                "id": "colors",
                "kind": "question",
                "payload": {
                    "question_kind": "multiple_choice_multi",
                    "text": "Pick colors",
                    "options": [
                        {"id": "Red", "text": "Red"},
                        {"id": "Blue", "text": "Blue"},
                        {"id": "Green", "text": "Green"},
                    ],
                },
            },
            {"id": "matched", "kind": "exit"},
            {"id": "other", "kind": "exit"},
        ],
        "edges": [
            {"id": "e0", "source_node_id": "start", "target_node_id": "colors"},
            {
                "id": "e1",
                "source_node_id": "colors",
                "target_node_id": "matched",
                "condition": {
                    "comparator": "equals",
                    "operand": ["Red", "Blue"],
                    "optionIds": ["Red", "Blue"],
                    "matchMode": match_mode,
                },
            },
            {"id": "e2", "source_node_id": "colors", "target_node_id": "other"},
        ],
    })


@pytest.fixture
def multi_select_graph_factory():
    return _multi_graph


@pytest.fixture
def quiz_graph() -> FlowGraph:
    """entry -> name -> capital (10 pts) -> colors (5 pts, multi) -> rating -> nps -> done."""
    return FlowGraph.model_validate({
        "nodes": [
            {"id": "start", "kind": "entry"},
            {
                "id": "name",
                "kind": "question",
                "payload": {"question_kind": "short_text", "text": "What is your name?", "required": False},
            },
            {
                "id": "capital",
                "kind": "question",
                "payload": {
                    "question_kind": "multiple_choice_single",
                    "text": "{{name:Friend}}, what is the capital of France?",
                    "options": [{"id": "paris", "text": "Paris"}, {"id": "rome", "text": "Rome"}],
                    "points": 10,
                    "correct_answer": "paris",
                },
            },
            {
                "id": "colors",
                "kind": "question",
                "payload": {
                    "question_kind": "multiple_choice_multi",
                    "text": "Which colors are on the French flag?",
                    "options": [
                        {"id": "blue", "text": "Blue"},
                        {"id": "white", "text": "White"},
                        {"id": "green", "text": "Green"},
                    ],
                    "points": 5,
                    "correct_answer": ["blue", "white"],
                },
            },
            {
                "id": "rating",
                "kind": "question",
                "payload": {"question_kind": "rating", "text": "Rate this quiz", "min_value": 1, "max_value": 5},
            },
            {
                "id": "nps",
                "kind": "question",
                "payload": {"question_kind": "nps", "text": "Would you recommend us?", "required": False},
            },
            {"id": "done", "kind": "exit", "payload": {"title": "Done", "show_score": True}},
        ],
        "edges": [
            {"id": "e0", "source_node_id": "start", "target_node_id": "name"},
            {"id": "e1", "source_node_id": "name", "target_node_id": "capital"},
            {"id": "e2", "source_node_id": "capital", "target_node_id": "colors"},
            {"id": "e3", "source_node_id": "colors", "target_node_id": "rating"},
            {"id": "e4", "source_node_id": "rating", "target_node_id": "nps"},
            {"id": "e5", "source_node_id": "nps", "target_node_id": "done"},
        ],
    })


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_response(now):
    """Build a CompletedResponse with sensible defaults."""

    def _make(
        answers: list[tuple[str, object]] | None = None,
        score: float | None = None,
        max_score: float | None = None,
        duration_seconds: float = 120,
        submitted_at: datetime | None = None,
        user_agent: str = "",
        referrer: str | None = None,
        response_id: str = "r-1",
    ) -> CompletedResponse:
        submitted = submitted_at or now
        return CompletedResponse(
            id=response_id,
            assessment_id="a-1",
            answers=[Answer(node_id=n, question_text=n, value=v) for n, v in (answers or [])],
            score=score,
            max_score=max_score,
            started_at=submitted - timedelta(seconds=duration_seconds),
            submitted_at=submitted,
            metadata=ResponseMetadata(user_agent=user_agent, referrer=referrer),
        )

    return _make
