"""Quiz scoring over submitted answers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from flowform.models.graph import QuestionNode
from flowform.models.response import Answer, ScoreResult
from flowform.utils.values import join_values, to_text


def is_correct(value: Any, correct_answer: Any) -> bool:
    """Exact-set equality for list answers, string equality for scalars."""
    if isinstance(correct_answer, (list, tuple)):
        selected = [to_text(v) for v in value] if isinstance(value, (list, tuple)) else [to_text(value)]
        expected = {to_text(v) for v in correct_answer}
        return len(selected) == len(correct_answer) and all(s in expected for s in selected)
    # A list answer against a scalar expectation compares its comma-joined form
    return join_values(value, ",") == to_text(correct_answer)


def score(answers: Iterable[Answer], nodes_by_id: Mapping[str, Any]) -> ScoreResult:
    """Sum points over answered questions.

    Every answered node declaring points adds to ``max_score``. A node with
    points but no correct answer can never be earned.
    """
    total = 0.0
    max_total = 0.0

    for answer in answers:
        node = nodes_by_id.get(answer.node_id)
        if not isinstance(node, QuestionNode):
            continue
        points = node.payload.points
        if not points:
            continue

        max_total += points
        correct_answer = node.payload.correct_answer
        if correct_answer is None or correct_answer == "" or correct_answer == []:
            continue
        if is_correct(answer.value, correct_answer):
            total += points

    return ScoreResult(score=_tidy(total), max_score=_tidy(max_total))


def _tidy(number: float) -> float | int:
    return int(number) if float(number).is_integer() else number
