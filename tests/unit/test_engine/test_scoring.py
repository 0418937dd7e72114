"""Unit tests for quiz scoring."""

from __future__ import annotations

from flowform.engine.scoring import is_correct, score
from flowform.models.graph import QuestionNode, QuestionPayload
from flowform.models.response import Answer


def _scored(node_id: str, points, correct) -> QuestionNode:
    return QuestionNode(
        id=node_id,
        payload=QuestionPayload(
            question_kind="multiple_choice_single",
            text=node_id,
            points=points,
            correct_answer=correct,
        ),
    )


class TestIsCorrect:
    def test_scalar_equality_is_string_based(self):
        assert is_correct("4", 4)
        assert is_correct(4.0, "4")
        assert not is_correct("four", 4)

    def test_list_requires_exact_set(self):
        assert is_correct(["b", "a"], ["a", "b"])
        assert not is_correct(["a"], ["a", "b"])
        assert not is_correct(["a", "b", "c"], ["a", "b"])

    def test_scalar_answer_against_single_element_list(self):
        assert is_correct("a", ["a"])

    def test_list_answer_against_scalar_uses_joined_form(self):
        assert is_correct(["a", "b"], "a,b")
        assert not is_correct(["a", "b"], "a")


class TestScore:
    def test_mixed_answers(self, quiz_graph):
        answers = [
            Answer(node_id="name", value="Ada"),
            Answer(node_id="capital", value="paris"),
            Answer(node_id="colors", value=["white", "blue"]),
            Answer(node_id="rating", value=4),
        ]
        result = score(answers, quiz_graph.nodes_by_id())
        assert result.score == 15
        assert result.max_score == 15

    def test_wrong_answers_still_count_toward_max(self, quiz_graph):
        answers = [
            Answer(node_id="capital", value="rome"),
            Answer(node_id="colors", value=["blue", "white", "green"]),
        ]
        result = score(answers, quiz_graph.nodes_by_id())
        assert result.score == 0
        assert result.max_score == 15

    def test_unanswered_questions_do_not_count(self, quiz_graph):
        result = score([Answer(node_id="capital", value="paris")], quiz_graph.nodes_by_id())
        assert (result.score, result.max_score) == (10, 10)

    def test_points_without_correct_answer_cannot_be_earned(self):
        nodes = {"q": _scored("q", 3, None)}
        result = score([Answer(node_id="q", value="anything")], nodes)
        assert (result.score, result.max_score) == (0, 3)

    def test_zero_points_means_unscored(self):
        nodes = {"q": _scored("q", 0, "a")}
        result = score([Answer(node_id="q", value="a")], nodes)
        assert (result.score, result.max_score) == (0, 0)

    def test_unknown_nodes_are_ignored(self):
        result = score([Answer(node_id="ghost", value="a")], {})
        assert (result.score, result.max_score) == (0, 0)

    def test_fractional_points_kept(self):
        nodes = {"q": _scored("q", 2.5, "a")}
        result = score([Answer(node_id="q", value="a")], nodes)
        assert result.score == 2.5
