"""CSV rendering of completed responses."""

from __future__ import annotations

from collections.abc import Sequence

from flowform.models.graph import FlowGraph
from flowform.models.response import CompletedResponse
from flowform.utils.values import join_values

# (node_id, header) for one answer column
ExportColumn = tuple[str, str]


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def format_score(response: CompletedResponse) -> str:
    if response.score is None:
        return ""
    return f"{join_values(response.score)}/{join_values(response.max_score)}"


def graph_columns(graph: FlowGraph, headers: Sequence[str] | None = None) -> list[ExportColumn]:
    """One column per question node, headed by its text unless ``headers`` overrides it."""
    questions = graph.question_nodes()
    if headers is None:
        return [(n.id, n.payload.text) for n in questions]
    return [(n.id, header) for n, header in zip(questions, headers)]


def answer_columns(responses: Sequence[CompletedResponse]) -> list[ExportColumn]:
    """Columns for every answered node, in first-seen order, headed by the stored question text."""
    columns: dict[str, str] = {}
    for response in responses:
        for answer in response.answers:
            columns.setdefault(answer.node_id, answer.question_text or answer.node_id)
    return list(columns.items())


def responses_to_csv(
    responses: Sequence[CompletedResponse],
    columns: Sequence[ExportColumn],
) -> str:
    """One row per response: timestamp, one column per question, score.

    Answers are matched to columns by node id; a question the respondent
    never reached is left blank. List answers are joined with ``"; "``.
    """
    headers = ["Timestamp", *(_quote(header) for _, header in columns), "Score"]
    lines = [",".join(headers)]

    for response in responses:
        answers = {a.node_id: a.value for a in response.answers}
        row = [response.submitted_at.isoformat()]
        for node_id, _ in columns:
            if node_id in answers:
                row.append(_quote(join_values(answers[node_id], "; ")))
            else:
                row.append("")
        row.append(format_score(response))
        lines.append(",".join(row))

    return "\n".join(lines)
