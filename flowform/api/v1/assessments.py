"""Assessment endpoints: submission admission, analytics and CSV export.

Nothing here is persisted; the caller hands the returned response to its
store and fetches response collections for reporting itself.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from flowform.analytics.export import answer_columns, graph_columns, responses_to_csv
from flowform.analytics.report import build_report
from flowform.api.dependencies import get_admission_counter
from flowform.api.v1.schemas.assessment import AnalyticsRequest, ExportRequest, SubmissionRequest
from flowform.config import Settings, get_settings
from flowform.engine.scoring import score
from flowform.models.analytics import AnalyticsReport
from flowform.models.response import Answer, CompletedResponse
from flowform.services.admission import AdmissionCounter
from flowform.utils.exceptions import AdmissionLimitError
from flowform.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/assessments", tags=["assessments"])


@router.post("/{assessment_id}/submissions", response_model=CompletedResponse, status_code=201)
async def submit_response(
    assessment_id: str,
    request: SubmissionRequest,
    counter: AdmissionCounter = Depends(get_admission_counter),
) -> CompletedResponse:
    """Admit, score and assemble a completed response for the caller to store."""
    try:
        await counter.admit_submission(
            assessment_id,
            max_responses=request.max_responses,
            invite_id=request.invite_id,
            invite_max_uses=request.invite_max_uses,
        )
    except AdmissionLimitError as exc:
        raise HTTPException(status_code=409, detail=str(exc))

    nodes = request.graph.nodes_by_id()
    answers = []
    for answer in request.answers:
        node = nodes.get(answer.node_id)
        text = answer.question_text
        if not text and node is not None and node.kind == "question":
            text = node.payload.text
        answers.append(Answer(node_id=answer.node_id, question_text=text, value=answer.value))

    result = score(answers, nodes) if request.scoring_enabled else None
    response = CompletedResponse(
        id=str(uuid.uuid4()),
        assessment_id=assessment_id,
        answers=answers,
        score=result.score if result else None,
        max_score=result.max_score if result else None,
        started_at=request.started_at,
        submitted_at=datetime.now(timezone.utc),
        metadata=request.metadata,
    )
    logger.info("response_assembled", assessment_id=assessment_id, response_id=response.id)
    return response


@router.post("/{assessment_id}/analytics", response_model=AnalyticsReport)
async def get_analytics(
    assessment_id: str,
    request: AnalyticsRequest,
    settings: Settings = Depends(get_settings),
) -> AnalyticsReport:
    logger.info("analytics_requested", assessment_id=assessment_id, responses=len(request.responses))
    return build_report(
        request.graph,
        request.responses,
        timeline_days=request.timeline_days or settings.TIMELINE_DAYS,
        bucket_count=request.bucket_count or settings.SCORE_BUCKET_COUNT,
        completion_floor_seconds=settings.COMPLETION_TIME_FLOOR_SECONDS,
    )


@router.post("/{assessment_id}/export.csv")
async def export_csv(assessment_id: str, request: ExportRequest) -> Response:
    if request.graph is not None:
        columns = graph_columns(request.graph, request.question_headers)
    else:
        columns = answer_columns(request.responses)
        if request.question_headers is not None:
            columns = [(node_id, header) for (node_id, _), header in zip(columns, request.question_headers)]

    content = responses_to_csv(request.responses, columns)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=responses_{assessment_id}.csv"},
    )
