"""Request models for submission, analytics and export endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from flowform.models.graph import FlowGraph
from flowform.models.response import Answer, CompletedResponse, ResponseMetadata


class SubmissionRequest(BaseModel):
    graph: FlowGraph
    answers: list[Answer] = Field(default_factory=list)
    started_at: datetime
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    scoring_enabled: bool = True
    max_responses: int | None = Field(default=None, description="Assessment response limit")
    invite_id: str | None = None
    invite_max_uses: int | None = None


class AnalyticsRequest(BaseModel):
    graph: FlowGraph
    responses: list[CompletedResponse] = Field(default_factory=list)
    timeline_days: int | None = None
    bucket_count: int | None = None


class ExportRequest(BaseModel):
    responses: list[CompletedResponse] = Field(default_factory=list)
    graph: FlowGraph | None = None
    question_headers: list[str] | None = Field(
        default=None,
        description="Column headers, in question order; default to the question texts",
    )
