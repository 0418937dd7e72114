"""Answers, completed responses and score results."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from flowform.models.graph import AnswerValue


class Answer(BaseModel):
    node_id: str
    # Denormalized at submit time so exports survive later edits to the graph
    question_text: str = ""
    value: AnswerValue


class ResponseMetadata(BaseModel):
    user_agent: str = ""
    ip_country: str | None = None
    referrer: str | None = None


class ScoreResult(BaseModel):
    score: int | float = 0
    max_score: int | float = 0


class CompletedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    assessment_id: str
    answers: list[Answer] = Field(default_factory=list)
    score: int | float | None = None
    max_score: int | float | None = None
    started_at: datetime
    submitted_at: datetime
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
