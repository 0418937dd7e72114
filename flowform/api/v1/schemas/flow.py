"""Request/response models for the flow API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from flowform.engine.validator import Diagnostic
from flowform.models.graph import AnswerValue, FlowGraph
from flowform.models.response import Answer


class ValidateResponse(BaseModel):
    publishable: bool
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    errors: list[Diagnostic] = Field(default_factory=list)
    warnings: list[Diagnostic] = Field(default_factory=list)


class NextNodeRequest(BaseModel):
    graph: FlowGraph
    from_node_id: str
    answer: AnswerValue | None = Field(
        default=None,
        description="Answer recorded for from_node_id; omit for entry nodes",
    )


class NextNodeResponse(BaseModel):
    next_node_id: str | None = None
    next_node_kind: str | None = None
    dead_end: bool = False


class ResolveTextRequest(BaseModel):
    text: str
    answers: dict[str, AnswerValue] = Field(default_factory=dict)
    node_ids: list[str] | None = Field(
        default=None,
        description="Current node ids; when given, broken references are reported",
    )


class ResolveTextResponse(BaseModel):
    text: str
    editor_text: str
    broken_references: list[str] = Field(default_factory=list)


class ScoreRequest(BaseModel):
    graph: FlowGraph
    answers: list[Answer] = Field(default_factory=list)
