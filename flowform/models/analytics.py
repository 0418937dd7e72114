"""Result models produced by the analytics reducers."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TimelinePoint(BaseModel):
    date: str  # YYYY-MM-DD, UTC
    count: int


class CompletionTimeStats(BaseModel):
    median: int | None = None
    average: int | None = None
    min: int | None = None
    max: int | None = None


class ScoreBucket(BaseModel):
    range: str
    lower: float
    upper: float
    count: int = 0


class SummaryStats(BaseModel):
    total: int = 0
    average_score: float | None = None
    completion_rate: int = 0


class QuestionStat(BaseModel):
    node_id: str
    question_text: str
    question_kind: str
    distribution: dict[str, int] = Field(default_factory=dict)


class NpsStats(BaseModel):
    score: int
    promoters: int
    passives: int
    detractors: int
    total: int
    distribution: dict[str, int] = Field(default_factory=dict)


class DeviceCount(BaseModel):
    device: str
    count: int


class SourceCount(BaseModel):
    source: str
    count: int


class AnalyticsReport(BaseModel):
    total_responses: int = 0
    average_score: float | None = None
    completion_rate: int = 0
    question_stats: list[QuestionStat] = Field(default_factory=list)
    timeline: list[TimelinePoint] = Field(default_factory=list)
    completion_time: CompletionTimeStats = Field(default_factory=CompletionTimeStats)
    score_distribution: list[ScoreBucket] = Field(default_factory=list)
    nps_stats: NpsStats | None = None
    device_breakdown: list[DeviceCount] = Field(default_factory=list)
    source_breakdown: list[SourceCount] = Field(default_factory=list)
