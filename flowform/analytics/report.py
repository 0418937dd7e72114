"""Assemble the full analytics report for one assessment."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from flowform.analytics.aggregator import (
    COMPLETION_TIME_FLOOR_SECONDS,
    DEFAULT_BUCKET_COUNT,
    DEFAULT_TIMELINE_DAYS,
    answer_distribution,
    completion_time_stats,
    score_distribution,
    timeline,
)
from flowform.analytics.breakdowns import (
    device_breakdown,
    nps_stats,
    question_stats,
    source_breakdown,
    summary_stats,
)
from flowform.models.analytics import AnalyticsReport
from flowform.models.graph import FlowGraph
from flowform.models.response import CompletedResponse
from flowform.utils.logging import get_logger

logger = get_logger(__name__)


def build_report(
    graph: FlowGraph,
    responses: Sequence[CompletedResponse],
    timeline_days: int = DEFAULT_TIMELINE_DAYS,
    bucket_count: int = DEFAULT_BUCKET_COUNT,
    completion_floor_seconds: float = COMPLETION_TIME_FLOOR_SECONDS,
    now: datetime | None = None,
) -> AnalyticsReport:
    summary = summary_stats(responses)
    distribution = answer_distribution(responses)

    report = AnalyticsReport(
        total_responses=summary.total,
        average_score=summary.average_score,
        completion_rate=summary.completion_rate,
        question_stats=question_stats(graph, distribution),
        timeline=timeline(responses, days=timeline_days, now=now),
        completion_time=completion_time_stats(responses, floor_seconds=completion_floor_seconds),
        score_distribution=score_distribution(responses, bucket_count=bucket_count),
        nps_stats=nps_stats(graph, responses),
        device_breakdown=device_breakdown(responses),
        source_breakdown=source_breakdown(responses),
    )
    logger.info(
        "analytics_report_built",
        responses=summary.total,
        questions=len(report.question_stats),
    )
    return report
