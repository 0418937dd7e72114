"""Reporting breakdowns: summary, per-question stats, NPS, devices and traffic sources."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from urllib.parse import urlparse

from flowform.models.analytics import (
    DeviceCount,
    NpsStats,
    QuestionStat,
    SourceCount,
    SummaryStats,
)
from flowform.models.graph import FlowGraph
from flowform.models.response import CompletedResponse
from flowform.utils.values import to_number


def summary_stats(responses: Sequence[CompletedResponse]) -> SummaryStats:
    total = len(responses)
    scores = [r.score for r in responses if r.score is not None]
    average = round(sum(scores) / len(scores), 2) if scores else None
    # Only completed responses are ever stored
    return SummaryStats(total=total, average_score=average, completion_rate=100 if total else 0)


def question_stats(
    graph: FlowGraph,
    distribution: dict[str, dict[str, int]],
) -> list[QuestionStat]:
    return [
        QuestionStat(
            node_id=node.id,
            question_text=node.payload.text,
            question_kind=node.payload.question_kind,
            distribution=distribution.get(node.id, {}),
        )
        for node in graph.question_nodes()
    ]


def nps_stats(graph: FlowGraph, responses: Sequence[CompletedResponse]) -> NpsStats | None:
    """Net Promoter Score over answers to ``nps`` questions.

    Promoters score 9-10, passives 7-8, detractors 0-6.
    """
    nps_ids = {n.id for n in graph.question_nodes() if n.payload.question_kind == "nps"}
    if not nps_ids:
        return None

    distribution: Counter[str] = Counter()
    promoters = passives = detractors = 0
    for response in responses:
        for answer in response.answers:
            if answer.node_id not in nps_ids:
                continue
            value = to_number(answer.value)
            if value is None or value < 0 or value > 10:
                continue
            distribution[str(int(value))] += 1
            if value >= 9:
                promoters += 1
            elif value >= 7:
                passives += 1
            else:
                detractors += 1

    total = promoters + passives + detractors
    if total == 0:
        return None

    return NpsStats(
        score=round((promoters - detractors) / total * 100),
        promoters=promoters,
        passives=passives,
        detractors=detractors,
        total=total,
        distribution=dict(distribution),
    )


def classify_device(user_agent: str) -> str:
    ua = (user_agent or "").lower()
    if not ua.strip():
        return "Unknown"
    if "ipad" in ua or "tablet" in ua or ("android" in ua and "mobile" not in ua):
        return "Tablet"
    if re.search(r"iphone|ipod|android|mobile", ua):
        return "Mobile"
    return "Desktop"


_SOURCE_HOSTS: list[tuple[str, tuple[str, ...]]] = [
    ("Google", ("google.",)),
    ("Facebook", ("facebook.com", "fb.com", "fb.me")),
    ("Twitter", ("twitter.com", "t.co", "x.com")),
    ("LinkedIn", ("linkedin.com", "lnkd.in")),
    ("Reddit", ("reddit.com",)),
    ("Email", ("mail.", "outlook.")),
]


def classify_source(referrer: str | None) -> str:
    if not referrer or not referrer.strip():
        return "Direct"
    host = (urlparse(referrer).hostname or "").lower()
    if not host:
        return "Other"
    if host.startswith("www."):
        host = host[4:]
    for source, patterns in _SOURCE_HOSTS:
        for pattern in patterns:
            if pattern.endswith("."):
                if f".{pattern}" in f".{host}":
                    return source
            elif host == pattern or host.endswith(f".{pattern}"):
                return source
    return "Other"


def device_breakdown(responses: Sequence[CompletedResponse]) -> list[DeviceCount]:
    counts = Counter(classify_device(r.metadata.user_agent) for r in responses)
    return [DeviceCount(device=d, count=c) for d, c in counts.most_common()]


def source_breakdown(responses: Sequence[CompletedResponse]) -> list[SourceCount]:
    counts = Counter(classify_source(r.metadata.referrer) for r in responses)
    return [SourceCount(source=s, count=c) for s, c in counts.most_common()]
