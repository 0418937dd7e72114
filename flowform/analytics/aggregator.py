"""Pure reducers over a collection of completed responses for one assessment."""

from __future__ import annotations

import statistics
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from flowform.models.analytics import CompletionTimeStats, ScoreBucket, TimelinePoint
from flowform.models.response import CompletedResponse
from flowform.utils.values import to_text

DEFAULT_TIMELINE_DAYS = 30
DEFAULT_BUCKET_COUNT = 5
COMPLETION_TIME_FLOOR_SECONDS = 5.0


def _as_utc(moment: datetime) -> datetime:
    # Naive datetimes from the store are UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def answer_distribution(responses: Sequence[CompletedResponse]) -> dict[str, dict[str, int]]:
    """Count of each answer value per node id; list answers count once per element."""
    distribution: dict[str, dict[str, int]] = {}
    for response in responses:
        for answer in response.answers:
            bucket = distribution.setdefault(answer.node_id, {})
            values = answer.value if isinstance(answer.value, list) else [answer.value]
            for value in values:
                key = to_text(value)
                bucket[key] = bucket.get(key, 0) + 1
    return distribution


def timeline(
    responses: Sequence[CompletedResponse],
    days: int = DEFAULT_TIMELINE_DAYS,
    now: datetime | None = None,
) -> list[TimelinePoint]:
    """Submissions per UTC day over the trailing ``days`` window, oldest first.

    Days without submissions are omitted.
    """
    now = _as_utc(now or datetime.now(timezone.utc))
    cutoff = now - timedelta(days=days)

    counts: Counter[str] = Counter()
    for response in responses:
        submitted = _as_utc(response.submitted_at)
        if cutoff <= submitted <= now:
            counts[submitted.date().isoformat()] += 1

    return [TimelinePoint(date=day, count=counts[day]) for day in sorted(counts)]


def completion_time_stats(
    responses: Sequence[CompletedResponse],
    floor_seconds: float = COMPLETION_TIME_FLOOR_SECONDS,
) -> CompletionTimeStats:
    """Median/mean/min/max completion time in whole seconds.

    Responses faster than ``floor_seconds`` are treated as automation noise.
    """
    durations = []
    for response in responses:
        elapsed = (_as_utc(response.submitted_at) - _as_utc(response.started_at)).total_seconds()
        if elapsed >= floor_seconds:
            durations.append(elapsed)

    if not durations:
        return CompletionTimeStats()

    return CompletionTimeStats(
        median=round(statistics.median(durations)),
        average=round(statistics.fmean(durations)),
        min=round(min(durations)),
        max=round(max(durations)),
    )


def _format_bound(value: float) -> str:
    rounded = round(value, 1)
    return str(int(rounded)) if rounded.is_integer() else str(rounded)


def score_distribution(
    responses: Sequence[CompletedResponse],
    bucket_count: int = DEFAULT_BUCKET_COUNT,
) -> list[ScoreBucket]:
    """Equal-width score buckets spanning ``[0, highest max_score]``.

    Buckets are ``[low, high)`` except the last, which is closed on both
    ends. Scores outside the span are not counted.
    """
    scored = [r for r in responses if r.score is not None and r.max_score is not None]
    if not scored or bucket_count < 1:
        return []

    top = max(r.max_score for r in scored)
    if top <= 0:
        return []

    bounds = [i * top / bucket_count for i in range(bucket_count + 1)]
    bounds[-1] = float(top)
    buckets = [
        ScoreBucket(
            range=f"{_format_bound(bounds[i])}-{_format_bound(bounds[i + 1])}",
            lower=bounds[i],
            upper=bounds[i + 1],
        )
        for i in range(bucket_count)
    ]

    for response in scored:
        value = response.score
        if value < 0 or value > top:
            continue
        # Scale before dividing so a score on a boundary opens the upper bucket
        index = min(int(value * bucket_count // top), bucket_count - 1)
        buckets[index].count += 1

    return buckets
