"""Atomic submission admission against per-assessment and per-invite limits.

The counter is incremented first with Redis ``INCR``; the limit is checked
against the post-increment value and the increment is rolled back with
``DECR`` when it overshoots. Two concurrent respondents can therefore never
both be admitted past the limit.
"""

from __future__ import annotations

from typing import Any

import redis.asyncio as aioredis

from flowform.utils.exceptions import AdmissionLimitError
from flowform.utils.logging import get_logger

logger = get_logger(__name__)


class AdmissionCounter:
    """Redis-backed usage counters for assessments and invites."""

    def __init__(
        self,
        redis_url: str | None = None,
        key_prefix: str = "flowform:admission",
        client: Any = None,
    ) -> None:
        if client is None:
            if redis_url is None:
                raise ValueError("redis_url or client is required")
            client = aioredis.from_url(redis_url, decode_responses=True)
        self._client = client
        self._prefix = key_prefix

    def key(self, scope: str, scope_id: str) -> str:
        return f"{self._prefix}:{scope}:{scope_id}"

    async def admit(self, scope: str, scope_id: str, limit: int | None) -> int:
        """Count one use; raise ``AdmissionLimitError`` if that exceeds ``limit``."""
        key = self.key(scope, scope_id)
        count = int(await self._client.incr(key))
        if limit is not None and count > limit:
            await self._client.decr(key)
            logger.warning("admission_rejected", key=key, limit=limit, count=count)
            raise AdmissionLimitError(key, limit, count)
        return count

    async def release(self, scope: str, scope_id: str) -> int:
        """Undo one admission, e.g. when the response could not be stored."""
        return int(await self._client.decr(self.key(scope, scope_id)))

    async def current(self, scope: str, scope_id: str) -> int:
        raw = await self._client.get(self.key(scope, scope_id))
        return int(raw) if raw is not None else 0

    async def admit_submission(
        self,
        assessment_id: str,
        max_responses: int | None = None,
        invite_id: str | None = None,
        invite_max_uses: int | None = None,
    ) -> int:
        """Admit one submission against the assessment and, if given, the invite.

        The assessment admission is rolled back when the invite is exhausted.
        Returns the assessment's post-increment response count.
        """
        count = await self.admit("assessment", assessment_id, max_responses)
        if invite_id is not None:
            try:
                await self.admit("invite", invite_id, invite_max_uses)
            except AdmissionLimitError:
                await self.release("assessment", assessment_id)
                raise
        logger.info("submission_admitted", assessment_id=assessment_id, count=count)
        return count

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def close(self) -> None:
        await self._client.aclose()
