"""Verdict engine: runs the aggregation pipeline against the stores.

The engine owns no state beyond its two repositories. Each call reads a fresh
review snapshot, so recomputing an unchanged tool is idempotent.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from breaktool.metrics import verdict_calculation_duration, verdict_calculations
from breaktool.repositories import ReviewRepository, StoredVerdict, VerdictRepository
from breaktool.schemas.verdict import INSUFFICIENT_DATA, ToolVerdict, VerdictFactors
from breaktool.services.verdict import (
    calculate_confidence,
    calculate_verdict_factors,
    determine_verdict,
    generate_explanation,
    insufficient_data_verdict,
    review_breakdown,
)

log = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VerdictEngine:
    """Calculates, stores and reads back tool verdicts."""

    def __init__(
        self,
        reviews: ReviewRepository,
        verdicts: VerdictRepository,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.reviews = reviews
        self.verdicts = verdicts
        self.clock = clock

    async def calculate_tool_verdict(self, tool_id: uuid.UUID) -> ToolVerdict:
        """Recompute a tool's verdict from its active reviews and persist it.

        A tool with no active reviews gets an insufficient_data verdict, which
        is persisted too so a previously stored verdict does not linger.

        Raises:
            ToolNotFoundError: the tool does not exist.
        """
        start = time.monotonic()
        now = self.clock()
        reviews = await self.reviews.load_active_reviews(tool_id)

        if not reviews:
            result = insufficient_data_verdict(tool_id, calculated_at=now)
            await self.verdicts.save_verdict(
                tool_id, INSUFFICIENT_DATA, 0, result.factors, now
            )
            log.info("verdict_insufficient_data", tool_id=str(tool_id))
        else:
            factors = calculate_verdict_factors(reviews)
            verdict = determine_verdict(factors)
            confidence = calculate_confidence(factors)
            await self.verdicts.save_verdict(tool_id, verdict, confidence, factors, now)
            result = ToolVerdict(
                tool_id=tool_id,
                verdict=verdict,
                confidence=confidence,
                factors=factors,
                explanation=generate_explanation(verdict, factors),
                last_calculated=now,
                review_breakdown=review_breakdown(factors),
            )
            log.info(
                "verdict_calculated",
                tool_id=str(tool_id),
                verdict=verdict,
                confidence=confidence,
                total_reviews=factors.total_reviews,
            )

        verdict_calculations.labels(verdict=result.verdict).inc()
        verdict_calculation_duration.observe(time.monotonic() - start)
        return result

    async def get_tool_verdict(self, tool_id: uuid.UUID) -> Optional[ToolVerdict]:
        """Read the stored verdict, or None when the tool does not exist."""
        stored = await self.verdicts.load_verdict(tool_id)
        if stored is None:
            return None
        return self._from_stored(stored)

    async def get_all_tool_verdicts(self) -> list[ToolVerdict]:
        """All tools with a verdict, highest confidence first."""
        stored_rows = await self.verdicts.load_all_verdicts()
        return [self._from_stored(stored) for stored in stored_rows]

    async def override_tool_verdict(self, tool_id: uuid.UUID, verdict: str) -> ToolVerdict:
        """Manually set keep/try/stop; confidence and factors are kept as stored."""
        stored = await self.verdicts.override_verdict(tool_id, verdict, self.clock())
        log.info("verdict_overridden", tool_id=str(tool_id), verdict=verdict)
        return self._from_stored(stored)

    def _from_stored(self, stored: StoredVerdict) -> ToolVerdict:
        # Explanation and breakdown are derived on every read, never stored
        verdict = stored.verdict or INSUFFICIENT_DATA
        factors = VerdictFactors.model_validate(stored.factors or {})
        return ToolVerdict(
            tool_id=stored.tool_id,
            verdict=verdict,
            confidence=stored.confidence,
            factors=factors,
            explanation=generate_explanation(verdict, factors),
            last_calculated=stored.updated_at or self.clock(),
            review_breakdown=review_breakdown(factors),
        )
