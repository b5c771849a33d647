"""Review analytics endpoints.

GET /api/v1/reviews/{review_id}/analytics -- per-review scores
GET /api/v1/analytics/reviews/platform    -- platform-wide review metrics
"""

import uuid

from fastapi import APIRouter, HTTPException

from breaktool.dependencies import DbSession
from breaktool.middleware.rate_limiter import ReadRateLimit
from breaktool.schemas.analytics import ReviewAnalytics, ReviewMetrics
from breaktool.services.review_analytics import (
    ReviewNotFoundError,
    get_platform_metrics,
    get_review_analytics,
)

router = APIRouter(prefix="/api/v1", tags=["analytics"])


@router.get("/reviews/{review_id}/analytics", response_model=ReviewAnalytics)
async def review_analytics(
    review_id: uuid.UUID,
    db: DbSession,
    _rate: ReadRateLimit,
) -> ReviewAnalytics:
    try:
        return await get_review_analytics(db, review_id)
    except ReviewNotFoundError:
        raise HTTPException(status_code=404, detail="Review not found")


@router.get("/analytics/reviews/platform", response_model=ReviewMetrics)
async def platform_review_metrics(
    db: DbSession,
    _rate: ReadRateLimit,
) -> ReviewMetrics:
    """Averages across all active reviews on the platform."""
    return await get_platform_metrics(db)
