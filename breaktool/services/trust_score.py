"""User trust score and reviewer badges.

A user's trust score (0-100) summarizes how much weight the community should
give their reviews. It is recomputed on demand and stored on users.trust_score
so listings can sort by it without recomputing.

Score composition (points):
- review count:          5 per review, max 30
- review quality:        mean helpful/total ratio across reviews, x25
- helpful votes received: 2 per vote, max 20
- activity recency:      linear decay over 365 days since last review, x15
- verified tester:       flat 10
"""

import uuid
from datetime import datetime, timezone
from typing import Optional, Sequence

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from breaktool.models.review import Review
from breaktool.models.user import User
from breaktool.schemas.trust import TrustScoreFactors, TrustScoreResponse
from breaktool.services.verdict import round_half_up

log = structlog.get_logger(__name__)

RECENCY_WINDOW_DAYS = 365

# Ordered highest first; the first threshold the score reaches wins
BADGE_THRESHOLDS = (
    (90, "Top Expert"),
    (80, "Verified Expert"),
    (70, "Trusted Reviewer"),
    (50, "Active Contributor"),
    (30, "New Reviewer"),
)


def determine_badge(score: int) -> Optional[str]:
    for threshold, badge in BADGE_THRESHOLDS:
        if score >= threshold:
            return badge
    return None


def calculate_trust_factors(
    reviews: Sequence[Review],
    helpful_votes_received: int,
    is_verified_tester: bool,
    now: datetime,
) -> TrustScoreFactors:
    review_count = len(reviews)

    review_quality = 0.0
    activity_recency = 0.0
    if reviews:
        review_quality = sum(
            r.helpful_votes / r.total_votes if r.total_votes > 0 else 0 for r in reviews
        ) / review_count
        most_recent = max(r.created_at for r in reviews)
        days_since = (now - most_recent).days
        activity_recency = max(0.0, 1 - days_since / RECENCY_WINDOW_DAYS)

    return TrustScoreFactors(
        review_count=review_count,
        review_quality=review_quality,
        helpful_votes_received=helpful_votes_received,
        activity_recency=activity_recency,
        verified_expertise=is_verified_tester,
    )


def calculate_trust_score_value(factors: TrustScoreFactors) -> int:
    score = min(factors.review_count * 5, 30)
    score += factors.review_quality * 25
    score += min(factors.helpful_votes_received * 2, 20)
    score += factors.activity_recency * 15
    score += 10 if factors.verified_expertise else 0
    return min(round_half_up(score), 100)


async def calculate_trust_score(
    db: AsyncSession, user_id: uuid.UUID
) -> Optional[TrustScoreResponse]:
    """Recompute and store a user's trust score. Returns None for unknown users.

    Args:
        db: Async SQLAlchemy session. This function commits.
        user_id: The user to score.
    """
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        return None

    review_result = await db.execute(select(Review).where(Review.user_id == user_id))
    reviews = review_result.scalars().all()

    now = datetime.now(timezone.utc)
    factors = calculate_trust_factors(
        reviews,
        helpful_votes_received=user.helpful_votes_received or 0,
        is_verified_tester=bool(user.is_verified_tester),
        now=now,
    )
    score = calculate_trust_score_value(factors)

    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(trust_score=score)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    log.info("trust_score_calculated", user_id=str(user_id), score=score)

    return TrustScoreResponse(
        user_id=user.id,
        score=score,
        last_calculated=now,
        badge=determine_badge(score),
        display_name=user.name,
        profile_image_url=user.avatar_url,
        factors=factors,
    )


async def get_trust_score(db: AsyncSession, user_id: uuid.UUID) -> Optional[TrustScoreResponse]:
    """Read the stored trust score without recomputing it."""
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        return None
    score = user.trust_score or 0
    return TrustScoreResponse(
        user_id=user.id,
        score=score,
        last_calculated=datetime.now(timezone.utc),
        badge=determine_badge(score),
    )


async def get_top_trusted_users(db: AsyncSession, limit: int) -> list[TrustScoreResponse]:
    """Users with a positive trust score, highest first."""
    result = await db.execute(
        select(User)
        .where(User.trust_score > 0)
        .order_by(User.trust_score.desc())
        .limit(limit)
    )
    now = datetime.now(timezone.utc)
    return [
        TrustScoreResponse(
            user_id=user.id,
            score=user.trust_score,
            last_calculated=now,
            badge=determine_badge(user.trust_score),
            display_name=user.name,
            profile_image_url=user.avatar_url,
        )
        for user in result.scalars().all()
    ]
