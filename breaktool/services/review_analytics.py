"""Review analytics: helpfulness, quality, engagement and sentiment scores.

Each score is a 0-100 heuristic over a single review. The scoring functions
are pure and take ORM instances (or anything with the same attributes); the
async functions at the bottom load the rows and assemble the API payloads.
"""

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from breaktool.models.review import Review, ReviewStatus, ReviewType
from breaktool.models.review_vote import ReviewVote, ReviewVoteType
from breaktool.models.user import ADMIN_ROLES, User
from breaktool.schemas.analytics import ReviewAnalytics, ReviewMetrics, TrendPoint

DETAIL_FIELDS = ("pain_points", "setup_time", "roi_story", "usage_recommendations", "weaknesses")
SUB_SCORE_FIELDS = ("overall_score", "value_score", "usage_score", "integration_score")

RECOMMENDATION_SENTIMENT = {"keep": 40, "try": 25, "stop": 10}
DEFAULT_RECOMMENDATION_SENTIMENT = 20

# Placeholder platform engagement until per-review vote counts are aggregated
PLATFORM_ENGAGEMENT_BASELINE = 50


class ReviewNotFoundError(Exception):
    """Raised when analytics are requested for an unknown review id."""


def helpfulness_score(vote_types: Iterable[str]) -> float:
    """Percentage of votes that marked the review helpful (0 when unvoted)."""
    votes = list(vote_types)
    if not votes:
        return 0.0
    helpful = sum(1 for vote in votes if vote == ReviewVoteType.helpful.value)
    return helpful / len(votes) * 100


def quality_score(review: Review, user: Optional[User]) -> int:
    """Structural quality of a review, capped at 100.

    Points for content length, complete sub-scores, filled-in detail fields,
    pros/cons, author expertise and review type.
    """
    score = 0

    content_length = len(review.content or "")
    if content_length > 500:
        score += 20
    elif content_length > 300:
        score += 15
    elif content_length > 100:
        score += 10
    else:
        score += 5

    if all(getattr(review, name) for name in SUB_SCORE_FIELDS):
        score += 20

    filled_details = sum(1 for name in DETAIL_FIELDS if getattr(review, name))
    score += min(filled_details * 4, 20)

    pros_cons = len(review.pros or []) + len(review.cons or [])
    score += min(pros_cons * 2, 15)

    if user is not None:
        if user.role in ADMIN_ROLES:
            score += 15
        elif user.is_verified_tester:
            score += 10
        elif user.trust_score and user.trust_score > 50:
            score += 5

    if review.review_type == ReviewType.admin.value:
        score += 10
    elif review.review_type == ReviewType.verified_tester.value:
        score += 7
    else:
        score += 3

    return min(score, 100)


def engagement_rate(vote_count: int) -> int:
    """Bucket the number of votes a review received into an engagement rate."""
    if vote_count >= 10:
        return 100
    if vote_count >= 5:
        return 80
    if vote_count >= 3:
        return 60
    if vote_count >= 1:
        return 40
    return 0


def _present_sub_scores(review: Review) -> list[float]:
    scores = (getattr(review, name) for name in SUB_SCORE_FIELDS)
    return [float(score) for score in scores if score is not None]


def sentiment_score(review: Review) -> float:
    """Blend the reviewer's recommendation with their 1-10 sub-scores, capped at 100."""
    score = float(
        RECOMMENDATION_SENTIMENT.get(review.recommendation, DEFAULT_RECOMMENDATION_SENTIMENT)
    )
    sub_scores = _present_sub_scores(review)
    if sub_scores:
        score += (sum(sub_scores) / len(sub_scores)) / 10 * 60
    return min(score, 100.0)


async def get_review_analytics(db: AsyncSession, review_id: uuid.UUID) -> ReviewAnalytics:
    """Compute all four scores for one review.

    Raises:
        ReviewNotFoundError: no review with this id.
    """
    result = await db.execute(
        select(Review, User).outerjoin(User, Review.user_id == User.id).where(Review.id == review_id)
    )
    row = result.one_or_none()
    if row is None:
        raise ReviewNotFoundError(f"Review {review_id} not found")
    review, user = row

    vote_result = await db.execute(
        select(ReviewVote.vote_type).where(ReviewVote.review_id == review_id)
    )
    vote_types = list(vote_result.scalars().all())

    helpfulness = helpfulness_score(vote_types)
    quality = quality_score(review, user)
    engagement = engagement_rate(len(vote_types))

    return ReviewAnalytics(
        review_id=review_id,
        helpfulness_score=helpfulness,
        quality_score=quality,
        engagement_rate=engagement,
        sentiment_score=sentiment_score(review),
        trend_data=[
            TrendPoint(
                date=datetime.now(timezone.utc).date(),
                helpfulness_score=helpfulness,
                quality_score=quality,
                engagement_rate=engagement,
                review_count=1,
            )
        ],
        metrics=ReviewMetrics(
            total_reviews=1,
            average_helpfulness=helpfulness,
            average_quality=quality,
            average_engagement=engagement,
        ),
    )


def platform_metrics_from_reviews(reviews: list[Review]) -> ReviewMetrics:
    """Platform-wide averages over a list of active reviews."""
    total_reviews = len(reviews)
    if total_reviews == 0:
        return ReviewMetrics(
            total_reviews=0, average_helpfulness=0, average_quality=0, average_engagement=0
        )

    total_helpfulness = sum(
        review.helpful_votes / review.total_votes * 100 if review.total_votes else 0
        for review in reviews
    )
    total_quality = 0.0
    for review in reviews:
        sub_scores = _present_sub_scores(review)
        if sub_scores:
            total_quality += sum(sub_scores) / len(sub_scores)

    return ReviewMetrics(
        total_reviews=total_reviews,
        average_helpfulness=total_helpfulness / total_reviews,
        # Sub-scores are on a 1-10 scale; x10 turns the mean into a percentage
        average_quality=total_quality / total_reviews * 10,
        average_engagement=PLATFORM_ENGAGEMENT_BASELINE,
    )


async def get_platform_metrics(db: AsyncSession) -> ReviewMetrics:
    result = await db.execute(
        select(Review).where(Review.status == ReviewStatus.active.value)
    )
    return platform_metrics_from_reviews(list(result.scalars().all()))
