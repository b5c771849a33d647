"""Verdict aggregation: turn a tool's active reviews into keep / try / stop.

Everything in this module is pure and synchronous. The pipeline is

    reviews -> calculate_verdict_factors -> determine_verdict
                                         -> calculate_confidence
                                         -> generate_explanation

and services.verdict_engine wires it to the review and verdict stores.

Design notes:
- A tool with zero active reviews never reaches this module's scoring
  functions; the engine short-circuits to insufficient_data_verdict().
- Ratings bucket as keep (>= 4.5), try (>= 3.0) or stop (< 3.0).
- determine_verdict() evaluates its rules in a fixed order and the first match
  wins. The order is the tie-break policy; do not reorder.
- review_quality can exceed 1.0, so the quality term of the confidence score
  can exceed 20 points. The final confidence is capped at 100.
- reviewBreakdown is derived from the rounded percentages, not from the raw
  bucket counts, and may differ from them by one on odd splits.
"""

import uuid
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from breaktool.models.user import ADMIN_ROLES
from breaktool.schemas.verdict import (
    INSUFFICIENT_DATA,
    ReviewBreakdown,
    ReviewerRole,
    ReviewSnapshot,
    ToolVerdict,
    VerdictFactors,
)

# Rating bands
KEEP_RATING_THRESHOLD = 4.5
TRY_RATING_THRESHOLD = 3.0

# Reviewer weights used by the classifier
COMMUNITY_WEIGHT = 1.0
VERIFIED_TESTER_WEIGHT = 2.0
ADMIN_WEIGHT = 2.5

# Bonus points (keep, try, stop) granted when at least one review of that
# reviewer type exists, before multiplying by the reviewer weight.
VERIFIED_TESTER_BONUS = (20, 10, 5)
ADMIN_BONUS = (25, 15, 5)

# Minimum average rating for the keep and try rules
KEEP_MIN_AVERAGE = 4.0
TRY_MIN_AVERAGE = 3.0

# Review quality proxy
QUALITY_FULL_LENGTH = 200
REVIEWER_TYPE_QUALITY = {"admin": 0.4, "verified_tester": 0.3, "community": 0.1}

NO_REVIEWS_EXPLANATION = (
    "No reviews available yet. More reviews are needed to provide a recommendation."
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding).

    Rounds the exact binary value, as JavaScript's Math.round does, so
    0.49999999999999994 gives 0. Inputs are non-negative; negative halves
    would round away from zero here.
    """
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _one_decimal(value: float) -> str:
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def resolve_reviewer_role(user_role: Optional[str], is_verified_tester: Optional[bool]) -> ReviewerRole:
    """Collapse a reviewer's account flags into a single reviewer category.

    Admin roles win over the verified-tester flag so every review lands in
    exactly one of the three counts.
    """
    if user_role in ADMIN_ROLES:
        return "admin"
    if is_verified_tester:
        return "verified_tester"
    return "community"


def review_quality(review: ReviewSnapshot) -> float:
    """Per-review quality proxy: length term + vote term + reviewer-type term."""
    length_score = min(len(review.content) / QUALITY_FULL_LENGTH, 1)
    vote_score = review.helpful_votes / review.total_votes if review.total_votes > 0 else 0
    return length_score + vote_score + REVIEWER_TYPE_QUALITY[review.reviewer_role]


def calculate_verdict_factors(reviews: Sequence[ReviewSnapshot]) -> VerdictFactors:
    """Aggregate a non-empty list of reviews into VerdictFactors.

    Raises:
        ValueError: if reviews is empty (callers must short-circuit first).
    """
    total_reviews = len(reviews)
    if total_reviews == 0:
        raise ValueError("calculate_verdict_factors requires at least one review")

    verified_tester_reviews = sum(1 for r in reviews if r.reviewer_role == "verified_tester")
    admin_reviews = sum(1 for r in reviews if r.reviewer_role == "admin")

    keep_count = try_count = stop_count = 0
    for review in reviews:
        if review.rating >= KEEP_RATING_THRESHOLD:
            keep_count += 1
        elif review.rating >= TRY_RATING_THRESHOLD:
            try_count += 1
        else:
            stop_count += 1

    return VerdictFactors(
        keep_percentage=keep_count / total_reviews * 100,
        try_percentage=try_count / total_reviews * 100,
        stop_percentage=stop_count / total_reviews * 100,
        total_reviews=total_reviews,
        verified_tester_reviews=verified_tester_reviews,
        admin_reviews=admin_reviews,
        community_reviews=total_reviews - verified_tester_reviews - admin_reviews,
        average_rating=sum(r.rating for r in reviews) / total_reviews,
        helpful_votes=sum(r.helpful_votes for r in reviews),
        total_votes=sum(r.total_votes for r in reviews),
        review_quality=sum(review_quality(r) for r in reviews) / total_reviews,
        confidence_score=0,
    )


def weighted_scores(factors: VerdictFactors) -> tuple[float, float, float]:
    """Return (weighted_keep, weighted_try, weighted_stop)."""
    has_testers = factors.verified_tester_reviews > 0
    has_admins = factors.admin_reviews > 0

    scores = []
    for index, percentage in enumerate(
        (factors.keep_percentage, factors.try_percentage, factors.stop_percentage)
    ):
        score = percentage * COMMUNITY_WEIGHT
        if has_testers:
            score += VERIFIED_TESTER_BONUS[index] * VERIFIED_TESTER_WEIGHT
        if has_admins:
            score += ADMIN_BONUS[index] * ADMIN_WEIGHT
        scores.append(score)
    return scores[0], scores[1], scores[2]


def determine_verdict(factors: VerdictFactors) -> str:
    """Pick keep / try / stop from the weighted scores. First matching rule wins."""
    weighted_keep, weighted_try, weighted_stop = weighted_scores(factors)

    if (
        weighted_keep > weighted_try
        and weighted_keep > weighted_stop
        and factors.average_rating >= KEEP_MIN_AVERAGE
    ):
        return "keep"
    if weighted_try > weighted_stop and factors.average_rating >= TRY_MIN_AVERAGE:
        return "try"
    if weighted_stop > weighted_keep and weighted_stop > weighted_try:
        return "stop"
    # Unclear signal defaults to try
    return "try"


def calculate_confidence(factors: VerdictFactors) -> int:
    """Score 0-100 for how much evidence backs the verdict."""
    confidence = min(factors.total_reviews / 10, 1) * 30
    confidence += factors.review_quality * 20

    if factors.verified_tester_reviews > 0:
        confidence += min(factors.verified_tester_reviews / 3, 1) * 25
    if factors.admin_reviews > 0:
        confidence += min(factors.admin_reviews / 2, 1) * 25
    if factors.total_votes > 0:
        confidence += min(factors.helpful_votes / factors.total_votes, 1) * 10

    return min(round_half_up(confidence), 100)


def generate_explanation(verdict: str, factors: VerdictFactors) -> str:
    """Render a verdict and its factors as a short human-readable summary."""
    summary = (
        f"Based on {factors.total_reviews} reviews with an average rating of "
        f"{_one_decimal(factors.average_rating)}/5.0. "
    )

    if verdict == "keep":
        return summary + (
            f"{round_half_up(factors.keep_percentage)}% of reviewers recommend keeping this tool. "
            f"{factors.verified_tester_reviews} verified tester reviews and "
            f"{factors.admin_reviews} admin reviews support this recommendation."
        )
    if verdict == "try":
        return summary + (
            f"{round_half_up(factors.try_percentage)}% of reviewers suggest trying this tool. "
            "Consider testing it with your specific use case to determine if it fits your needs."
        )
    if verdict == "stop":
        return summary + (
            f"{round_half_up(factors.stop_percentage)}% of reviewers recommend avoiding this tool. "
            "Consider alternatives or wait for improvements before investing time and resources."
        )
    return (
        f"Limited review data available ({factors.total_reviews} reviews). "
        "More reviews are needed to provide a reliable recommendation."
    )


def review_breakdown(factors: VerdictFactors) -> ReviewBreakdown:
    """Approximate keep/try/stop review counts from the stored percentages."""
    total = factors.total_reviews
    return ReviewBreakdown(
        keep=round_half_up(factors.keep_percentage * total / 100),
        try_=round_half_up(factors.try_percentage * total / 100),
        stop=round_half_up(factors.stop_percentage * total / 100),
    )


def insufficient_data_verdict(
    tool_id: uuid.UUID, calculated_at: Optional[datetime] = None
) -> ToolVerdict:
    """The verdict for a tool with no active reviews: zeroed factors, confidence 0."""
    return ToolVerdict(
        tool_id=tool_id,
        verdict=INSUFFICIENT_DATA,
        confidence=0,
        factors=VerdictFactors(),
        explanation=NO_REVIEWS_EXPLANATION,
        last_calculated=calculated_at or datetime.now(timezone.utc),
        review_breakdown=ReviewBreakdown(),
    )
