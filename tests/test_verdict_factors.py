"""Tests for review ingestion and factor aggregation in services.verdict.

Covers:
- Rating bands (4.5 keep, 3.0 try, below 3.0 stop) at their exact boundaries
- Percentage and reviewer-count invariants
- Per-review quality proxy (length, votes, reviewer type)
- NULL-to-zero leniency when building ReviewSnapshot
- Reviewer role resolution from account flags
"""

import pytest

from helpers import make_review

from breaktool.schemas.verdict import ReviewSnapshot
from breaktool.services.verdict import (
    calculate_verdict_factors,
    resolve_reviewer_role,
    review_quality,
)


class TestRatingBands:
    def test_rating_exactly_four_and_a_half_is_keep(self):
        factors = calculate_verdict_factors([make_review(rating=4.5)])
        assert factors.keep_percentage == 100
        assert factors.try_percentage == 0

    def test_rating_exactly_three_is_try(self):
        factors = calculate_verdict_factors([make_review(rating=3.0)])
        assert factors.try_percentage == 100
        assert factors.stop_percentage == 0

    def test_rating_just_below_three_is_stop(self):
        factors = calculate_verdict_factors([make_review(rating=2.999)])
        assert factors.stop_percentage == 100

    def test_rating_just_below_four_and_a_half_is_try(self):
        factors = calculate_verdict_factors([make_review(rating=4.49)])
        assert factors.try_percentage == 100


class TestInvariants:
    @pytest.mark.parametrize(
        "ratings",
        [
            [5.0],
            [5.0, 3.5, 1.0],
            [4.5, 4.5, 3.0, 2.0, 0.0, 5.0, 3.9],
            [1.0] * 7,
        ],
    )
    def test_percentages_sum_to_one_hundred(self, ratings):
        factors = calculate_verdict_factors([make_review(rating=r) for r in ratings])
        total = factors.keep_percentage + factors.try_percentage + factors.stop_percentage
        assert abs(total - 100) < 1e-6

    def test_reviewer_counts_sum_to_total(self):
        reviews = [
            make_review(role="admin"),
            make_review(role="verified_tester"),
            make_review(role="verified_tester"),
            make_review(role="community"),
            make_review(role="community"),
            make_review(role="community"),
        ]
        factors = calculate_verdict_factors(reviews)
        assert factors.admin_reviews == 1
        assert factors.verified_tester_reviews == 2
        assert factors.community_reviews == 3
        assert (
            factors.admin_reviews + factors.verified_tester_reviews + factors.community_reviews
            == factors.total_reviews
            == 6
        )

    def test_sums_and_average(self):
        reviews = [
            make_review(rating=5.0, helpful=3, total=4),
            make_review(rating=2.0, helpful=1, total=5),
        ]
        factors = calculate_verdict_factors(reviews)
        assert factors.average_rating == 3.5
        assert factors.helpful_votes == 4
        assert factors.total_votes == 9

    def test_confidence_placeholder_is_always_zero(self):
        factors = calculate_verdict_factors([make_review(rating=5.0, role="admin")])
        assert factors.confidence_score == 0

    def test_empty_input_is_rejected(self):
        with pytest.raises(ValueError):
            calculate_verdict_factors([])


class TestReviewQuality:
    def test_length_term_caps_at_two_hundred_chars(self):
        short = make_review(content="x" * 100)
        long = make_review(content="x" * 1000)
        assert review_quality(short) == pytest.approx(0.5 + 0.1)
        assert review_quality(long) == pytest.approx(1.0 + 0.1)

    def test_vote_term_is_helpful_ratio(self):
        review = make_review(helpful=3, total=4)
        assert review_quality(review) == pytest.approx(0.75 + 0.1)

    def test_vote_term_is_zero_without_votes(self):
        assert review_quality(make_review(helpful=0, total=0)) == pytest.approx(0.1)

    @pytest.mark.parametrize(
        "role, expected",
        [("admin", 0.4), ("verified_tester", 0.3), ("community", 0.1)],
    )
    def test_reviewer_type_term(self, role, expected):
        assert review_quality(make_review(role=role)) == pytest.approx(expected)

    def test_tool_quality_is_mean_of_reviews(self):
        reviews = [
            make_review(role="admin", content="x" * 200, helpful=2, total=2),  # 2.4
            make_review(role="community"),  # 0.1
        ]
        factors = calculate_verdict_factors(reviews)
        assert factors.review_quality == pytest.approx(1.25)


class TestMalformedReviews:
    def test_nulls_coerce_to_zero(self):
        review = ReviewSnapshot(rating=None, helpful_votes=None, total_votes=None, content=None)
        assert review.rating == 0
        assert review.helpful_votes == 0
        assert review.total_votes == 0
        assert review.content == ""

    def test_null_rating_counts_as_stop_without_failing(self):
        reviews = [make_review(rating=None), make_review(rating=5.0)]
        factors = calculate_verdict_factors(reviews)
        assert factors.stop_percentage == 50
        assert factors.keep_percentage == 50
        assert factors.average_rating == 2.5


class TestResolveReviewerRole:
    @pytest.mark.parametrize(
        "role, verified, expected",
        [
            ("admin", False, "admin"),
            ("super_admin", True, "admin"),
            ("community", True, "verified_tester"),
            ("verified_tester", True, "verified_tester"),
            ("vendor", False, "community"),
            (None, None, "community"),
        ],
    )
    def test_single_category_per_reviewer(self, role, verified, expected):
        assert resolve_reviewer_role(role, verified) == expected
