"""Tests for the review analytics scoring functions."""

import pytest

from breaktool.models import Review, User
from breaktool.services.review_analytics import (
    engagement_rate,
    helpfulness_score,
    platform_metrics_from_reviews,
    quality_score,
    sentiment_score,
)


class TestHelpfulnessScore:
    def test_ratio_of_helpful_votes(self):
        votes = ["helpful", "helpful", "not_helpful", "helpful"]
        assert helpfulness_score(votes) == 75.0

    def test_no_votes_scores_zero(self):
        assert helpfulness_score([]) == 0.0


class TestQualityScore:
    def test_bare_review_gets_floor_points(self):
        # shortest content tier (5) + community review type (3)
        assert quality_score(Review(), None) == 8

    def test_detailed_tester_review(self):
        review = Review(
            content="x" * 600,
            overall_score=8,
            value_score=7,
            usage_score=9,
            integration_score=6,
            pain_points="Slow exports",
            setup_time="Two hours",
            pros=["fast", "cheap"],
            cons=["no SSO"],
            review_type="verified_tester",
        )
        user = User(role="community", is_verified_tester=True, trust_score=0)
        # 20 length + 20 sub-scores + 8 details + 6 pros/cons + 10 tester + 7 type
        assert quality_score(review, user) == 71

    @pytest.mark.parametrize(
        "length, expected",
        [(50, 8), (101, 13), (301, 18), (501, 23)],
    )
    def test_content_length_tiers(self, length, expected):
        assert quality_score(Review(content="x" * length), None) == expected

    def test_partial_sub_scores_earn_nothing(self):
        review = Review(overall_score=8, value_score=7, usage_score=9)
        assert quality_score(review, None) == 8

    def test_trusted_community_member_bonus(self):
        user = User(role="community", is_verified_tester=False, trust_score=60)
        assert quality_score(Review(), user) == 13

    def test_capped_at_one_hundred(self):
        review = Review(
            content="x" * 1000,
            overall_score=10,
            value_score=10,
            usage_score=10,
            integration_score=10,
            pain_points="a",
            setup_time="b",
            roi_story="c",
            usage_recommendations="d",
            weaknesses="e",
            pros=["p"] * 10,
            cons=["c"] * 10,
            review_type="admin",
        )
        user = User(role="super_admin", is_verified_tester=True, trust_score=99)
        assert quality_score(review, user) == 100


class TestEngagementRate:
    @pytest.mark.parametrize(
        "votes, expected",
        [(0, 0), (1, 40), (2, 40), (3, 60), (5, 80), (9, 80), (10, 100), (250, 100)],
    )
    def test_tiers(self, votes, expected):
        assert engagement_rate(votes) == expected


class TestSentimentScore:
    def test_keep_with_scores(self):
        review = Review(
            recommendation="keep", overall_score=8, value_score=6, usage_score=10, integration_score=8
        )
        assert sentiment_score(review) == pytest.approx(88.0)

    def test_no_recommendation_no_scores(self):
        assert sentiment_score(Review()) == 20.0

    def test_stop_with_perfect_scores(self):
        review = Review(recommendation="stop", overall_score=10, value_score=10)
        assert sentiment_score(review) == pytest.approx(70.0)

    def test_capped_at_one_hundred(self):
        review = Review(recommendation="keep", overall_score=10)
        assert sentiment_score(review) == 100.0


class TestPlatformMetrics:
    def test_averages(self):
        reviews = [
            Review(helpful_votes=3, total_votes=4, overall_score=8, value_score=6),
            Review(helpful_votes=0, total_votes=0),
        ]
        metrics = platform_metrics_from_reviews(reviews)
        assert metrics.total_reviews == 2
        assert metrics.average_helpfulness == pytest.approx(37.5)
        assert metrics.average_quality == pytest.approx(35.0)
        assert metrics.average_engagement == 50
        assert metrics.top_reviewers == []

    def test_no_reviews(self):
        metrics = platform_metrics_from_reviews([])
        assert metrics.total_reviews == 0
        assert metrics.average_engagement == 0
