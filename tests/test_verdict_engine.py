"""Tests for VerdictEngine against in-memory stores.

Covers the write-through pipeline, the zero-review short circuit, read-back
of stored verdicts (including legacy factor snapshots), bulk listing, manual
overrides and error propagation from the stores.
"""

import asyncio
import uuid

import pytest

from helpers import NOW, make_review

from breaktool.repositories import ToolNotFoundError
from breaktool.schemas.verdict import VerdictFactors
from breaktool.services.verdict import NO_REVIEWS_EXPLANATION
from breaktool.services.verdict_engine import VerdictEngine


def _strong_keep_reviews():
    roles = ["verified_tester"] * 3 + ["admin"] * 2 + ["community"] * 5
    return [
        make_review(rating=5.0, role=role, helpful=1, total=1, content="x" * 300)
        for role in roles
    ]


class TestCalculateToolVerdict:
    def test_full_pipeline_writes_through(self, engine, review_repo, verdict_repo, tool_id):
        review_repo.add(tool_id, *_strong_keep_reviews())

        result = asyncio.run(engine.calculate_tool_verdict(tool_id))

        assert result.tool_id == tool_id
        assert result.verdict == "keep"
        assert result.confidence >= 80
        assert result.last_calculated == NOW
        assert result.review_breakdown.keep == 10

        stored = verdict_repo.rows[tool_id]
        assert stored.verdict == "keep"
        assert stored.confidence == result.confidence
        assert stored.factors["totalReviews"] == 10
        assert stored.factors["confidenceScore"] == 0
        assert stored.updated_at == NOW

    def test_zero_reviews_is_insufficient_data(self, engine, verdict_repo, tool_id):
        result = asyncio.run(engine.calculate_tool_verdict(tool_id))

        assert result.verdict == "insufficient_data"
        assert result.confidence == 0
        assert result.factors == VerdictFactors()
        assert result.explanation == NO_REVIEWS_EXPLANATION
        assert result.review_breakdown.model_dump(by_alias=True) == {"keep": 0, "try": 0, "stop": 0}
        assert verdict_repo.rows[tool_id].verdict is None

    def test_zero_reviews_clears_previous_verdict(self, engine, review_repo, verdict_repo, tool_id):
        review_repo.add(tool_id, make_review(rating=1.0))
        asyncio.run(engine.calculate_tool_verdict(tool_id))
        assert verdict_repo.rows[tool_id].verdict == "stop"

        review_repo.reviews[tool_id] = []
        asyncio.run(engine.calculate_tool_verdict(tool_id))

        assert verdict_repo.rows[tool_id].verdict is None
        assert verdict_repo.rows[tool_id].confidence == 0

    def test_recalculation_is_idempotent(self, engine, review_repo, tool_id):
        review_repo.add(
            tool_id,
            make_review(rating=4.0, helpful=2, total=3, content="decent"),
            make_review(rating=2.5, role="verified_tester"),
            make_review(rating=4.8, role="admin", content="x" * 150),
        )

        first = asyncio.run(engine.calculate_tool_verdict(tool_id))
        second = asyncio.run(engine.calculate_tool_verdict(tool_id))

        assert first == second

    def test_unknown_tool_raises(self, engine):
        with pytest.raises(ToolNotFoundError):
            asyncio.run(engine.calculate_tool_verdict(uuid.uuid4()))

    def test_store_read_failure_propagates(self, verdict_repo, tool_id):
        class FailingReviewRepository:
            async def load_active_reviews(self, tool_id):
                raise ConnectionError("database unavailable")

        engine = VerdictEngine(reviews=FailingReviewRepository(), verdicts=verdict_repo)

        with pytest.raises(ConnectionError):
            asyncio.run(engine.calculate_tool_verdict(tool_id))
        assert verdict_repo.save_calls == 0


class TestGetToolVerdict:
    def test_read_back_matches_calculation(self, engine, review_repo, tool_id):
        review_repo.add(tool_id, make_review(rating=3.5), make_review(rating=3.2))
        calculated = asyncio.run(engine.calculate_tool_verdict(tool_id))

        stored = asyncio.run(engine.get_tool_verdict(tool_id))

        assert stored == calculated

    def test_unknown_tool_returns_none(self, engine):
        assert asyncio.run(engine.get_tool_verdict(uuid.uuid4())) is None

    def test_never_calculated_reads_as_insufficient_data(self, engine, tool_id):
        result = asyncio.run(engine.get_tool_verdict(tool_id))

        assert result.verdict == "insufficient_data"
        assert result.confidence == 0
        assert result.factors == VerdictFactors()
        assert result.last_calculated == NOW

    def test_legacy_factor_snapshot_defaults_missing_values(self, engine, verdict_repo):
        tool_id = uuid.uuid4()
        verdict_repo.add_tool(
            tool_id,
            verdict="keep",
            confidence=72,
            factors={"totalReviews": 4, "keepPercentage": None, "averageRating": 4.6},
            updated_at=NOW,
        )

        result = asyncio.run(engine.get_tool_verdict(tool_id))

        assert result.factors.keep_percentage == 0
        assert result.factors.admin_reviews == 0
        assert "0% of reviewers recommend keeping" in result.explanation
        assert "Based on 4 reviews with an average rating of 4.6/5.0." in result.explanation


class TestGetAllToolVerdicts:
    def test_sorted_by_confidence_and_filtered(self, engine, review_repo, verdict_repo):
        weak, strong, empty = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        for tool in (weak, strong, empty):
            verdict_repo.add_tool(tool)
        review_repo.add(weak, make_review(rating=2.0))
        review_repo.add(strong, *_strong_keep_reviews())

        for tool in (weak, strong, empty):
            asyncio.run(engine.calculate_tool_verdict(tool))

        verdicts = asyncio.run(engine.get_all_tool_verdicts())

        assert [v.tool_id for v in verdicts] == [strong, weak]
        assert [v.verdict for v in verdicts] == ["keep", "stop"]


class TestOverrideToolVerdict:
    def test_override_keeps_confidence_and_factors(self, engine, review_repo, tool_id):
        review_repo.add(tool_id, make_review(rating=2.0))
        calculated = asyncio.run(engine.calculate_tool_verdict(tool_id))

        overridden = asyncio.run(engine.override_tool_verdict(tool_id, "keep"))

        assert overridden.verdict == "keep"
        assert overridden.confidence == calculated.confidence
        assert overridden.factors == calculated.factors

    def test_override_unknown_tool_raises(self, engine):
        with pytest.raises(ToolNotFoundError):
            asyncio.run(engine.override_tool_verdict(uuid.uuid4(), "stop"))
