"""Shared fixtures: in-memory stand-ins for the review and verdict stores."""

import uuid
from datetime import datetime
from typing import Optional

import pytest

from breaktool.repositories import StoredVerdict, ToolNotFoundError
from breaktool.schemas.verdict import INSUFFICIENT_DATA, ReviewSnapshot, VerdictFactors
from breaktool.services.verdict_engine import VerdictEngine

from helpers import NOW


class InMemoryReviewRepository:
    def __init__(self):
        self.reviews: dict[uuid.UUID, list[ReviewSnapshot]] = {}
        self.load_calls = 0

    def add(self, tool_id: uuid.UUID, *reviews: ReviewSnapshot) -> None:
        self.reviews.setdefault(tool_id, []).extend(reviews)

    async def load_active_reviews(self, tool_id: uuid.UUID) -> list[ReviewSnapshot]:
        self.load_calls += 1
        return list(self.reviews.get(tool_id, []))


class InMemoryVerdictRepository:
    def __init__(self):
        self.rows: dict[uuid.UUID, StoredVerdict] = {}
        self.save_calls = 0

    def add_tool(self, tool_id: uuid.UUID, **stored) -> None:
        self.rows[tool_id] = StoredVerdict(
            tool_id=tool_id,
            verdict=stored.get("verdict"),
            confidence=stored.get("confidence", 0),
            factors=stored.get("factors"),
            updated_at=stored.get("updated_at"),
        )

    async def save_verdict(
        self,
        tool_id: uuid.UUID,
        verdict: str,
        confidence: int,
        factors: VerdictFactors,
        calculated_at: datetime,
    ) -> None:
        if tool_id not in self.rows:
            raise ToolNotFoundError(tool_id)
        self.save_calls += 1
        self.rows[tool_id] = StoredVerdict(
            tool_id=tool_id,
            verdict=None if verdict == INSUFFICIENT_DATA else verdict,
            confidence=confidence,
            factors=factors.model_dump(by_alias=True),
            updated_at=calculated_at,
        )

    async def load_verdict(self, tool_id: uuid.UUID) -> Optional[StoredVerdict]:
        return self.rows.get(tool_id)

    async def load_all_verdicts(self) -> list[StoredVerdict]:
        rows = [row for row in self.rows.values() if row.verdict is not None]
        return sorted(rows, key=lambda row: row.confidence, reverse=True)

    async def override_verdict(
        self, tool_id: uuid.UUID, verdict: str, updated_at: datetime
    ) -> StoredVerdict:
        if tool_id not in self.rows:
            raise ToolNotFoundError(tool_id)
        current = self.rows[tool_id]
        self.rows[tool_id] = StoredVerdict(
            tool_id=tool_id,
            verdict=verdict,
            confidence=current.confidence,
            factors=current.factors,
            updated_at=updated_at,
        )
        return self.rows[tool_id]


@pytest.fixture
def review_repo() -> InMemoryReviewRepository:
    return InMemoryReviewRepository()


@pytest.fixture
def verdict_repo() -> InMemoryVerdictRepository:
    return InMemoryVerdictRepository()


@pytest.fixture
def engine(review_repo, verdict_repo) -> VerdictEngine:
    return VerdictEngine(reviews=review_repo, verdicts=verdict_repo, clock=lambda: NOW)


@pytest.fixture
def tool_id(verdict_repo) -> uuid.UUID:
    """A tool that exists in the verdict store with no verdict yet."""
    new_id = uuid.uuid4()
    verdict_repo.add_tool(new_id)
    return new_id
