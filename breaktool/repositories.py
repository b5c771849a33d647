"""Storage adapters used by the verdict engine.

The engine depends only on the two Protocols below. The SQLAlchemy classes are
the production implementations; tests substitute in-memory fakes.

Design notes:
- SqlVerdictRepository commits its own writes. A verdict write is a single-row
  UPDATE on tools, so concurrent recalculations for the same tool simply race
  and the last writer wins.
- insufficient_data is stored as a NULL tools.verdict; readers map it back.
- Factors are stored as camelCase JSON (VerdictFactors.model_dump(by_alias=True)).
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from breaktool.models.review import Review, ReviewStatus
from breaktool.models.tool import Tool
from breaktool.models.user import User
from breaktool.schemas.verdict import INSUFFICIENT_DATA, ReviewSnapshot, VerdictFactors
from breaktool.services.verdict import resolve_reviewer_role


class ToolNotFoundError(Exception):
    """Raised when a verdict is written for a tool id that does not exist."""

    def __init__(self, tool_id: uuid.UUID):
        super().__init__(f"Tool {tool_id} not found")
        self.tool_id = tool_id


@dataclass(frozen=True)
class StoredVerdict:
    """A verdict row as persisted on the tools table."""

    tool_id: uuid.UUID
    verdict: Optional[str]
    confidence: int
    factors: Optional[dict]
    updated_at: Optional[datetime]


class ReviewRepository(Protocol):
    async def load_active_reviews(self, tool_id: uuid.UUID) -> list[ReviewSnapshot]: ...


class VerdictRepository(Protocol):
    async def save_verdict(
        self,
        tool_id: uuid.UUID,
        verdict: str,
        confidence: int,
        factors: VerdictFactors,
        calculated_at: datetime,
    ) -> None: ...

    async def load_verdict(self, tool_id: uuid.UUID) -> Optional[StoredVerdict]: ...

    async def load_all_verdicts(self) -> list[StoredVerdict]: ...

    async def override_verdict(
        self, tool_id: uuid.UUID, verdict: str, updated_at: datetime
    ) -> StoredVerdict: ...


class SqlReviewRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_active_reviews(self, tool_id: uuid.UUID) -> list[ReviewSnapshot]:
        """Fetch the tool's active reviews joined with their authors' role flags."""
        result = await self.db.execute(
            select(
                Review.rating,
                Review.helpful_votes,
                Review.total_votes,
                Review.content,
                Review.created_at,
                User.role,
                User.is_verified_tester,
            )
            .join(User, Review.user_id == User.id)
            .where(Review.tool_id == tool_id)
            .where(Review.status == ReviewStatus.active.value)
            .order_by(Review.created_at)
        )
        return [
            ReviewSnapshot(
                rating=row.rating,
                reviewer_role=resolve_reviewer_role(row.role, row.is_verified_tester),
                helpful_votes=row.helpful_votes,
                total_votes=row.total_votes,
                content=row.content,
                created_at=row.created_at,
            )
            for row in result.all()
        ]


def _stored_verdict(row) -> StoredVerdict:
    return StoredVerdict(
        tool_id=row.id,
        verdict=row.verdict,
        confidence=row.verdict_confidence or 0,
        factors=row.verdict_factors,
        updated_at=row.verdict_updated_at,
    )


_VERDICT_COLUMNS = (
    Tool.id,
    Tool.verdict,
    Tool.verdict_confidence,
    Tool.verdict_factors,
    Tool.verdict_updated_at,
)


class SqlVerdictRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_verdict(
        self,
        tool_id: uuid.UUID,
        verdict: str,
        confidence: int,
        factors: VerdictFactors,
        calculated_at: datetime,
    ) -> None:
        """Overwrite the tool's verdict columns in one UPDATE and commit."""
        result = await self.db.execute(
            update(Tool)
            .where(Tool.id == tool_id)
            .values(
                verdict=None if verdict == INSUFFICIENT_DATA else verdict,
                verdict_confidence=confidence,
                verdict_factors=factors.model_dump(by_alias=True),
                verdict_updated_at=calculated_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ToolNotFoundError(tool_id)
        await self.db.commit()

    async def load_verdict(self, tool_id: uuid.UUID) -> Optional[StoredVerdict]:
        result = await self.db.execute(select(*_VERDICT_COLUMNS).where(Tool.id == tool_id))
        row = result.one_or_none()
        if row is None:
            return None
        return _stored_verdict(row)

    async def load_all_verdicts(self) -> list[StoredVerdict]:
        result = await self.db.execute(
            select(*_VERDICT_COLUMNS)
            .where(Tool.verdict.is_not(None))
            .order_by(Tool.verdict_confidence.desc())
        )
        return [_stored_verdict(row) for row in result.all()]

    async def override_verdict(
        self, tool_id: uuid.UUID, verdict: str, updated_at: datetime
    ) -> StoredVerdict:
        """Set a manual verdict, leaving confidence and factors as they were."""
        result = await self.db.execute(
            update(Tool)
            .where(Tool.id == tool_id)
            .values(verdict=verdict, verdict_updated_at=updated_at)
            .returning(*_VERDICT_COLUMNS)
        )
        row = result.one_or_none()
        if row is None:
            await self.db.rollback()
            raise ToolNotFoundError(tool_id)
        await self.db.commit()
        return _stored_verdict(row)
