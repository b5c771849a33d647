"""Pydantic schemas for tool verdicts.

Verdict payloads are serialized with camelCase keys (toolId, keepPercentage,
reviewBreakdown, ...) because the dashboard and the persisted
tools.verdict_factors JSON both use that shape. Python code always works with
the snake_case attribute names.
"""

import uuid
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

VerdictValue = Literal["keep", "try", "stop", "insufficient_data"]
ManualVerdictValue = Literal["keep", "try", "stop"]
ReviewerRole = Literal["community", "verified_tester", "admin"]

INSUFFICIENT_DATA = "insufficient_data"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewSnapshot(BaseModel):
    """One active review as seen by the verdict aggregator.

    NULL numeric columns coerce to 0 and NULL content to "" so a single
    malformed row cannot fail the whole aggregation.
    """

    rating: float = 0.0
    reviewer_role: ReviewerRole = "community"
    helpful_votes: int = 0
    total_votes: int = 0
    content: str = ""
    created_at: Optional[datetime] = None

    @field_validator("rating", "helpful_votes", "total_votes", mode="before")
    @classmethod
    def null_to_zero(cls, value: Any) -> Any:
        return value or 0

    @field_validator("content", mode="before")
    @classmethod
    def null_to_empty(cls, value: Any) -> Any:
        return value or ""


class VerdictFactors(CamelModel):
    """Aggregate statistics computed from a tool's active reviews."""

    keep_percentage: float = 0.0
    try_percentage: float = 0.0
    stop_percentage: float = 0.0
    total_reviews: int = 0
    verified_tester_reviews: int = 0
    admin_reviews: int = 0
    community_reviews: int = 0
    average_rating: float = 0.0
    helpful_votes: int = 0
    total_votes: int = 0
    review_quality: float = 0.0
    # Always 0 here; the reported confidence lives on ToolVerdict.confidence
    confidence_score: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Stored factor snapshots may carry nulls; treat them as missing (0)."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ReviewBreakdown(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    keep: int = 0
    try_: int = Field(default=0, alias="try")
    stop: int = 0


class ToolVerdict(CamelModel):
    """Response schema for a tool's verdict (calculated or read back)."""

    tool_id: uuid.UUID
    verdict: VerdictValue
    confidence: int
    factors: VerdictFactors
    explanation: str
    last_calculated: datetime
    review_breakdown: ReviewBreakdown


class VerdictRequest(CamelModel):
    """Request body for POST /api/v1/verdict."""

    tool_id: uuid.UUID
    action: Optional[str] = "calculate"


class VerdictOverride(BaseModel):
    """Request body for an admin's manual verdict override."""

    verdict: ManualVerdictValue
