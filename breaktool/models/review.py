import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .review_vote import ReviewVote
    from .tool import Tool
    from .user import User


class ReviewStatus(str, enum.Enum):
    active = "active"
    hidden = "hidden"
    removed = "removed"


class ReviewType(str, enum.Enum):
    community = "community"
    verified_tester = "verified_tester"
    admin = "admin"


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        Index("ix_reviews_tool_id_status", "tool_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    tool_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("tools.id"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=ReviewStatus.active, nullable=False
    )
    review_type: Mapped[str] = mapped_column(
        String(20), default=ReviewType.community, nullable=False
    )

    # Rating is nullable on legacy rows; aggregation treats NULL as 0
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    recommendation: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    # Structured sub-scores on a 1-10 scale
    overall_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    value_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    usage_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    integration_score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Free-form detail fields
    pain_points: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    setup_time: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    roi_story: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    usage_recommendations: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    weaknesses: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    pros: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    cons: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    # Denormalized vote counters, kept in step with review_votes
    helpful_votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    tool: Mapped["Tool"] = relationship("Tool", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")
    votes: Mapped[list["ReviewVote"]] = relationship("ReviewVote", back_populates="review")
