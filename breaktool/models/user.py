import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .review import Review
    from .review_vote import ReviewVote


class UserRole(str, enum.Enum):
    community = "community"
    vendor = "vendor"
    verified_tester = "verified_tester"
    admin = "admin"
    super_admin = "super_admin"


ADMIN_ROLES = frozenset({UserRole.admin.value, UserRole.super_admin.value})


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    role: Mapped[str] = mapped_column(
        String(20), default=UserRole.community, nullable=False
    )
    is_verified_tester: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Trust score (0-100), recomputed by services.trust_score
    trust_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    helpful_votes_received: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    reviews: Mapped[list["Review"]] = relationship("Review", back_populates="user")
    review_votes: Mapped[list["ReviewVote"]] = relationship("ReviewVote", back_populates="user")
