"""Initial schema — users, tools, reviews, review_votes

Revision ID: 5a1f0c2e9b10
Revises:
Create Date: 2026-10-19 00:01:00.000000

Written manually (not via autogenerate) so the verdict columns and the
(tool_id, status) review index are reviewable in one place.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSON, UUID

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5a1f0c2e9b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    # --- users table ---
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="community"),
        sa.Column("is_verified_tester", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("trust_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("helpful_votes_received", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
    )

    # --- tools table ---
    op.create_table(
        "tools",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        sa.Column("verdict", sa.String(20), nullable=True),
        sa.Column("verdict_confidence", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("verdict_factors", JSON(), nullable=True),
        sa.Column("verdict_updated_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    # --- reviews table ---
    op.create_table(
        "reviews",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("tool_id", UUID(as_uuid=True), sa.ForeignKey("tools.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("review_type", sa.String(20), nullable=False, server_default="community"),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("recommendation", sa.String(10), nullable=True),
        sa.Column("overall_score", sa.Float(), nullable=True),
        sa.Column("value_score", sa.Float(), nullable=True),
        sa.Column("usage_score", sa.Float(), nullable=True),
        sa.Column("integration_score", sa.Float(), nullable=True),
        sa.Column("pain_points", sa.Text(), nullable=True),
        sa.Column("setup_time", sa.Text(), nullable=True),
        sa.Column("roi_story", sa.Text(), nullable=True),
        sa.Column("usage_recommendations", sa.Text(), nullable=True),
        sa.Column("weaknesses", sa.Text(), nullable=True),
        sa.Column("pros", JSON(), nullable=True),
        sa.Column("cons", JSON(), nullable=True),
        sa.Column("helpful_votes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_votes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    )

    # --- review_votes table ---
    op.create_table(
        "review_votes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("review_id", UUID(as_uuid=True), sa.ForeignKey("reviews.id"), nullable=False),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("vote_type", sa.String(20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("review_id", "user_id", name="uq_review_votes_review_id_user_id"),
    )

    # Verdict aggregation reads active reviews per tool
    op.create_index("ix_reviews_tool_id_status", "reviews", ["tool_id", "status"])
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    # getAllToolVerdicts sorts by confidence
    op.create_index("ix_tools_verdict_confidence", "tools", ["verdict_confidence"])
    op.create_index("ix_users_trust_score", "users", ["trust_score"])


def downgrade() -> None:
    op.drop_index("ix_users_trust_score", table_name="users")
    op.drop_index("ix_tools_verdict_confidence", table_name="tools")
    op.drop_index("ix_reviews_user_id", table_name="reviews")
    op.drop_index("ix_reviews_tool_id_status", table_name="reviews")
    op.drop_table("review_votes")
    op.drop_table("reviews")
    op.drop_table("tools")
    op.drop_table("users")
