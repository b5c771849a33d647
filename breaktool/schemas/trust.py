"""Pydantic schemas for user trust score endpoints."""

import uuid
from datetime import datetime
from typing import Optional

from breaktool.schemas.verdict import CamelModel


class TrustScoreFactors(CamelModel):
    review_count: int
    review_quality: float
    helpful_votes_received: int
    activity_recency: float
    verified_expertise: bool


class TrustScoreResponse(CamelModel):
    user_id: uuid.UUID
    score: int
    last_calculated: datetime
    badge: Optional[str] = None
    display_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    factors: Optional[TrustScoreFactors] = None
