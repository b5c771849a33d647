"""User trust score endpoints.

GET  /api/v1/users/trusted                 -- top trusted users
GET  /api/v1/users/{user_id}/trust-score   -- stored score + badge
POST /api/v1/users/{user_id}/trust-score   -- recompute and store
"""

import uuid
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from breaktool.config import settings
from breaktool.dependencies import DbSession
from breaktool.middleware.rate_limiter import ReadRateLimit, WriteRateLimit
from breaktool.schemas.trust import TrustScoreResponse
from breaktool.services.trust_score import (
    calculate_trust_score,
    get_top_trusted_users,
    get_trust_score,
)

router = APIRouter(prefix="/api/v1", tags=["trust"])


@router.get("/users/trusted", response_model=list[TrustScoreResponse])
async def list_trusted_users(
    db: DbSession,
    _rate: ReadRateLimit,
    limit: Optional[int] = Query(default=None, ge=1, le=100),
) -> list[TrustScoreResponse]:
    return await get_top_trusted_users(db, limit or settings.trusted_users_default_limit)


@router.get("/users/{user_id}/trust-score", response_model=TrustScoreResponse)
async def read_trust_score(
    user_id: uuid.UUID,
    db: DbSession,
    _rate: ReadRateLimit,
) -> TrustScoreResponse:
    trust = await get_trust_score(db, user_id)
    if trust is None:
        raise HTTPException(status_code=404, detail="User not found")
    return trust


@router.post("/users/{user_id}/trust-score", response_model=TrustScoreResponse)
async def recalculate_trust_score(
    user_id: uuid.UUID,
    db: DbSession,
    _rate: WriteRateLimit,
) -> TrustScoreResponse:
    """Recompute the user's trust score from their reviews and store it."""
    trust = await calculate_trust_score(db, user_id)
    if trust is None:
        raise HTTPException(status_code=404, detail="User not found")
    return trust
