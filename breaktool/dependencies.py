from typing import Annotated

import redis.asyncio as aioredis
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from breaktool.database import get_db
from breaktool.repositories import SqlReviewRepository, SqlVerdictRepository
from breaktool.services.verdict_engine import VerdictEngine

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_redis(request: Request) -> aioredis.Redis:
    """Inject the Redis client from app.state (set during lifespan startup)."""
    return request.app.state.redis


async def get_verdict_engine(db: DbSession) -> VerdictEngine:
    """Build a VerdictEngine over SQLAlchemy repositories sharing the request session."""
    return VerdictEngine(
        reviews=SqlReviewRepository(db),
        verdicts=SqlVerdictRepository(db),
    )


# Annotated type aliases for clean endpoint signatures
RedisClient = Annotated[aioredis.Redis, Depends(get_redis)]
VerdictEngineDep = Annotated[VerdictEngine, Depends(get_verdict_engine)]
