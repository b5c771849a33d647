"""Verdict refresh worker: periodically recalculates every tool's verdict.

Each tool is recalculated in its own session so one failing tool (bad data,
a dropped connection) is logged and skipped without aborting the cycle.

Run with:
    python -m breaktool.worker.verdict_worker
"""

import asyncio
from collections import Counter
from typing import Callable

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from breaktool.config import settings
from breaktool.database import async_session_factory
from breaktool.logging_config import configure_logging
from breaktool.metrics import verdict_refresh_runs
from breaktool.models.tool import Tool
from breaktool.repositories import SqlReviewRepository, SqlVerdictRepository
from breaktool.services.verdict_engine import VerdictEngine

log = structlog.get_logger(__name__)


async def run_refresh_cycle(
    session_factory: Callable[[], AsyncSession] = async_session_factory,
) -> dict[str, int]:
    """Recalculate the verdict of every tool once.

    Returns:
        Count of tools per resulting verdict, plus an "error" count.
    """
    async with session_factory() as session:
        result = await session.execute(select(Tool.id).order_by(Tool.created_at))
        tool_ids = list(result.scalars().all())

    stats: Counter[str] = Counter()
    for tool_id in tool_ids:
        try:
            async with session_factory() as session:
                engine = VerdictEngine(
                    reviews=SqlReviewRepository(session),
                    verdicts=SqlVerdictRepository(session),
                )
                verdict = await engine.calculate_tool_verdict(tool_id)
            stats[verdict.verdict] += 1
        except Exception:
            log.error("verdict_refresh_tool_failed", tool_id=str(tool_id), exc_info=True)
            stats["error"] += 1

    status = "partial" if stats["error"] else "completed"
    verdict_refresh_runs.labels(status=status).inc()
    log.info("verdict_refresh_completed", status=status, tools=len(tool_ids), stats=dict(stats))
    return dict(stats)


async def verdict_worker_loop() -> None:
    """Background loop that refreshes verdicts on a configurable interval."""
    configure_logging(debug=settings.debug)
    interval = settings.verdict_refresh_interval_minutes * 60
    log.info(
        "verdict_worker_started",
        interval_minutes=settings.verdict_refresh_interval_minutes,
    )

    while True:
        try:
            await run_refresh_cycle()
        except Exception:
            log.error("verdict_worker_error", exc_info=True)
            verdict_refresh_runs.labels(status="error").inc()
        await asyncio.sleep(interval)


if __name__ == "__main__":
    asyncio.run(verdict_worker_loop())
