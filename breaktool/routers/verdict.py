"""Tool verdict endpoints.

POST  /api/v1/verdict                 -- recalculate a tool's verdict and persist it
GET   /api/v1/verdict?toolId=...      -- read the stored verdict (action=get only)
GET   /api/v1/verdict/all             -- every tool with a verdict, by confidence
PATCH /api/v1/tools/{tool_id}/verdict -- manual keep/try/stop override
"""

import uuid

from fastapi import APIRouter, HTTPException, Query

from breaktool.dependencies import VerdictEngineDep
from breaktool.middleware.rate_limiter import ReadRateLimit, WriteRateLimit
from breaktool.repositories import ToolNotFoundError
from breaktool.schemas.verdict import ToolVerdict, VerdictOverride, VerdictRequest
from breaktool.services.verdict import insufficient_data_verdict

router = APIRouter(prefix="/api/v1", tags=["verdict"])


async def _calculate(engine, tool_id: uuid.UUID) -> ToolVerdict:
    try:
        return await engine.calculate_tool_verdict(tool_id)
    except ToolNotFoundError:
        raise HTTPException(status_code=404, detail="Tool not found")


@router.post("/verdict", response_model=ToolVerdict)
async def calculate_verdict(
    body: VerdictRequest,
    engine: VerdictEngineDep,
    _rate: WriteRateLimit,
) -> ToolVerdict:
    """Run the full aggregation pipeline for a tool and persist the result.

    A tool with no active reviews returns (and stores) insufficient_data.
    """
    if body.action not in (None, "calculate"):
        raise HTTPException(status_code=400, detail="Invalid action")
    return await _calculate(engine, body.tool_id)


@router.get("/verdict", response_model=ToolVerdict)
async def get_verdict(
    engine: VerdictEngineDep,
    _rate: ReadRateLimit,
    tool_id: uuid.UUID = Query(alias="toolId"),
    action: str = Query(default="get"),
) -> ToolVerdict:
    """Return the last persisted verdict for a tool.

    When nothing has been stored for the tool, an insufficient_data verdict
    is returned instead of a 404.
    """
    if action != "get":
        raise HTTPException(status_code=400, detail="Invalid action")

    verdict = await engine.get_tool_verdict(tool_id)
    if verdict is None:
        return insufficient_data_verdict(tool_id)
    return verdict


@router.get("/verdict/all", response_model=list[ToolVerdict])
async def list_verdicts(
    engine: VerdictEngineDep,
    _rate: ReadRateLimit,
) -> list[ToolVerdict]:
    """All tools with a keep/try/stop verdict, highest confidence first."""
    return await engine.get_all_tool_verdicts()


@router.patch("/tools/{tool_id}/verdict", response_model=ToolVerdict)
async def override_verdict(
    tool_id: uuid.UUID,
    body: VerdictOverride,
    engine: VerdictEngineDep,
    _rate: WriteRateLimit,
) -> ToolVerdict:
    """Manually set a tool's verdict. Confidence and factors are left untouched."""
    try:
        return await engine.override_tool_verdict(tool_id, body.verdict)
    except ToolNotFoundError:
        raise HTTPException(status_code=404, detail="Tool not found")
