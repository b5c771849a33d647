"""Breaktool Pydantic schemas package.

Re-exports the request and response schemas for convenient importing:

    from breaktool.schemas import ToolVerdict, VerdictFactors, ...
"""

from breaktool.schemas.analytics import ReviewAnalytics, ReviewMetrics, TrendPoint
from breaktool.schemas.trust import TrustScoreFactors, TrustScoreResponse
from breaktool.schemas.verdict import (
    ReviewBreakdown,
    ReviewSnapshot,
    ToolVerdict,
    VerdictFactors,
    VerdictOverride,
    VerdictRequest,
)

__all__ = [
    # Verdict
    "ReviewSnapshot",
    "VerdictFactors",
    "ReviewBreakdown",
    "ToolVerdict",
    "VerdictRequest",
    "VerdictOverride",
    # Analytics
    "ReviewAnalytics",
    "ReviewMetrics",
    "TrendPoint",
    # Trust
    "TrustScoreFactors",
    "TrustScoreResponse",
]
