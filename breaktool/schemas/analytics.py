"""Pydantic schemas for review analytics endpoints."""

import datetime
import uuid

from pydantic import Field

from breaktool.schemas.verdict import CamelModel


class TrendPoint(CamelModel):
    date: datetime.date
    helpfulness_score: float
    quality_score: float
    engagement_rate: float
    review_count: int


class TopReviewer(CamelModel):
    user_id: uuid.UUID
    user_name: str
    avatar_url: str
    review_count: int
    average_helpfulness: float
    average_quality: float
    trust_score: int


class ReviewTrend(CamelModel):
    period: str
    review_count: int
    average_helpfulness: float
    average_quality: float
    average_engagement: float


class ReviewMetrics(CamelModel):
    total_reviews: int
    average_helpfulness: float
    average_quality: float
    average_engagement: float
    top_reviewers: list[TopReviewer] = Field(default_factory=list)
    review_trends: list[ReviewTrend] = Field(default_factory=list)


class ReviewAnalytics(CamelModel):
    review_id: uuid.UUID
    helpfulness_score: float
    quality_score: float
    engagement_rate: float
    sentiment_score: float
    trend_data: list[TrendPoint]
    metrics: ReviewMetrics
