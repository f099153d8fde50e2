"""Bookmark usage analytics endpoints."""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_analytics_service
from schemas.analytics import HourlyUsage, MostUsedItem, UsageStats, UsageTrendPoint
from services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/stats", response_model=UsageStats)
async def usage_stats(
    service: AnalyticsService = Depends(get_analytics_service),
) -> UsageStats:
    """Usage totals for today, the last week and the current month."""
    return await service.get_usage_stats()


@router.get("/most-used", response_model=list[MostUsedItem])
async def most_used(
    limit: int = Query(default=10, ge=1, le=100),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[MostUsedItem]:
    """Most used bookmarks, highest count first."""
    return await service.get_most_used(limit)


@router.get("/trends", response_model=list[UsageTrendPoint])
async def usage_trends(
    days: int = Query(default=7, ge=1, le=90),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[UsageTrendPoint]:
    """Daily usage counts, oldest day first."""
    return await service.get_usage_trends(days)


@router.get("/popular-times", response_model=list[HourlyUsage])
async def popular_times(
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[HourlyUsage]:
    """Usage counts per hour of the day (UTC)."""
    return await service.get_popular_times()
