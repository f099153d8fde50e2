"""Pydantic schemas for bookmark usage analytics."""
from datetime import datetime

from pydantic import BaseModel, Field


class UsageEvent(BaseModel):
    """A single recorded use of a bookmark (e.g. a click)."""

    id: int
    bookmark_id: int
    timestamp: datetime
    usage_type: str = "click"


class UsageEventCreate(BaseModel):
    """Schema for recording a bookmark use."""

    usage_type: str = Field(default="click", min_length=1, max_length=50)


class UsageStats(BaseModel):
    """Usage totals over fixed windows."""

    total: int
    today: int
    this_week: int
    this_month: int


class MostUsedItem(BaseModel):
    """Use count for one bookmark."""

    bookmark_id: int
    count: int


class UsageTrendPoint(BaseModel):
    """Use count for one calendar day."""

    date: str  # YYYY-MM-DD
    clicks: int


class HourlyUsage(BaseModel):
    """Use count for one hour of the day."""

    hour: int
    count: int
