"""
Bookmark usage analytics.

Each use of a bookmark (e.g. a click through) is stored as one event in the
analytics table. The statistics are derived on read from the fetched events;
nothing is aggregated at write time. All day and hour boundaries are UTC.
"""
import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from records.base import ANALYTICS_TABLE, OrderBy
from schemas.analytics import (
    HourlyUsage,
    MostUsedItem,
    UsageEvent,
    UsageEventCreate,
    UsageStats,
    UsageTrendPoint,
)
from services.base_entity_service import BaseEntityService
from services.normalizer import normalize_usage_event, to_usage_event_record
from services.utils import coerce_payload

logger = logging.getLogger(__name__)


def start_of_day(moment: datetime) -> datetime:
    """Midnight UTC of the day containing ``moment``."""
    moment = moment.astimezone(UTC) if moment.tzinfo else moment.replace(tzinfo=UTC)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def usage_stats(events: Iterable[UsageEvent], now: datetime) -> UsageStats:
    """
    Count events in fixed windows.

    ``this_week`` covers the seven days before the start of today plus today;
    ``this_month`` starts on the first of the current month.
    """
    today = start_of_day(now)
    week_start = today - timedelta(days=7)
    month_start = today.replace(day=1)
    events = list(events)
    return UsageStats(
        total=len(events),
        today=sum(1 for e in events if e.timestamp >= today),
        this_week=sum(1 for e in events if e.timestamp >= week_start),
        this_month=sum(1 for e in events if e.timestamp >= month_start),
    )


def most_used(events: Iterable[UsageEvent], limit: int = 10) -> list[MostUsedItem]:
    """Bookmarks ranked by event count; ties are ordered by bookmark id."""
    counts = Counter(e.bookmark_id for e in events)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        MostUsedItem(bookmark_id=bookmark_id, count=count)
        for bookmark_id, count in ranked[:limit]
    ]


def usage_trends(
    events: Iterable[UsageEvent], now: datetime, days: int = 7,
) -> list[UsageTrendPoint]:
    """Per-day event counts for the last ``days`` days including today, oldest first."""
    today = start_of_day(now)
    per_day = Counter(start_of_day(e.timestamp) for e in events)
    points = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        points.append(UsageTrendPoint(date=day.date().isoformat(), clicks=per_day.get(day, 0)))
    return points


def popular_times(events: Iterable[UsageEvent]) -> list[HourlyUsage]:
    """Event counts for each of the 24 hours of the day."""
    per_hour = Counter(e.timestamp.astimezone(UTC).hour for e in events)
    return [HourlyUsage(hour=hour, count=per_hour.get(hour, 0)) for hour in range(24)]


class AnalyticsService(BaseEntityService[UsageEvent]):
    """Records bookmark usage events and derives statistics from them."""

    table = ANALYTICS_TABLE
    entity_name = "Usage event"
    fields = ["bookmark_id_c", "timestamp_c", "usage_type_c"]

    def _normalize(self, record: Mapping[str, Any]) -> UsageEvent:
        return normalize_usage_event(record)

    def _to_record(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return to_usage_event_record(values)

    async def get_all(self) -> list[UsageEvent]:
        """Stored usage events, newest first."""
        return await self._fetch(
            self._params(order_by=[OrderBy(field_name="timestamp_c", sort_type="DESC")]),
        )

    async def track_usage(
        self,
        bookmark_id: int,
        data: UsageEventCreate | Mapping[str, Any] | None = None,
    ) -> UsageEvent:
        """
        Record one use of a bookmark at the current time.

        Raises:
            ValidationError: If the usage type is invalid.
            RemoteFailureError: If the store rejected the write.
        """
        payload = coerce_payload(UsageEventCreate, data or {}, self.settings)
        event = await self._create({
            "bookmark_id": bookmark_id,
            "timestamp": datetime.now(UTC),
            "usage_type": payload.usage_type,
        })
        logger.debug("Tracked %s on bookmark %s", event.usage_type, bookmark_id)
        return event

    async def get_usage_stats(self, now: datetime | None = None) -> UsageStats:
        return usage_stats(await self.get_all(), now or datetime.now(UTC))

    async def get_most_used(self, limit: int = 10) -> list[MostUsedItem]:
        return most_used(await self.get_all(), limit)

    async def get_usage_trends(
        self, days: int = 7, now: datetime | None = None,
    ) -> list[UsageTrendPoint]:
        return usage_trends(await self.get_all(), now or datetime.now(UTC), days)

    async def get_popular_times(self) -> list[HourlyUsage]:
        return popular_times(await self.get_all())
