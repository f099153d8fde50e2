"""Tests for bookmark usage analytics."""
from datetime import UTC, datetime, timedelta

from records.local_client import LocalRecordClient
from schemas.analytics import UsageEvent
from services.analytics_service import (
    AnalyticsService,
    most_used,
    popular_times,
    start_of_day,
    usage_stats,
    usage_trends,
)

NOW = datetime(2024, 6, 15, 14, 30, tzinfo=UTC)


def _event(event_id: int, bookmark_id: int, timestamp: datetime) -> UsageEvent:
    return UsageEvent(id=event_id, bookmark_id=bookmark_id, timestamp=timestamp)


def test__start_of_day__normalizes_to_utc() -> None:
    moment = datetime(2024, 6, 15, 1, 0, tzinfo=UTC)
    assert start_of_day(moment) == datetime(2024, 6, 15, tzinfo=UTC)
    assert start_of_day(datetime(2024, 6, 15, 23, 59)) == datetime(2024, 6, 15, tzinfo=UTC)


def test__usage_stats__windows() -> None:
    events = [
        _event(1, 1, NOW - timedelta(hours=1)),  # today
        _event(2, 1, datetime(2024, 6, 14, 23, 0, tzinfo=UTC)),  # yesterday
        _event(3, 2, datetime(2024, 6, 8, 0, 0, tzinfo=UTC)),  # start of today - 7 days
        _event(4, 2, datetime(2024, 6, 2, 0, 0, tzinfo=UTC)),  # this month only
        _event(5, 3, datetime(2024, 5, 31, 23, 59, tzinfo=UTC)),  # last month
    ]

    stats = usage_stats(events, NOW)

    assert (stats.total, stats.today, stats.this_week, stats.this_month) == (5, 1, 3, 4)


def test__most_used__ranked_with_id_tiebreak() -> None:
    events = [
        _event(1, 7, NOW),
        _event(2, 3, NOW),
        _event(3, 7, NOW),
        _event(4, 3, NOW),
        _event(5, 9, NOW),
    ]

    ranked = most_used(events, limit=2)

    assert [(item.bookmark_id, item.count) for item in ranked] == [(3, 2), (7, 2)]


def test__usage_trends__oldest_first_with_zero_days() -> None:
    events = [
        _event(1, 1, NOW),
        _event(2, 1, NOW - timedelta(hours=2)),
        _event(3, 1, NOW - timedelta(days=2)),
        _event(4, 1, NOW - timedelta(days=10)),
    ]

    trend = usage_trends(events, NOW, days=3)

    assert [(p.date, p.clicks) for p in trend] == [
        ("2024-06-13", 1),
        ("2024-06-14", 0),
        ("2024-06-15", 2),
    ]


def test__popular_times__all_hours_present() -> None:
    events = [
        _event(1, 1, NOW),
        _event(2, 1, NOW + timedelta(minutes=5)),
        _event(3, 1, NOW - timedelta(hours=4)),
    ]

    hours = popular_times(events)

    assert len(hours) == 24
    assert hours[14].count == 2
    assert hours[10].count == 1
    assert sum(h.count for h in hours) == 3


def test__usage_stats__no_events() -> None:
    stats = usage_stats([], NOW)
    assert (stats.total, stats.today, stats.this_week, stats.this_month) == (0, 0, 0, 0)


async def test__track_usage__records_event(analytics_service: AnalyticsService) -> None:
    before = datetime.now(UTC)

    event = await analytics_service.track_usage(4)

    assert event.bookmark_id == 4
    assert event.usage_type == "click"
    assert event.timestamp >= before
    assert [e.id for e in await analytics_service.get_all()] == [event.id]


async def test__get_most_used__from_store(analytics_service: AnalyticsService) -> None:
    for bookmark_id in [2, 5, 5]:
        await analytics_service.track_usage(bookmark_id, {"usage_type": "open"})

    ranked = await analytics_service.get_most_used()

    assert [(item.bookmark_id, item.count) for item in ranked] == [(5, 2), (2, 1)]
    stats = await analytics_service.get_usage_stats()
    assert stats.total == 3
    assert stats.today == 3


async def test__get_all__skips_malformed_events(
    analytics_service: AnalyticsService, record_client: LocalRecordClient,
) -> None:
    await record_client.create_record("analytics_c", [
        {"bookmark_id_c": 1, "timestamp_c": "2024-06-15T10:00:00+00:00"},
        {"bookmark_id_c": 1, "timestamp_c": "not a time"},
        {"timestamp_c": "2024-06-15T11:00:00+00:00"},
    ])

    events = await analytics_service.get_all()

    assert [e.id for e in events] == [1]
    trend = await analytics_service.get_usage_trends(days=1, now=NOW)
    assert [(p.date, p.clicks) for p in trend] == [("2024-06-15", 1)]
