"""Tests for usage analytics endpoints."""
from datetime import UTC, datetime

from httpx import AsyncClient


async def _bookmark_with_uses(client: AsyncClient, url: str, uses: int) -> int:
    bookmark = (await client.post("/bookmarks/", json={"url": url, "title": "t"})).json()
    for _ in range(uses):
        response = await client.post(f"/bookmarks/{bookmark['id']}/usage")
        assert response.status_code == 201
    return bookmark["id"]


async def test_usage_stats(client: AsyncClient) -> None:
    """Test events recorded now count in every window."""
    await _bookmark_with_uses(client, "https://a.test", 2)

    response = await client.get("/analytics/stats")
    assert response.status_code == 200
    assert response.json() == {"total": 2, "today": 2, "this_week": 2, "this_month": 2}


async def test_most_used(client: AsyncClient) -> None:
    """Test most-used ranking and limit."""
    first = await _bookmark_with_uses(client, "https://a.test", 1)
    second = await _bookmark_with_uses(client, "https://b.test", 3)

    response = await client.get("/analytics/most-used", params={"limit": 5})
    assert response.status_code == 200
    assert response.json() == [
        {"bookmark_id": second, "count": 3},
        {"bookmark_id": first, "count": 1},
    ]


async def test_most_used_limit_bounds(client: AsyncClient) -> None:
    """Test the limit query parameter is validated."""
    assert (await client.get("/analytics/most-used", params={"limit": 0})).status_code == 422


async def test_usage_trends(client: AsyncClient) -> None:
    """Test daily trend ends with today."""
    await _bookmark_with_uses(client, "https://a.test", 1)

    response = await client.get("/analytics/trends", params={"days": 3})
    assert response.status_code == 200

    points = response.json()
    assert len(points) == 3
    assert points[-1] == {"date": datetime.now(UTC).date().isoformat(), "clicks": 1}


async def test_popular_times(client: AsyncClient) -> None:
    """Test hourly histogram covers the whole day."""
    await _bookmark_with_uses(client, "https://a.test", 1)

    response = await client.get("/analytics/popular-times")
    assert response.status_code == 200

    hours = response.json()
    assert [h["hour"] for h in hours] == list(range(24))
    assert sum(h["count"] for h in hours) == 1
