"""
Tests for the progression API routes.
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient

from helpers import TODAY, add_cards, cache_set, log_activity, set_cards


@pytest.mark.asyncio
async def test_evaluate_milestones(client: AsyncClient, db_session, collector):
    await add_cards(db_session, collector.id, ["sv1-1"])

    response = await client.post(f"/api/collectors/{collector.id}/evaluate/milestone")
    assert response.status_code == 200
    data = response.json()
    assert data["awarded_keys"] == ["first_catch"]
    assert data["current_metric"] == 1
    assert data["category"] == "milestone"

    response = await client.post(f"/api/collectors/{collector.id}/evaluate/milestone")
    assert response.json()["awarded_keys"] == []


@pytest.mark.asyncio
async def test_evaluate_completion_for_set(client: AsyncClient, db_session, collector):
    await cache_set(db_session, "sv1", 8)
    await add_cards(db_session, collector.id, set_cards("sv1", 1, 3))

    response = await client.post(
        f"/api/collectors/{collector.id}/evaluate/completion",
        params={"scope_id": "sv1"},
    )
    assert response.status_code == 200
    assert response.json()["awarded_keys"] == ["sv1_set_explorer"]


@pytest.mark.asyncio
async def test_evaluate_unknown_collector_is_404(client: AsyncClient):
    response = await client.post("/api/collectors/9999/evaluate/milestone")
    assert response.status_code == 404
    assert response.json()["error_type"] == "CollectorNotFoundError"


@pytest.mark.asyncio
async def test_evaluate_unknown_category_is_422(client: AsyncClient, collector):
    response = await client.post(f"/api/collectors/{collector.id}/evaluate/rarity")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_progress(client: AsyncClient, db_session, collector):
    await add_cards(db_session, collector.id, set_cards("sv1", 1, 6))
    await client.post(f"/api/collectors/{collector.id}/evaluate/milestone")

    response = await client.get(f"/api/collectors/{collector.id}/progress/milestone")
    assert response.status_code == 200
    data = response.json()
    assert data["current_value"] == 5
    assert data["current_badge"]["key"] == "first_catch"
    assert data["next_badge"]["key"] == "starter_collector"
    assert data["distance_to_next"] == 5
    assert data["percentage"] == 50


@pytest.mark.asyncio
async def test_streak_calendar(client: AsyncClient, db_session, collector):
    await log_activity(db_session, collector.id, [TODAY - timedelta(days=n) for n in (1, 2)])

    response = await client.get(
        f"/api/collectors/{collector.id}/streak-calendar",
        params={"window_days": 7, "today": TODAY.isoformat()},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total_days"] == 7
    assert data["current_streak_days"] == 2
    assert data["days"][-1]["is_today"] is True
    assert data["days"][-1]["date"] == TODAY.isoformat()


@pytest.mark.asyncio
async def test_streak_calendar_rejects_empty_window(client: AsyncClient, collector):
    response = await client.get(
        f"/api/collectors/{collector.id}/streak-calendar",
        params={"window_days": 0},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_grace_day_flow(client: AsyncClient, db_session, collector):
    await log_activity(db_session, collector.id, [TODAY - timedelta(days=n) for n in (2, 3, 5)])
    yesterday = (TODAY - timedelta(days=1)).isoformat()

    response = await client.get(
        f"/api/collectors/{collector.id}/grace-days",
        params={"today": TODAY.isoformat()},
    )
    assert response.status_code == 200
    assert response.json()["protectable_date"] == yesterday

    response = await client.post(
        f"/api/collectors/{collector.id}/grace-days",
        json={"protected_date": yesterday, "today": TODAY.isoformat()},
    )
    assert response.status_code == 201
    assert response.json()["protected_date"] == yesterday
    assert response.json()["week_number"] == 42

    # Same day again
    response = await client.post(
        f"/api/collectors/{collector.id}/grace-days",
        json={"protected_date": yesterday, "today": TODAY.isoformat()},
    )
    assert response.status_code == 409

    # Quota for the week is used up
    response = await client.post(
        f"/api/collectors/{collector.id}/grace-days",
        json={"protected_date": (TODAY - timedelta(days=4)).isoformat(), "today": TODAY.isoformat()},
    )
    assert response.status_code == 422
    assert response.json()["error_type"] == "GraceDayUnavailableError"


@pytest.mark.asyncio
async def test_grace_day_for_today_is_422(client: AsyncClient, collector):
    response = await client.post(
        f"/api/collectors/{collector.id}/grace-days",
        json={"protected_date": TODAY.isoformat(), "today": TODAY.isoformat()},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_grace_day_without_active_neighbours_is_422(client: AsyncClient, collector):
    response = await client.post(
        f"/api/collectors/{collector.id}/grace-days",
        json={"protected_date": "2026-09-10", "today": TODAY.isoformat()},
    )
    assert response.status_code == 422
    assert response.json()["error_type"] == "InvalidStateError"


@pytest.mark.asyncio
async def test_held_badges(client: AsyncClient, db_session, collector):
    await add_cards(db_session, collector.id, set_cards("sv1", 1, 11))
    await client.post(f"/api/collectors/{collector.id}/evaluate/milestone")

    response = await client.get(f"/api/collectors/{collector.id}/badges")
    assert response.status_code == 200
    data = response.json()
    assert {b["badge_key"] for b in data} == {"first_catch", "starter_collector"}
    assert all(b["context_data"]["category"] == "milestone" for b in data)


@pytest.mark.asyncio
async def test_catalog_entry(client: AsyncClient):
    response = await client.get("/api/badges/sv1_set_master")
    assert response.status_code == 200
    data = response.json()
    assert data["key"] == "sv1_set_master"
    assert data["threshold"] == 75

    response = await client.get("/api/badges/no_such_badge")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_catalog_listing(client: AsyncClient):
    response = await client.get("/api/badges", params={"category": "streak"})
    assert response.status_code == 200
    assert [b["key"] for b in response.json()] == ["streak_3", "streak_7", "streak_14", "streak_30"]

    response = await client.get("/api/badges")
    assert len(response.json()) == 31
