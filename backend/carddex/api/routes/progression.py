"""
Progression API routes.

Endpoints:
- POST /collectors/{collector_id}/evaluate/{category} - Evaluate and award badges
- GET /collectors/{collector_id}/progress/{category} - Progress toward the next badge
- GET /collectors/{collector_id}/streak-calendar - Streak calendar grid
- GET /collectors/{collector_id}/grace-days - Grace day quota and history
- POST /collectors/{collector_id}/grace-days - Spend a grace day on a missed day
- GET /collectors/{collector_id}/badges - Badges held by a collector
- GET /badges - Badge catalog
- GET /badges/{key} - Catalog entry for a badge key
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from carddex.api.deps import get_engine
from carddex.schemas.progression import (
    AwardedBadgeResponse,
    BadgeDefinitionResponse,
    ConsumeGraceDayRequest,
    EvaluationResult,
    GraceDayStatusResponse,
    GraceDayUsageResponse,
    ProgressResult,
    StreakCalendar,
)
from carddex.services.progression import catalog
from carddex.services.progression.catalog import BadgeCategory
from carddex.services.progression.engine import ProgressionEngine
from carddex.services.progression.projector import definition_response

router = APIRouter()


@router.post(
    "/collectors/{collector_id}/evaluate/{category}",
    response_model=EvaluationResult,
)
async def evaluate_badges(
    collector_id: int,
    category: BadgeCategory,
    scope_id: Optional[str] = Query(None, description="Set id, type tag or target name"),
    today: Optional[date] = Query(None, description="Local date used for streaks"),
    engine: ProgressionEngine = Depends(get_engine),
):
    """
    Evaluate one badge category and award every newly crossed badge.

    Call after each collection change. Re-running with no change returns
    an empty awarded_keys list.
    """
    return await engine.evaluate_and_award(collector_id, category, scope_id, today=today)


@router.get(
    "/collectors/{collector_id}/progress/{category}",
    response_model=ProgressResult,
)
async def get_progress(
    collector_id: int,
    category: BadgeCategory,
    scope_id: Optional[str] = Query(None),
    today: Optional[date] = Query(None),
    engine: ProgressionEngine = Depends(get_engine),
):
    """Progress toward the next badge in a category."""
    return await engine.get_progress(collector_id, category, scope_id, today=today)


@router.get(
    "/collectors/{collector_id}/streak-calendar",
    response_model=StreakCalendar,
)
async def get_streak_calendar(
    collector_id: int,
    window_days: Optional[int] = Query(None, ge=1, le=366),
    today: Optional[date] = Query(None),
    engine: ProgressionEngine = Depends(get_engine),
):
    """Calendar grid ending today with streak aggregates."""
    return await engine.get_streak_calendar(collector_id, window_days, today=today)


@router.get(
    "/collectors/{collector_id}/grace-days",
    response_model=GraceDayStatusResponse,
)
async def get_grace_days(
    collector_id: int,
    today: Optional[date] = Query(None),
    engine: ProgressionEngine = Depends(get_engine),
):
    """Weekly grace-day quota, the day that could be protected now, and history."""
    return await engine.get_grace_day_status(collector_id, today=today)


@router.post(
    "/collectors/{collector_id}/grace-days",
    response_model=GraceDayUsageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def consume_grace_day(
    collector_id: int,
    request: ConsumeGraceDayRequest,
    engine: ProgressionEngine = Depends(get_engine),
):
    """Spend a grace day to protect a missed day in the past."""
    usage = await engine.consume_grace_day(
        collector_id,
        request.protected_date,
        today=request.today,
    )
    return GraceDayUsageResponse.model_validate(usage)


@router.get(
    "/collectors/{collector_id}/badges",
    response_model=list[AwardedBadgeResponse],
)
async def list_badges(
    collector_id: int,
    engine: ProgressionEngine = Depends(get_engine),
):
    """Badges held by a collector, newest first."""
    badges = await engine.list_awarded_badges(collector_id)
    return [AwardedBadgeResponse.model_validate(b) for b in badges]


@router.get("/badges", response_model=list[BadgeDefinitionResponse])
async def list_catalog(category: Optional[BadgeCategory] = Query(None)):
    """Badge catalog, optionally filtered by category, ordered by threshold."""
    categories = [category] if category else list(BadgeCategory)
    return [
        definition_response(definition)
        for c in categories
        for definition in catalog.definitions_by_category(c)
    ]


@router.get("/badges/{key}", response_model=BadgeDefinitionResponse)
async def get_badge(
    key: str,
    engine: ProgressionEngine = Depends(get_engine),
):
    """Catalog entry for a badge key. Composite completion keys are accepted."""
    entry = engine.get_badge_catalog_entry(key)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Badge {key} not found")
    return entry
