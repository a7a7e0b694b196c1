"""
Progression engine.

Entry points used by the presentation layer:
- evaluate_and_award: measure one category and award newly crossed badges
- get_progress: read-only progress toward the next badge
- get_streak_calendar: read-only calendar grid and streak aggregates
- get_badge_catalog_entry: catalog lookup

plus grace-day status/consumption and the held-badge listing.

Evaluation runs inline after a collection change and is triggered by the
caller. Each award is its own savepoint, so a failure part-way through
leaves earlier awards intact and a retry only awards what is missing.
"""
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.core.config import Settings, settings as default_settings
from carddex.core.exceptions import CollectorNotFoundError
from carddex.models import AwardedBadge, GraceDayUsage
from carddex.repositories import (
    ActivityLogRepository,
    AwardRepository,
    CollectionRepository,
    GraceDayRepository,
)
from carddex.schemas.progression import (
    BadgeDefinitionResponse,
    EvaluationResult,
    GraceDayStatusResponse,
    ProgressResult,
    StreakCalendar,
)
from carddex.services.progression import catalog
from carddex.services.progression.catalog import BadgeCategory
from carddex.services.progression.evaluator import (
    ThresholdEvaluator,
    crossed_thresholds,
    local_day_start,
)
from carddex.services.progression.grace_days import GraceDayService
from carddex.services.progression.ledger import AwardLedger
from carddex.services.progression.projector import definition_response, project_progress
from carddex.services.progression.streaks import build_streak_calendar

logger = structlog.get_logger()


class ProgressionEngine:
    """Progression rules for one database session."""

    def __init__(self, db: AsyncSession, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or default_settings
        self.collection = CollectionRepository(db)
        self.activity = ActivityLogRepository(db)
        self.grace_history = GraceDayRepository(db)
        self.awards = AwardRepository(db)
        self.evaluator = ThresholdEvaluator(
            snapshot=self.collection,
            sets=self.collection,
            activity=self.activity,
            grace_days=self.grace_history,
            streak_lookback_days=self.settings.streak_lookback_days,
        )
        self.ledger = AwardLedger(db, self.activity, self.awards)
        self.grace_days = GraceDayService(
            db,
            self.activity,
            max_per_week=self.settings.grace_days_per_week,
            lookback_days=self.settings.streak_lookback_days,
        )

    def _resolve_day(self, today: Optional[date], tz: Optional[tzinfo]) -> tuple[date, tzinfo]:
        tz = tz or self.settings.activity_tz
        return today or datetime.now(tz).date(), tz

    async def _require_collector(self, collector_id: int) -> None:
        if not await self.collection.collector_exists(collector_id):
            raise CollectorNotFoundError(collector_id)

    async def evaluate_and_award(
        self,
        collector_id: int,
        category: BadgeCategory,
        scope_id: Optional[str] = None,
        today: Optional[date] = None,
        tz: Optional[tzinfo] = None,
    ) -> EvaluationResult:
        """
        Award every badge of a category whose threshold is met and not held.

        Args:
            collector_id: Collector to evaluate
            category: Badge category
            scope_id: Set id (completion), type tag (specialist) or target
                name (named target); None evaluates every scope
            today: Local date for streak evaluation, defaults to now in tz
            tz: Activity time zone, defaults to the configured one

        Returns:
            EvaluationResult with newly awarded keys in ascending threshold
            order; empty when nothing new was crossed

        Raises:
            CollectorNotFoundError: Unknown collector
            CollaboratorUnavailableError: A provider read failed
        """
        category = BadgeCategory(category)
        today, tz = self._resolve_day(today, tz)
        await self._require_collector(collector_id)

        logger.debug(
            "Evaluating badges",
            collector_id=collector_id,
            category=category.value,
            scope_id=scope_id,
        )
        measurement = await self.evaluator.measure(
            collector_id, category, scope_id, today=today, tz=tz
        )
        held = await self.ledger.held_keys(collector_id)
        crossings = crossed_thresholds(measurement.tracks, held)

        awarded = []
        for crossing in crossings:
            outcome = await self.ledger.award(collector_id, crossing.badge_key, crossing.context)
            if not outcome.already_held:
                awarded.append(crossing.badge_key)

        logger.info(
            "Badge evaluation complete",
            collector_id=collector_id,
            category=category.value,
            scope_id=scope_id,
            current_metric=measurement.current_metric,
            awarded=awarded,
        )
        return EvaluationResult(
            collector_id=collector_id,
            category=category.value,
            scope_id=scope_id,
            awarded_keys=awarded,
            current_metric=measurement.current_metric,
        )

    async def get_progress(
        self,
        collector_id: int,
        category: BadgeCategory,
        scope_id: Optional[str] = None,
        today: Optional[date] = None,
        tz: Optional[tzinfo] = None,
    ) -> ProgressResult:
        """Progress toward the next badge of a category. Never writes."""
        category = BadgeCategory(category)
        today, tz = self._resolve_day(today, tz)
        await self._require_collector(collector_id)

        measurement = await self.evaluator.measure(
            collector_id, category, scope_id, today=today, tz=tz
        )
        held = await self.ledger.held_keys(collector_id)
        return project_progress(measurement, held)

    async def get_streak_calendar(
        self,
        collector_id: int,
        window_days: Optional[int] = None,
        today: Optional[date] = None,
        tz: Optional[tzinfo] = None,
    ) -> StreakCalendar:
        """Calendar grid for the window ending today. Never writes."""
        if window_days is None:
            window_days = self.settings.streak_window_days
        today, tz = self._resolve_day(today, tz)
        await self._require_collector(collector_id)

        window_start = today - timedelta(days=window_days - 1)
        active = await self.activity.get_activity_dates(
            collector_id, local_day_start(window_start, tz), tz
        )
        graced = await self.grace_history.get_protected_dates(collector_id)
        return build_streak_calendar(active, graced, today, window_days)

    def get_badge_catalog_entry(self, key: str) -> Optional[BadgeDefinitionResponse]:
        """Catalog entry for a badge key; composite completion keys resolve too."""
        definition = catalog.definition_by_key(key)
        if definition is None:
            return None
        return definition_response(definition, key)

    async def list_awarded_badges(self, collector_id: int) -> Sequence[AwardedBadge]:
        await self._require_collector(collector_id)
        return await self.awards.list_for_collector(collector_id)

    async def get_grace_day_status(
        self,
        collector_id: int,
        today: Optional[date] = None,
        tz: Optional[tzinfo] = None,
    ) -> GraceDayStatusResponse:
        today, tz = self._resolve_day(today, tz)
        await self._require_collector(collector_id)
        return await self.grace_days.status(collector_id, today, tz)

    async def consume_grace_day(
        self,
        collector_id: int,
        protected_date: date,
        today: Optional[date] = None,
        tz: Optional[tzinfo] = None,
    ) -> GraceDayUsage:
        today, tz = self._resolve_day(today, tz)
        await self._require_collector(collector_id)
        return await self.grace_days.consume(collector_id, protected_date, today, tz)
