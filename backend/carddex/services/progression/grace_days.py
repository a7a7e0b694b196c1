"""
Grace day service.

Reads quota status and consumes grace days. The streak calendar only
reports usages; this is the one place that creates them.
"""
from datetime import date, timedelta, tzinfo

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.core.exceptions import GraceDayConflictError
from carddex.db.transaction import savepoint
from carddex.models import GraceDayUsage
from carddex.repositories.grace_day_repo import GraceDayRepository
from carddex.schemas.progression import (
    GraceDayStatusResponse,
    GraceDayUsageResponse,
)
from carddex.services.progression.evaluator import local_day_start
from carddex.services.progression.providers import ActivityLogProvider
from carddex.services.progression.streaks import (
    current_streak_days,
    find_protectable_gap,
    grace_day_availability,
    iso_week,
    validate_grace_day_request,
)

logger = structlog.get_logger()


class GraceDayService:
    """Weekly grace-day quota per collector."""

    def __init__(
        self,
        db: AsyncSession,
        activity: ActivityLogProvider,
        max_per_week: int = 1,
        lookback_days: int = 365,
    ):
        self.db = db
        self.activity = activity
        self.history = GraceDayRepository(db)
        self.max_per_week = max_per_week
        self.lookback_days = lookback_days

    async def _active_dates(self, collector_id: int, today: date, tz: tzinfo) -> tuple[set[date], date]:
        window_start = today - timedelta(days=self.lookback_days - 1)
        active = await self.activity.get_activity_dates(
            collector_id, local_day_start(window_start, tz), tz
        )
        return active, window_start

    async def status(self, collector_id: int, today: date, tz: tzinfo) -> GraceDayStatusResponse:
        protected = await self.history.get_protected_dates(collector_id)
        active, _ = await self._active_dates(collector_id, today, tz)
        usages = await self.history.list_for_collector(collector_id)
        return GraceDayStatusResponse(
            availability=grace_day_availability(protected, today, self.max_per_week),
            protectable_date=find_protectable_gap(active, protected, today, self.max_per_week),
            history=[GraceDayUsageResponse.model_validate(u) for u in usages],
        )

    async def consume(
        self,
        collector_id: int,
        protected_date: date,
        today: date,
        tz: tzinfo,
    ) -> GraceDayUsage:
        """
        Spend a grace day on a missed day.

        Raises:
            InvalidStateError: protected_date is not in the past or has activity
            GraceDayConflictError: protected_date is already protected
            GraceDayUnavailableError: the weekly quota is used up
        """
        protected = await self.history.get_protected_dates(collector_id)
        active, window_start = await self._active_dates(collector_id, today, tz)
        validate_grace_day_request(protected_date, today, active, protected, self.max_per_week)

        streak = current_streak_days(active, protected | {protected_date}, today, window_start)
        year, week = iso_week(protected_date)
        try:
            async with savepoint(self.db, "consume_grace_day"):
                usage = await self.history.create(
                    collector_id=collector_id,
                    used_on=today,
                    protected_date=protected_date,
                    iso_year=year,
                    week_number=week,
                    streak_length_at_use=len(streak),
                )
        except IntegrityError as e:
            raise GraceDayConflictError(
                f"{protected_date} is already protected by a grace day"
            ) from e

        logger.info(
            "Grace day consumed",
            collector_id=collector_id,
            protected_date=protected_date.isoformat(),
            week_number=week,
            streak_length=len(streak),
        )
        return usage
