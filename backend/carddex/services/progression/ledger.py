"""
Award ledger.

Idempotent write path: records a badge as earned for a collector exactly
once and appends one companion activity-log entry with it.

The check-then-insert runs inside a savepoint and the database enforces
UNIQUE (collector_id, badge_key). When two evaluations race, the loser's
insert violates the constraint, its savepoint (badge row and log entry
together) is rolled back, and it reports the winner's record as
already held.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.db.transaction import savepoint
from carddex.models import ActivityKind, AwardedBadge
from carddex.repositories.award_repo import AwardRepository
from carddex.schemas.progression import AwardContext
from carddex.services.progression.providers import ActivityLogProvider

logger = structlog.get_logger()


@dataclass
class AwardOutcome:
    """Result of an award attempt."""
    already_held: bool
    badge: AwardedBadge


class AwardLedger:
    """Set of awarded badges keyed by (collector_id, badge_key)."""

    def __init__(
        self,
        db: AsyncSession,
        activity_log: ActivityLogProvider,
        awards: Optional[AwardRepository] = None,
    ):
        self.db = db
        self.activity_log = activity_log
        self.awards = awards or AwardRepository(db)

    async def held_keys(self, collector_id: int) -> set[str]:
        return await self.awards.get_held_keys(collector_id)

    async def award(
        self,
        collector_id: int,
        badge_key: str,
        context: AwardContext,
        earned_at: Optional[datetime] = None,
    ) -> AwardOutcome:
        """
        Award a badge unless the collector already holds it.

        Args:
            collector_id: Collector receiving the badge
            badge_key: Badge key (composite for completion badges)
            context: Typed context stored once with the award
            earned_at: Award time, defaults to now

        Returns:
            AwardOutcome with the stored record; already_held is True when
            nothing was written
        """
        existing = await self.awards.get_award(collector_id, badge_key)
        if existing is not None:
            return AwardOutcome(already_held=True, badge=existing)

        context_data = context.model_dump(mode="json")
        try:
            async with savepoint(self.db, "award_badge"):
                badge = AwardedBadge(
                    collector_id=collector_id,
                    badge_key=badge_key,
                    category=context.category,
                    earned_at=earned_at or datetime.now(timezone.utc),
                    context_data=context_data,
                )
                self.db.add(badge)
                await self.db.flush()
                await self.activity_log.append(
                    collector_id,
                    ActivityKind.BADGE_EARNED,
                    {"badge_key": badge_key, **context_data},
                )
        except IntegrityError:
            existing = await self.awards.get_award(collector_id, badge_key)
            if existing is None:
                raise
            logger.info(
                "Badge awarded by a concurrent evaluation",
                collector_id=collector_id,
                badge_key=badge_key,
            )
            return AwardOutcome(already_held=True, badge=existing)

        logger.info(
            "Badge awarded",
            collector_id=collector_id,
            badge_key=badge_key,
            category=context.category,
        )
        return AwardOutcome(already_held=False, badge=badge)
