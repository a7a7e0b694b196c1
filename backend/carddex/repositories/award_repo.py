"""
Awarded badge repository.
"""
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.models import AwardedBadge
from carddex.repositories.base import BaseRepository


class AwardRepository(BaseRepository[AwardedBadge]):
    """Reads the award ledger. Inserts go through AwardLedger."""

    def __init__(self, db: AsyncSession):
        super().__init__(AwardedBadge, db)

    async def get_award(self, collector_id: int, badge_key: str) -> AwardedBadge | None:
        return await self.find_one_by(collector_id=collector_id, badge_key=badge_key)

    async def get_held_keys(self, collector_id: int) -> set[str]:
        """All badge keys (composite keys included) held by a collector."""
        result = await self._execute(
            select(AwardedBadge.badge_key).where(AwardedBadge.collector_id == collector_id)
        )
        return set(result.scalars().all())

    async def list_for_collector(self, collector_id: int) -> Sequence[AwardedBadge]:
        """Held badges, newest first."""
        result = await self._execute(
            select(AwardedBadge)
            .where(AwardedBadge.collector_id == collector_id)
            .order_by(AwardedBadge.earned_at.desc(), AwardedBadge.id.desc())
        )
        return result.scalars().all()
