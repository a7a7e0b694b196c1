"""
Grace day usage repository.
"""
from datetime import date
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.models import GraceDayUsage
from carddex.repositories.base import BaseRepository
from carddex.services.progression.providers import GraceDayHistoryProvider


class GraceDayRepository(BaseRepository[GraceDayUsage], GraceDayHistoryProvider):
    """Grace day history. Records are never deleted."""

    def __init__(self, db: AsyncSession):
        super().__init__(GraceDayUsage, db)

    async def get_protected_dates(self, collector_id: int) -> set[date]:
        result = await self._execute(
            select(GraceDayUsage.protected_date).where(GraceDayUsage.collector_id == collector_id)
        )
        return set(result.scalars().all())

    async def list_for_collector(self, collector_id: int) -> Sequence[GraceDayUsage]:
        """Usage history, most recently protected first."""
        result = await self._execute(
            select(GraceDayUsage)
            .where(GraceDayUsage.collector_id == collector_id)
            .order_by(GraceDayUsage.protected_date.desc())
        )
        return result.scalars().all()
