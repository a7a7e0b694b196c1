"""
Activity log repository: the SQL-backed activity log provider.
"""
from datetime import date, datetime, timezone, tzinfo
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.models import ActivityKind, ActivityLog
from carddex.repositories.base import BaseRepository
from carddex.services.progression.providers import ActivityLogProvider


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ActivityLogRepository(BaseRepository[ActivityLog], ActivityLogProvider):
    """Append-only activity log."""

    def __init__(self, db: AsyncSession):
        super().__init__(ActivityLog, db)

    async def get_activity_dates(
        self,
        collector_id: int,
        since: datetime,
        tz: tzinfo,
    ) -> set[date]:
        query = (
            select(ActivityLog.occurred_at)
            .where(ActivityLog.collector_id == collector_id)
            .where(ActivityLog.action == ActivityKind.ITEM_ADDED.value)
            .where(ActivityLog.occurred_at >= since)
        )
        result = await self._execute(query)
        return {_as_aware(ts).astimezone(tz).date() for ts in result.scalars().all()}

    async def append(
        self,
        collector_id: int,
        kind: ActivityKind,
        metadata: Optional[dict[str, Any]] = None,
        occurred_at: Optional[datetime] = None,
    ) -> None:
        entry = ActivityLog(
            collector_id=collector_id,
            action=ActivityKind(kind).value,
            occurred_at=occurred_at or datetime.now(timezone.utc),
            extra_data=metadata,
        )
        self.db.add(entry)
        await self.db.flush()
