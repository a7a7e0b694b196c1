"""
Test data helpers for collections, cached cards/sets and activity.
"""
from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from carddex.models import (
    ActivityKind,
    ActivityLog,
    CachedCard,
    CachedSet,
    CollectionCard,
)


# Fixed "today" so streak tests do not depend on the wall clock (a Sunday)
TODAY = date(2026, 10, 18)


async def add_cards(
    db: AsyncSession,
    collector_id: int,
    card_ids: Iterable[str],
    variant: str = "normal",
) -> None:
    """Add owned cards and commit."""
    for card_id in card_ids:
        db.add(CollectionCard(collector_id=collector_id, card_id=card_id, variant=variant))
    await db.commit()


async def cache_cards(
    db: AsyncSession,
    cards: Iterable[tuple[str, str, list[str]]],
) -> None:
    """Cache (card_id, name, types) descriptors and commit."""
    for card_id, name, types in cards:
        set_id = card_id.partition("-")[0]
        db.add(CachedCard(card_id=card_id, name=name, types=types, set_id=set_id))
    await db.commit()


async def cache_set(db: AsyncSession, set_id: str, total_cards: int, name: Optional[str] = None) -> None:
    db.add(CachedSet(set_id=set_id, name=name or set_id.upper(), total_cards=total_cards))
    await db.commit()


async def log_activity(db: AsyncSession, collector_id: int, days: Iterable[date]) -> None:
    """One item-added event at noon UTC on each day."""
    for day in days:
        db.add(
            ActivityLog(
                collector_id=collector_id,
                action=ActivityKind.ITEM_ADDED.value,
                occurred_at=datetime.combine(day, time(12, 0), tzinfo=timezone.utc),
            )
        )
    await db.commit()


def set_cards(set_id: str, start: int, stop: int) -> list[str]:
    """Card ids "<set_id>-<n>" for n in [start, stop)."""
    return [f"{set_id}-{n}" for n in range(start, stop)]
