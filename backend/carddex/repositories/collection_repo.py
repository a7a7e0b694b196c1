"""
Collection repository: the SQL-backed collection snapshot and set reference
providers.
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.models import CachedCard, CachedSet, CollectionCard, Collector
from carddex.repositories.base import BaseRepository
from carddex.services.progression.providers import (
    CollectionSnapshotProvider,
    ItemDescriptor,
    OwnedItem,
    SetReference,
    SetReferenceProvider,
)


class CollectionRepository(
    BaseRepository[CollectionCard],
    CollectionSnapshotProvider,
    SetReferenceProvider,
):
    """Reads owned cards, cached card descriptors and cached sets."""

    def __init__(self, db: AsyncSession):
        super().__init__(CollectionCard, db)

    async def collector_exists(self, collector_id: int) -> bool:
        result = await self._execute(select(Collector.id).where(Collector.id == collector_id))
        return result.scalar_one_or_none() is not None

    async def get_owned_items(self, collector_id: int) -> list[OwnedItem]:
        rows = await self.find_by(collector_id=collector_id)
        return [
            OwnedItem(item_id=row.card_id, quantity=row.quantity, variant=row.variant)
            for row in rows
        ]

    async def get_item_descriptors(self, item_ids: set[str]) -> dict[str, ItemDescriptor]:
        if not item_ids:
            return {}
        result = await self._execute(
            select(CachedCard).where(CachedCard.card_id.in_(sorted(item_ids)))
        )
        return {
            card.card_id: ItemDescriptor(
                item_id=card.card_id,
                display_name=card.name,
                category_tags=tuple(card.types or ()),
            )
            for card in result.scalars().all()
        }

    async def get_set_reference(self, set_id: str) -> Optional[SetReference]:
        references = await self.get_set_references({set_id})
        return references.get(set_id)

    async def get_set_references(self, set_ids: set[str]) -> dict[str, SetReference]:
        """One query for all sets; unknown ids are absent from the result."""
        if not set_ids:
            return {}
        result = await self._execute(
            select(CachedSet).where(CachedSet.set_id.in_(sorted(set_ids)))
        )
        return {
            cached.set_id: SetReference(
                set_id=cached.set_id,
                display_name=cached.name,
                total_item_count=cached.total_cards,
            )
            for cached in result.scalars().all()
        }
