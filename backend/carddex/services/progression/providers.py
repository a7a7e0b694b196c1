"""
Collaborator interfaces consumed by the progression engine.

The engine reads collections, card descriptors, set references and
activity dates only through these classes. The SQLAlchemy-backed
implementations live in carddex.repositories.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Optional

from carddex.models.activity_log import ActivityKind


@dataclass(frozen=True)
class OwnedItem:
    """An owned (item, variant) pair. quantity >= 1."""
    item_id: str
    quantity: int = 1
    variant: str = "normal"

    @property
    def set_id(self) -> Optional[str]:
        """Set id recovered from "<setId>-<number>", None for unscoped ids."""
        set_id, sep, _ = self.item_id.partition("-")
        return set_id if sep and set_id else None


@dataclass(frozen=True)
class ItemDescriptor:
    """Cached descriptive attributes of an item."""
    item_id: str
    display_name: str
    category_tags: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SetReference:
    """A set and the number of items in it."""
    set_id: str
    display_name: str
    total_item_count: int

    @property
    def is_scoreable(self) -> bool:
        return self.total_item_count > 0


class CollectionSnapshotProvider(ABC):
    """Current holdings and item descriptors."""

    @abstractmethod
    async def collector_exists(self, collector_id: int) -> bool:
        """Whether the collector is known."""
        pass

    @abstractmethod
    async def get_owned_items(self, collector_id: int) -> list[OwnedItem]:
        """All owned items of a collector."""
        pass

    @abstractmethod
    async def get_item_descriptors(self, item_ids: set[str]) -> dict[str, ItemDescriptor]:
        """
        Descriptors for the given ids.

        Ids with no cached descriptor are simply absent from the result.
        """
        pass

    async def get_item_descriptor(self, item_id: str) -> Optional[ItemDescriptor]:
        descriptors = await self.get_item_descriptors({item_id})
        return descriptors.get(item_id)


class SetReferenceProvider(ABC):
    """Set references for completion percentages."""

    @abstractmethod
    async def get_set_reference(self, set_id: str) -> Optional[SetReference]:
        pass

    async def get_set_references(self, set_ids: set[str]) -> dict[str, SetReference]:
        references = {}
        for set_id in sorted(set_ids):
            reference = await self.get_set_reference(set_id)
            if reference is not None:
                references[set_id] = reference
        return references


class GraceDayHistoryProvider(ABC):
    """Recorded grace-day usages."""

    @abstractmethod
    async def get_protected_dates(self, collector_id: int) -> set[date]:
        """Dates protected by a grace day, over the whole history."""
        pass


class ActivityLogProvider(ABC):
    """Append-only dated events per collector."""

    @abstractmethod
    async def get_activity_dates(
        self,
        collector_id: int,
        since: datetime,
        tz: tzinfo,
    ) -> set[date]:
        """
        Local calendar dates (in tz) of item-added events at or after since.
        """
        pass

    @abstractmethod
    async def append(
        self,
        collector_id: int,
        kind: ActivityKind,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        pass
