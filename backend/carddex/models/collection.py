"""
Collection models.

- CollectionCard: an owned item (card id, quantity, variant) per collector
- CachedCard: cached descriptive attributes of a card (name, type tags)
- CachedSet: set reference used for completion percentages
"""
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carddex.db.base import Base

if TYPE_CHECKING:
    from carddex.models.collector import Collector


class CollectionCard(Base):
    """
    One owned (card, variant) pair.

    Uniqueness for badge purposes is by card_id alone; several variants of
    the same card are separate rows here but count once.
    """

    __tablename__ = "collection_cards"

    collector_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collectors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Set-scoped ids follow "<setId>-<number>", e.g. "sv1-25"
    card_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    variant: Mapped[str] = mapped_column(String(30), default="normal", nullable=False)

    collector: Mapped["Collector"] = relationship("Collector", back_populates="cards")

    __table_args__ = (
        UniqueConstraint(
            "collector_id",
            "card_id",
            "variant",
            name="uq_collection_card_variant",
        ),
        CheckConstraint("quantity >= 1", name="quantity"),
    )

    def __repr__(self) -> str:
        return (
            f"<CollectionCard collector_id={self.collector_id} card_id={self.card_id} "
            f"variant={self.variant} quantity={self.quantity}>"
        )


class CachedCard(Base):
    """Cached card descriptor: display name and category tags (Pokemon types)."""

    __tablename__ = "cached_cards"

    card_id: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    # One card may carry several types, e.g. ["Fire", "Dragon"]
    types: Mapped[Optional[list[str]]] = mapped_column(JSON, nullable=True)
    set_id: Mapped[Optional[str]] = mapped_column(String(30), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<CachedCard card_id={self.card_id} name={self.name}>"


class CachedSet(Base):
    """Set reference: display name and the number of cards in the set."""

    __tablename__ = "cached_sets"

    set_id: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    total_cards: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<CachedSet set_id={self.set_id} name={self.name} total={self.total_cards}>"
