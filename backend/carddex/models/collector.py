"""Collector model: the profile whose collection and activity is evaluated."""
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from carddex.db.base import Base

if TYPE_CHECKING:
    from carddex.models.collection import CollectionCard


class Collector(Base):
    """A collector profile."""

    __tablename__ = "collectors"

    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    cards: Mapped[list["CollectionCard"]] = relationship(
        "CollectionCard",
        back_populates="collector",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Collector id={self.id} name={self.display_name}>"
