"""Award ledger record: a badge earned by a collector."""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from carddex.db.base import Base


class AwardedBadge(Base):
    """
    A badge held by a collector.

    The ledger is a set keyed by (collector_id, badge_key), not a log: the
    unique constraint is what keeps concurrent evaluations from awarding
    the same badge twice. context_data is written once at award time.
    """

    __tablename__ = "awarded_badges"

    collector_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collectors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Completion badges use composite keys, e.g. "sv1_set_explorer"
    badge_key: Mapped[str] = mapped_column(String(80), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    context_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "collector_id",
            "badge_key",
            name="uq_awarded_badge_collector_key",
        ),
    )

    def __repr__(self) -> str:
        return f"<AwardedBadge collector_id={self.collector_id} key={self.badge_key}>"
