"""Append-only activity log per collector."""
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from carddex.db.base import Base


class ActivityKind(str, Enum):
    """Kinds of activity events. Only ITEM_ADDED feeds streaks."""

    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"
    BADGE_EARNED = "badge_earned"


class ActivityLog(Base):
    """A dated collector event."""

    __tablename__ = "activity_logs"

    collector_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collectors.id", ondelete="CASCADE"),
        nullable=False,
    )
    action: Mapped[ActivityKind] = mapped_column(String(30), nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    extra_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_activity_logs_collector_action_time", "collector_id", "action", "occurred_at"),
    )

    def __repr__(self) -> str:
        return f"<ActivityLog collector_id={self.collector_id} action={self.action}>"
