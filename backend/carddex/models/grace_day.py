"""Grace day usage history."""
from datetime import date

from sqlalchemy import Date, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from carddex.db.base import Base


class GraceDayUsage(Base):
    """
    A grace day consumed to bridge a missed day.

    Never deleted. week_number/iso_year are the ISO week of the protected
    date, which is the week whose quota the usage counts against.
    """

    __tablename__ = "grace_day_usages"

    collector_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("collectors.id", ondelete="CASCADE"),
        nullable=False,
    )
    used_on: Mapped[date] = mapped_column(Date, nullable=False)
    protected_date: Mapped[date] = mapped_column(Date, nullable=False)
    iso_year: Mapped[int] = mapped_column(Integer, nullable=False)
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    streak_length_at_use: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "collector_id",
            "protected_date",
            name="uq_grace_day_collector_date",
        ),
        Index("ix_grace_day_usages_collector_week", "collector_id", "iso_year", "week_number"),
    )

    def __repr__(self) -> str:
        return (
            f"<GraceDayUsage collector_id={self.collector_id} "
            f"protected_date={self.protected_date}>"
        )
