"""
Streak and grace-day calendar.

Pure functions over a set of activity dates plus the recorded grace-day
usages. "today" is always supplied by the caller so results are
deterministic.

Streak rules:
- A day is covered when it has activity or a recorded grace day.
- The current streak walks backward from today and stops at the first
  uncovered day. Today without activity is skipped rather than ending the
  walk, so yesterday's streak survives until the day is over.
- The oldest day of the window is not a break: activity before the window
  is unknown, so the walk simply ends there.

Grace days are tracked per ISO week (Monday start).
"""
from collections.abc import Iterable
from datetime import date, timedelta
from typing import Optional

from carddex.core.exceptions import (
    GraceDayConflictError,
    GraceDayUnavailableError,
    InvalidStateError,
)
from carddex.schemas.progression import (
    CalendarDay,
    CalendarWeek,
    GraceDayAvailability,
    StreakCalendar,
)

ONE_DAY = timedelta(days=1)


def date_range(today: date, window_days: int) -> list[date]:
    """Calendar days of the window, oldest first, ending at today."""
    if window_days < 1:
        raise ValueError("window_days must be at least 1")
    start = today - timedelta(days=window_days - 1)
    return [start + timedelta(days=i) for i in range(window_days)]


def iso_week(day: date) -> tuple[int, int]:
    """(ISO year, ISO week number) of a date."""
    iso = day.isocalendar()
    return iso[0], iso[1]


def is_weekend(day: date) -> bool:
    return day.isoweekday() >= 6


def current_streak_days(
    active: set[date],
    graced: set[date],
    today: date,
    window_start: date,
) -> list[date]:
    """
    Days forming the current streak, most recent first.

    Args:
        active: Dates with at least one item-added event
        graced: Dates protected by a recorded grace day
        today: Caller-supplied current date
        window_start: Oldest date the walk may look at
    """
    streak: list[date] = []
    day = today
    while day >= window_start:
        if day in active or day in graced:
            streak.append(day)
        elif day != today:
            break
        day -= ONE_DAY
    return streak


def longest_streak(dates: list[date], covered: set[date]) -> int:
    """Longest run of consecutive covered days within the window."""
    best = 0
    run = 0
    for day in dates:
        if day in covered:
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best


def longest_gap(dates: list[date], active: set[date]) -> int:
    """Longest run of consecutive days without activity within the window."""
    best = 0
    gap = 0
    for day in dates:
        if day in active:
            gap = 0
        else:
            gap += 1
            best = max(best, gap)
    return best


def build_streak_calendar(
    activity_dates: Iterable[date],
    grace_dates: Iterable[date],
    today: date,
    window_days: int = 30,
) -> StreakCalendar:
    """
    Build the calendar grid and streak aggregates for a window ending today.

    Only reports existing grace-day usages; it never decides to create one.

    Args:
        activity_dates: Local dates of item-added events (any range)
        grace_dates: Protected dates of recorded grace-day usages
        today: Caller-supplied current date
        window_days: Number of days in the window, today included

    Returns:
        StreakCalendar with per-day flags, ISO-week grouping and aggregates
    """
    dates = date_range(today, window_days)
    window = set(dates)
    active = {d for d in activity_dates if d in window}
    graced = {d for d in grace_dates if d in window}

    streak = current_streak_days(active, graced, today, dates[0])
    streak_set = set(streak)

    days = [
        CalendarDay(
            date=day,
            day_of_week=day.isoweekday(),
            has_activity=day in active,
            is_grace_day=day in graced,
            is_part_of_streak=day in streak_set,
            is_today=day == today,
            is_weekend=is_weekend(day),
        )
        for day in dates
    ]

    weeks: list[CalendarWeek] = []
    for day in days:
        year, week = iso_week(day.date)
        if not weeks or (weeks[-1].iso_year, weeks[-1].week_number) != (year, week):
            weeks.append(CalendarWeek(iso_year=year, week_number=week, days=[]))
        weeks[-1].days.append(day)

    return StreakCalendar(
        days=days,
        weeks=weeks,
        total_days=window_days,
        current_streak_days=len(streak),
        longest_streak_days=longest_streak(dates, active | graced),
        active_days=len(active),
        grace_days_used=len(graced),
        longest_gap=longest_gap(dates, active),
        streak_start_date=streak[-1] if streak else None,
    )


def grace_days_used_in_week(protected_dates: Iterable[date], day: date) -> int:
    """Grace days counted against the ISO week containing day."""
    week = iso_week(day)
    return sum(1 for d in protected_dates if iso_week(d) == week)


def grace_day_availability(
    protected_dates: Iterable[date],
    on_date: date,
    max_per_week: int,
) -> GraceDayAvailability:
    """Quota status for the ISO week containing on_date."""
    used = grace_days_used_in_week(protected_dates, on_date)
    remaining = max(0, max_per_week - used)
    # Next ISO week starts on Monday
    resets_on = on_date + timedelta(days=8 - on_date.isoweekday())
    return GraceDayAvailability(
        is_available=remaining > 0,
        used_this_week=used,
        max_per_week=max_per_week,
        remaining=remaining,
        resets_on=resets_on,
        days_until_reset=(resets_on - on_date).days,
    )


def quota_exhausted(protected_dates: Iterable[date], day: date, max_per_week: int) -> bool:
    return grace_days_used_in_week(protected_dates, day) >= max_per_week


def bridges_single_missed_day(protected_date: date, today: date, active: set[date]) -> bool:
    """
    True when protected_date is a lone missed day between two active days.

    The day after may also be today, whose activity is still pending. Grace
    days never cover each other, so a neighbouring grace day does not count.
    """
    before = protected_date - ONE_DAY
    after = protected_date + ONE_DAY
    return before in active and (after in active or after == today)


def validate_grace_day_request(
    protected_date: date,
    today: date,
    active: set[date],
    protected_dates: set[date],
    max_per_week: int,
) -> None:
    """
    Check that a grace day may be spent on protected_date.

    Raises:
        InvalidStateError: The day is today or later, already has activity,
            or is not a single missed day between two active days
        GraceDayConflictError: The day is already protected
        GraceDayUnavailableError: The quota of the day's ISO week is used up
    """
    if protected_date >= today:
        raise InvalidStateError("Grace days can only protect a day in the past")
    if protected_date in active:
        raise InvalidStateError(f"{protected_date} already has activity")
    if protected_date in protected_dates:
        raise GraceDayConflictError(f"{protected_date} is already protected by a grace day")
    if not bridges_single_missed_day(protected_date, today, active):
        raise InvalidStateError(
            f"{protected_date} is not a single missed day between active days; "
            "grace days only protect 1 missed day"
        )
    if quota_exhausted(protected_dates, protected_date, max_per_week):
        year, week = iso_week(protected_date)
        raise GraceDayUnavailableError(
            f"No grace days remaining for week {week} of {year} "
            f"({max_per_week}/{max_per_week} used)"
        )


def find_protectable_gap(
    active: set[date],
    protected_dates: set[date],
    today: date,
    max_per_week: int,
) -> Optional[date]:
    """
    The missed day a grace day could bridge right now, if any.

    Only yesterday qualifies, and only when the day before it was active:
    a grace day bridges a single missed day.
    """
    yesterday = today - ONE_DAY
    if yesterday in active or yesterday in protected_dates:
        return None
    if not bridges_single_missed_day(yesterday, today, active):
        return None
    if quota_exhausted(protected_dates, yesterday, max_per_week):
        return None
    return yesterday
