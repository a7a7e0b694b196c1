"""
Tests for the streak and grace-day calendar.

Tests cover:
- Current streak walk (grace coverage, today without activity, window boundary)
- Calendar flags and aggregates
- ISO-week grace-day quota and the protectable gap
- Grace day request validation
"""
from datetime import date, timedelta

import pytest

from carddex.core.exceptions import (
    GraceDayConflictError,
    GraceDayUnavailableError,
    InvalidStateError,
)
from carddex.services.progression.streaks import (
    build_streak_calendar,
    current_streak_days,
    date_range,
    find_protectable_gap,
    grace_day_availability,
    grace_days_used_in_week,
    iso_week,
    longest_gap,
    longest_streak,
    validate_grace_day_request,
)

# Sunday, ISO week 42 of 2026
D = date(2026, 10, 18)


def days_ago(*offsets: int) -> set[date]:
    return {D - timedelta(days=n) for n in offsets}


class TestDateRange:
    def test_window_ends_today_oldest_first(self):
        dates = date_range(D, 3)
        assert dates == [D - timedelta(days=2), D - timedelta(days=1), D]

    def test_single_day_window(self):
        assert date_range(D, 1) == [D]

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError):
            date_range(D, 0)


class TestCurrentStreak:
    """Backward walk from today."""

    def test_grace_day_bridges_gap(self):
        """Activity D-2, D-1; grace on D-3; nothing D-5..D-4 -> 3 days."""
        streak = current_streak_days(days_ago(1, 2), days_ago(3), D, D - timedelta(days=29))
        assert streak == [D - timedelta(days=1), D - timedelta(days=2), D - timedelta(days=3)]

    def test_today_without_activity_keeps_yesterday_streak(self):
        streak = current_streak_days(days_ago(1, 2), set(), D, D - timedelta(days=29))
        assert len(streak) == 2

    def test_today_with_activity_counts(self):
        streak = current_streak_days(days_ago(0, 1), set(), D, D - timedelta(days=29))
        assert streak[0] == D
        assert len(streak) == 2

    def test_missed_yesterday_breaks_streak(self):
        streak = current_streak_days(days_ago(2, 3, 4), set(), D, D - timedelta(days=29))
        assert streak == []

    def test_window_boundary_is_not_a_break(self):
        """Every day of a 3-day window active: the walk ends at the window, not a gap."""
        streak = current_streak_days(days_ago(0, 1, 2), set(), D, D - timedelta(days=2))
        assert len(streak) == 3

    def test_only_today_without_activity(self):
        assert current_streak_days(set(), set(), D, D) == []


class TestAggregates:
    def test_longest_streak_uses_grace_days(self):
        dates = date_range(D, 10)
        covered = days_ago(9, 8, 7, 5, 4, 3, 2)
        assert longest_streak(dates, covered) == 4

    def test_longest_gap(self):
        dates = date_range(D, 7)
        assert longest_gap(dates, days_ago(6, 2)) == 3

    def test_longest_gap_with_no_activity_is_whole_window(self):
        dates = date_range(D, 7)
        assert longest_gap(dates, set()) == 7


class TestBuildStreakCalendar:
    """Calendar grid and per-day flags."""

    def test_grace_covered_scenario(self):
        """Activity {D-2, D-1}, none D-5..D-3, grace on D-3."""
        calendar = build_streak_calendar(days_ago(1, 2), days_ago(3), D, window_days=30)
        by_date = {day.date: day for day in calendar.days}

        assert calendar.current_streak_days == 3
        assert calendar.active_days == 2
        assert calendar.grace_days_used == 1
        assert calendar.streak_start_date == D - timedelta(days=3)
        assert by_date[D - timedelta(days=3)].is_grace_day
        assert by_date[D - timedelta(days=3)].is_part_of_streak
        for n in range(4, 30):
            assert not by_date[D - timedelta(days=n)].is_part_of_streak

    def test_never_marks_uncovered_days(self):
        """A day with no activity and no grace day is never part of a streak."""
        active = days_ago(0, 1, 3, 4, 6)
        calendar = build_streak_calendar(active, set(), D, window_days=10)
        for day in calendar.days:
            if not day.has_activity and not day.is_grace_day:
                assert not day.is_part_of_streak

    def test_today_flag_and_window_size(self):
        calendar = build_streak_calendar(set(), set(), D, window_days=14)
        assert calendar.total_days == 14
        assert len(calendar.days) == 14
        assert calendar.days[-1].date == D
        assert calendar.days[-1].is_today
        assert sum(1 for d in calendar.days if d.is_today) == 1

    def test_events_outside_window_are_ignored(self):
        calendar = build_streak_calendar(days_ago(40), days_ago(45), D, window_days=30)
        assert calendar.active_days == 0
        assert calendar.grace_days_used == 0
        assert calendar.current_streak_days == 0
        assert calendar.streak_start_date is None

    def test_weekend_and_weekday_flags(self):
        calendar = build_streak_calendar(set(), set(), D, window_days=7)
        # Window runs Monday 12th through Sunday 18th
        assert [d.day_of_week for d in calendar.days] == [1, 2, 3, 4, 5, 6, 7]
        assert [d.is_weekend for d in calendar.days] == [False] * 5 + [True, True]

    def test_days_grouped_by_iso_week(self):
        calendar = build_streak_calendar(set(), set(), D, window_days=10)
        assert [(w.iso_year, w.week_number, len(w.days)) for w in calendar.weeks] == [
            (2026, 41, 3),
            (2026, 42, 7),
        ]

    def test_longest_streak_in_window(self):
        active = days_ago(0, 1, 5, 6, 7, 8)
        calendar = build_streak_calendar(active, set(), D, window_days=10)
        assert calendar.current_streak_days == 2
        assert calendar.longest_streak_days == 4


class TestGraceDayQuota:
    """Weekly quota on ISO weeks (Monday start)."""

    def test_iso_week(self):
        assert iso_week(D) == (2026, 42)
        assert iso_week(date(2026, 10, 19)) == (2026, 43)

    def test_usage_counts_against_protected_day_week(self):
        used = {date(2026, 10, 13)}
        assert grace_days_used_in_week(used, D) == 1
        assert grace_days_used_in_week(used, date(2026, 10, 19)) == 0

    def test_availability_resets_next_monday(self):
        availability = grace_day_availability({date(2026, 10, 14)}, D, max_per_week=1)
        assert availability.is_available is False
        assert availability.used_this_week == 1
        assert availability.remaining == 0
        assert availability.resets_on == date(2026, 10, 19)
        assert availability.days_until_reset == 1

    def test_availability_on_monday(self):
        monday = date(2026, 10, 12)
        availability = grace_day_availability(set(), monday, max_per_week=2)
        assert availability.is_available is True
        assert availability.remaining == 2
        assert availability.resets_on == date(2026, 10, 19)
        assert availability.days_until_reset == 7

    def test_zero_quota_is_never_available(self):
        availability = grace_day_availability(set(), D, max_per_week=0)
        assert availability.is_available is False
        assert availability.remaining == 0


class TestFindProtectableGap:
    def test_yesterday_missed_after_active_day(self):
        assert find_protectable_gap(days_ago(2, 3), set(), D, 1) == D - timedelta(days=1)

    def test_day_before_grace_covered_is_not_enough(self):
        # Two grace days in a row would bridge a two-day gap
        assert find_protectable_gap(days_ago(3), days_ago(2), D, 2) is None

    def test_nothing_to_protect_when_yesterday_active(self):
        assert find_protectable_gap(days_ago(1, 2), set(), D, 1) is None

    def test_two_missed_days_cannot_be_bridged(self):
        assert find_protectable_gap(days_ago(3, 4), set(), D, 1) is None

    def test_quota_used_up(self):
        used = {date(2026, 10, 12)}
        active = days_ago(2) | {date(2026, 10, 11)}
        assert find_protectable_gap(active, used, D, 1) is None


class TestValidateGraceDayRequest:
    def test_accepts_missed_past_day(self):
        validate_grace_day_request(D - timedelta(days=1), D, days_ago(2), set(), 1)

    def test_rejects_today(self):
        with pytest.raises(InvalidStateError):
            validate_grace_day_request(D, D, set(), set(), 1)

    def test_rejects_future(self):
        with pytest.raises(InvalidStateError):
            validate_grace_day_request(D + timedelta(days=1), D, set(), set(), 1)

    def test_rejects_active_day(self):
        with pytest.raises(InvalidStateError):
            validate_grace_day_request(D - timedelta(days=1), D, days_ago(1), set(), 1)

    def test_rejects_already_protected(self):
        with pytest.raises(GraceDayConflictError):
            validate_grace_day_request(D - timedelta(days=1), D, set(), days_ago(1), 2)

    def test_rejects_when_quota_used(self):
        with pytest.raises(GraceDayUnavailableError):
            validate_grace_day_request(D - timedelta(days=1), D, days_ago(2), days_ago(3), 1)

    def test_quota_of_previous_week_is_separate(self):
        # Protecting last Sunday counts against week 41, not week 42
        validate_grace_day_request(date(2026, 10, 11), D, days_ago(8, 6), days_ago(3), 1)

    def test_accepts_day_between_two_active_days(self):
        validate_grace_day_request(D - timedelta(days=5), D, days_ago(6, 4), set(), 1)

    def test_rejects_day_with_no_activity_around_it(self):
        with pytest.raises(InvalidStateError, match="single missed day"):
            validate_grace_day_request(D - timedelta(days=40), D, set(), set(), 1)

    def test_rejects_first_day_of_two_day_gap(self):
        # Active on D-3, missed D-2 and D-1
        with pytest.raises(InvalidStateError):
            validate_grace_day_request(D - timedelta(days=2), D, days_ago(3), set(), 2)

    def test_rejects_second_grace_day_in_a_row(self):
        with pytest.raises(InvalidStateError):
            validate_grace_day_request(D - timedelta(days=1), D, days_ago(3), days_ago(2), 2)

    def test_rejects_gap_spanning_iso_weeks(self):
        # Sunday of week 41 is protected; Monday of week 42 still has quota
        active = {date(2026, 10, 10)}
        protected = {date(2026, 10, 11)}
        with pytest.raises(InvalidStateError):
            validate_grace_day_request(date(2026, 10, 12), D, active, protected, 1)
