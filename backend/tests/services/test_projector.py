"""
Tests for the progress projector.
"""
from carddex.services.progression.catalog import BadgeCategory
from carddex.services.progression.evaluator import (
    Measurement,
    completion_track,
    milestone_track,
    specialist_tracks,
    streak_track,
)
from carddex.services.progression.projector import (
    progress_percentage,
    project_progress,
    project_track,
)
from carddex.services.progression.providers import ItemDescriptor, SetReference


def ids(n: int, prefix: str = "x") -> set[str]:
    return {f"{prefix}-{i}" for i in range(n)}


class TestProgressPercentage:
    def test_zero_current_is_zero(self):
        assert progress_percentage(0, 10) == 0

    def test_rounds_half_up(self):
        assert progress_percentage(1, 8) == 13

    def test_capped_at_100(self):
        assert progress_percentage(15, 10) == 100


class TestProjectTrack:
    def test_empty_collection(self):
        result = project_track(BadgeCategory.MILESTONE, milestone_track(set()), set())
        assert result.current_value == 0
        assert result.current_badge is None
        assert result.next_badge.key == "first_catch"
        assert result.distance_to_next == 1
        assert result.percentage == 0

    def test_current_and_next_badge(self):
        track = milestone_track(ids(30))
        result = project_track(BadgeCategory.MILESTONE, track, {"first_catch", "starter_collector"})
        assert result.current_badge.key == "starter_collector"
        assert result.next_badge.key == "rising_trainer"
        assert result.distance_to_next == 20
        assert result.percentage == 60

    def test_unawarded_crossed_badge_is_next(self):
        """Current exceeds the next threshold until evaluation catches up."""
        track = milestone_track(ids(12))
        result = project_track(BadgeCategory.MILESTONE, track, {"first_catch"})
        assert result.next_badge.key == "starter_collector"
        assert result.distance_to_next == 0
        assert result.percentage == 100

    def test_everything_held(self):
        track = streak_track(40)
        held = {"streak_3", "streak_7", "streak_14", "streak_30"}
        result = project_track(BadgeCategory.STREAK, track, held)
        assert result.next_badge is None
        assert result.current_badge.key == "streak_30"
        assert result.percentage == 100
        assert result.distance_to_next == 0

    def test_completion_reports_items_needed(self):
        track = completion_track(ids(30, "sv1"), SetReference("sv1", "Base", 102))
        result = project_track(BadgeCategory.COMPLETION, track, {"sv1_set_explorer"})
        assert result.current_value == 29
        assert result.current_badge.key == "sv1_set_explorer"
        assert result.next_badge.key == "sv1_set_adventurer"
        # ceil(0.5 * 102) - 30
        assert result.items_needed == 21

    def test_items_needed_absent_outside_completion(self):
        result = project_track(BadgeCategory.MILESTONE, milestone_track(ids(3)), set())
        assert result.items_needed is None


class TestProjectProgress:
    def test_no_tracks_reports_first_badge(self):
        measurement = Measurement(category=BadgeCategory.COMPLETION, scope_id="nope")
        result = project_progress(measurement, set())
        assert result.current_value == 0
        assert result.scope_id == "nope"
        assert result.next_badge.key == "set_explorer"
        assert result.distance_to_next == 25
        assert result.percentage == 0

    def test_unscoped_picks_track_closest_to_next_badge(self):
        descriptors = {
            f"a-{i}": ItemDescriptor(f"a-{i}", "Card", ("Fire",) if i < 8 else ("Water",))
            for i in range(10)
        }
        measurement = Measurement(
            category=BadgeCategory.CATEGORY_SPECIALIST,
            scope_id=None,
            tracks=specialist_tracks(set(descriptors), descriptors),
        )
        result = project_progress(measurement, set())
        assert result.scope_id == "Fire"
        assert result.percentage == 80

    def test_percentage_always_bounded(self):
        for n in (0, 1, 9, 10, 11, 999, 5000):
            measurement = Measurement(
                category=BadgeCategory.MILESTONE,
                scope_id=None,
                tracks=[milestone_track(ids(n))],
            )
            result = project_progress(measurement, set())
            assert 0 <= result.percentage <= 100
