"""
Threshold evaluator.

Computes a collector's metric for one badge category and decides which
badge keys have been crossed. Crossing detection never compares before and
after counts: a key is newly crossed when its threshold is met and it is
not in the award ledger. Re-running against an unchanged collection is
therefore always a no-op, which makes evaluation safe to retry.

Metrics:
- milestone: unique item ids (variants count once)
- category_specialist: unique items per type tag; an item with several
  tags counts once toward each of them
- named_target: unique items whose name matches a target
- completion: round(unique items of the set / set size * 100)
- streak: current streak length in days, grace days included
"""
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, Optional

import structlog

from carddex.schemas.progression import (
    AwardContext,
    CompletionContext,
    MilestoneContext,
    NamedTargetContext,
    SpecialistContext,
    StreakContext,
)
from carddex.services.progression import catalog
from carddex.services.progression.catalog import BadgeCategory, BadgeDefinition
from carddex.services.progression.named_targets import NAMED_TARGETS, find_target
from carddex.services.progression.providers import (
    ActivityLogProvider,
    CollectionSnapshotProvider,
    GraceDayHistoryProvider,
    ItemDescriptor,
    OwnedItem,
    SetReference,
    SetReferenceProvider,
)
from carddex.services.progression.streaks import current_streak_days

logger = structlog.get_logger()


@dataclass
class BadgeTrack:
    """
    One independently scored metric and the badges keyed on it.

    Attributes:
        scope_id: Set id, type tag or target name; None for global metrics
        value: Current metric value
        badges: (award key, definition) pairs in ascending threshold order
        context: Award context recorded with any badge of this track
    """
    scope_id: Optional[str]
    value: int
    badges: list[tuple[str, BadgeDefinition]]
    context: AwardContext


@dataclass
class Measurement:
    """All tracks of one category evaluation."""
    category: BadgeCategory
    scope_id: Optional[str]
    current_metric: int = 0
    tracks: list[BadgeTrack] = field(default_factory=list)


@dataclass(frozen=True)
class Crossing:
    """A badge whose threshold is met and which is not yet held."""
    badge_key: str
    definition: BadgeDefinition
    context: AwardContext


# ============ Pure metric helpers ============


def round_half_up(value: float) -> int:
    """Round .5 upward, unlike round()'s banker's rounding."""
    return int(math.floor(value + 0.5))


def unique_item_ids(items: Iterable[OwnedItem]) -> set[str]:
    return {item.item_id for item in items}


def count_by_tag(
    item_ids: Iterable[str],
    descriptors: dict[str, ItemDescriptor],
) -> dict[str, int]:
    """
    Unique items per category tag.

    Items without a descriptor are excluded. Tags are compared
    case-insensitively and counted once per item.
    """
    counts: dict[str, int] = {}
    for item_id in item_ids:
        descriptor = descriptors.get(item_id)
        if descriptor is None:
            continue
        for tag in {t.lower() for t in descriptor.category_tags}:
            counts[tag] = counts.get(tag, 0) + 1
    return counts


def count_named_targets(
    item_ids: Iterable[str],
    descriptors: dict[str, ItemDescriptor],
) -> dict[str, int]:
    """Unique items matching each named target, keyed by badge key."""
    counts = {target.badge_key: 0 for target in NAMED_TARGETS}
    for item_id in item_ids:
        descriptor = descriptors.get(item_id)
        if descriptor is None:
            continue
        for target in NAMED_TARGETS:
            if target.matches(descriptor.display_name):
                counts[target.badge_key] += 1
    return counts


def count_in_set(item_ids: Iterable[str], set_id: str) -> int:
    prefix = set_id + "-"
    return sum(1 for item_id in item_ids if item_id.startswith(prefix))


def completion_percentage(owned: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(owned / total * 100)


# ============ Track builders ============


def milestone_track(item_ids: set[str]) -> BadgeTrack:
    definitions = catalog.definitions_by_category(BadgeCategory.MILESTONE)
    return BadgeTrack(
        scope_id=None,
        value=len(item_ids),
        badges=[(d.key, d) for d in definitions],
        context=MilestoneContext(unique_items=len(item_ids)),
    )


def specialist_tracks(
    item_ids: set[str],
    descriptors: dict[str, ItemDescriptor],
    scope_id: Optional[str] = None,
) -> list[BadgeTrack]:
    """One track per type tag that has a specialist badge."""
    counts = count_by_tag(item_ids, descriptors)
    tracks = []
    for definition in catalog.definitions_by_category(BadgeCategory.CATEGORY_SPECIALIST):
        if scope_id is not None and scope_id.lower() not in (definition.tag.lower(), definition.key):
            continue
        value = counts.get(definition.tag.lower(), 0)
        tracks.append(
            BadgeTrack(
                scope_id=definition.tag,
                value=value,
                badges=[(definition.key, definition)],
                context=SpecialistContext(tag=definition.tag, item_count=value),
            )
        )
    return tracks


def named_target_tracks(
    item_ids: set[str],
    descriptors: dict[str, ItemDescriptor],
    scope_id: Optional[str] = None,
) -> list[BadgeTrack]:
    """One track per named target."""
    if scope_id is not None:
        wanted = find_target(scope_id)
        if wanted is None:
            return []
        targets = [wanted]
    else:
        targets = list(NAMED_TARGETS)
    counts = count_named_targets(item_ids, descriptors)
    tracks = []
    for target in targets:
        definition = catalog.definition_by_key(target.badge_key)
        value = counts[target.badge_key]
        tracks.append(
            BadgeTrack(
                scope_id=target.name,
                value=value,
                badges=[(definition.key, definition)],
                context=NamedTargetContext(target=target.name, item_count=value),
            )
        )
    return tracks


def completion_track(item_ids: set[str], reference: SetReference) -> Optional[BadgeTrack]:
    """Track for one set, None when the set cannot be scored."""
    if not reference.is_scoreable:
        return None
    owned = count_in_set(item_ids, reference.set_id)
    percentage = completion_percentage(owned, reference.total_item_count)
    definitions = catalog.definitions_by_category(BadgeCategory.COMPLETION)
    return BadgeTrack(
        scope_id=reference.set_id,
        value=percentage,
        badges=[(catalog.completion_badge_key(reference.set_id, d.key), d) for d in definitions],
        context=CompletionContext(
            set_id=reference.set_id,
            set_name=reference.display_name,
            items_owned=owned,
            total_items=reference.total_item_count,
            completion_percentage=percentage,
        ),
    )


def streak_track(streak_length: int) -> BadgeTrack:
    definitions = catalog.definitions_by_category(BadgeCategory.STREAK)
    return BadgeTrack(
        scope_id=None,
        value=streak_length,
        badges=[(d.key, d) for d in definitions],
        context=StreakContext(streak_days=streak_length),
    )


def crossed_thresholds(tracks: Iterable[BadgeTrack], held_keys: set[str]) -> list[Crossing]:
    """
    Badges whose threshold is met and whose key is not held.

    Ordered by ascending threshold so lower badges are awarded first; ties
    keep track order.
    """
    crossings = []
    for track in tracks:
        for key, definition in track.badges:
            if definition.threshold <= track.value and key not in held_keys:
                context = track.context
                if isinstance(context, CompletionContext):
                    context = context.model_copy(update={"badge_level": definition.key})
                crossings.append(Crossing(badge_key=key, definition=definition, context=context))
    crossings.sort(key=lambda c: c.definition.threshold)
    return crossings


# ============ Evaluator ============


def local_day_start(day: date, tz: tzinfo) -> datetime:
    """UTC instant at which day begins in tz."""
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)


class ThresholdEvaluator:
    """
    Measures one badge category for a collector.

    All reads go through the collaborator interfaces; nothing is written.
    """

    def __init__(
        self,
        snapshot: CollectionSnapshotProvider,
        sets: SetReferenceProvider,
        activity: ActivityLogProvider,
        grace_days: GraceDayHistoryProvider,
        streak_lookback_days: int = 365,
    ):
        self.snapshot = snapshot
        self.sets = sets
        self.activity = activity
        self.grace_days = grace_days
        self.streak_lookback_days = streak_lookback_days

    async def measure(
        self,
        collector_id: int,
        category: BadgeCategory,
        scope_id: Optional[str] = None,
        *,
        today: date,
        tz: tzinfo,
    ) -> Measurement:
        """
        Compute the tracks of one category.

        Args:
            collector_id: Collector to measure
            category: Badge category
            scope_id: Set id for completion; type tag or target for the
                specialist and named-target categories
            today: Caller-supplied local date (streak only)
            tz: Time zone used to turn activity timestamps into dates

        Returns:
            Measurement whose current_metric is the scoped value, or the
            highest value across tracks when unscoped
        """
        category = BadgeCategory(category)
        measurement = Measurement(category=category, scope_id=scope_id)

        if category == BadgeCategory.STREAK:
            length = await self.current_streak(collector_id, today=today, tz=tz)
            measurement.tracks = [streak_track(length)]
        else:
            items = await self.snapshot.get_owned_items(collector_id)
            item_ids = unique_item_ids(items)

            if category == BadgeCategory.MILESTONE:
                measurement.tracks = [milestone_track(item_ids)]
            elif category == BadgeCategory.COMPLETION:
                measurement.tracks = await self._completion_tracks(item_ids, items, scope_id)
            else:
                descriptors = await self.snapshot.get_item_descriptors(item_ids)
                missing = len(item_ids) - len(descriptors)
                if missing:
                    logger.debug(
                        "Excluding items without descriptors",
                        collector_id=collector_id,
                        missing=missing,
                    )
                if category == BadgeCategory.CATEGORY_SPECIALIST:
                    measurement.tracks = specialist_tracks(item_ids, descriptors, scope_id)
                else:
                    measurement.tracks = named_target_tracks(item_ids, descriptors, scope_id)

        measurement.current_metric = max((t.value for t in measurement.tracks), default=0)
        return measurement

    async def _completion_tracks(
        self,
        item_ids: set[str],
        items: list[OwnedItem],
        scope_id: Optional[str],
    ) -> list[BadgeTrack]:
        if scope_id is not None:
            set_ids = {scope_id}
        else:
            set_ids = {item.set_id for item in items if item.set_id}

        references = await self.sets.get_set_references(set_ids)
        tracks = []
        for set_id in sorted(set_ids):
            reference = references.get(set_id)
            if reference is None:
                logger.debug("Skipping completion check for unknown set", set_id=set_id)
                continue
            track = completion_track(item_ids, reference)
            if track is None:
                logger.debug(
                    "Skipping completion check for unscoreable set",
                    set_id=set_id,
                    total_items=reference.total_item_count,
                )
                continue
            tracks.append(track)
        return tracks

    async def current_streak(self, collector_id: int, *, today: date, tz: tzinfo) -> int:
        """Current streak length over the lookback window, grace days included."""
        window_start = today - timedelta(days=self.streak_lookback_days - 1)
        active = await self.activity.get_activity_dates(
            collector_id, local_day_start(window_start, tz), tz
        )
        graced = await self.grace_days.get_protected_dates(collector_id)
        return len(current_streak_days(active, graced, today, window_start))
