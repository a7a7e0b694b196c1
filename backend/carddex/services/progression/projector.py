"""
Progress projector.

Read-only "current badge, next badge, distance, percent" figures for the
presentation layer. Never writes.
"""
import math
from typing import Optional

from carddex.schemas.progression import (
    BadgeDefinitionResponse,
    CompletionContext,
    ProgressResult,
)
from carddex.services.progression import catalog
from carddex.services.progression.catalog import BadgeCategory, BadgeDefinition
from carddex.services.progression.evaluator import BadgeTrack, Measurement, round_half_up


def definition_response(definition: BadgeDefinition, key: Optional[str] = None) -> BadgeDefinitionResponse:
    """Catalog entry as a response; key overrides for composite award keys."""
    return BadgeDefinitionResponse(
        key=key or definition.key,
        category=definition.category.value,
        threshold=definition.threshold,
        display_name=definition.display_name,
        description=definition.description,
        icon=definition.icon,
        color=definition.color,
        tag=definition.tag,
    )


def progress_percentage(current: int, threshold: int) -> int:
    """min(100, round(current / threshold * 100)); 0 when nothing is collected."""
    if current <= 0 or threshold <= 0:
        return 0
    return min(100, round_half_up(current / threshold * 100))


def items_needed(context: CompletionContext, threshold: int) -> int:
    """Cards still missing to reach a completion percentage."""
    required = math.ceil(threshold / 100 * context.total_items)
    return max(0, required - context.items_owned)


def project_track(
    category: BadgeCategory,
    track: BadgeTrack,
    held_keys: set[str],
) -> ProgressResult:
    current_badge = None
    next_badge = None
    for key, definition in track.badges:
        if key in held_keys:
            current_badge = (key, definition)
        elif next_badge is None:
            next_badge = (key, definition)

    result = ProgressResult(
        category=category.value,
        scope_id=track.scope_id,
        current_value=track.value,
        current_badge=definition_response(current_badge[1], current_badge[0]) if current_badge else None,
    )

    if next_badge is None:
        result.percentage = 100
        if isinstance(track.context, CompletionContext):
            result.items_needed = 0
        return result

    key, definition = next_badge
    result.next_badge = definition_response(definition, key)
    result.distance_to_next = max(0, definition.threshold - track.value)
    result.percentage = progress_percentage(track.value, definition.threshold)
    if isinstance(track.context, CompletionContext):
        result.items_needed = items_needed(track.context, definition.threshold)
    return result


def project_progress(measurement: Measurement, held_keys: set[str]) -> ProgressResult:
    """
    Progress for a measured category.

    With several tracks (unscoped specialist, named-target or completion
    checks) the track closest to its next badge is reported. With no
    track at all (unknown or unscoreable set, unknown tag) the result is
    zero progress toward the category's first badge.
    """
    category = measurement.category
    if not measurement.tracks:
        definitions = catalog.definitions_by_category(category)
        return ProgressResult(
            category=category.value,
            scope_id=measurement.scope_id,
            current_value=0,
            next_badge=definition_response(definitions[0]) if definitions else None,
            distance_to_next=definitions[0].threshold if definitions else 0,
            percentage=0,
        )

    projections = [project_track(category, track, held_keys) for track in measurement.tracks]
    pending = [p for p in projections if p.next_badge is not None]
    if not pending:
        return max(projections, key=lambda p: p.current_value)
    return min(
        pending,
        key=lambda p: (-p.percentage, p.distance_to_next, p.next_badge.threshold, p.next_badge.key),
    )
