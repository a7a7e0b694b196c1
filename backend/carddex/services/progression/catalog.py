"""
Badge catalog.

Static registry of badge definitions grouped into categories. Pure data
plus lookup helpers; nothing here touches storage.

Completion badges are awarded once per set under a composite key
"<setId>_<baseKey>", e.g. "sv1_set_explorer".
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BadgeCategory(str, Enum):
    """Badge categories. Each evaluation is scoped to one of these."""

    COMPLETION = "completion"
    MILESTONE = "milestone"
    CATEGORY_SPECIALIST = "category_specialist"
    NAMED_TARGET = "named_target"
    STREAK = "streak"


@dataclass(frozen=True)
class BadgeDefinition:
    """
    Immutable badge definition.

    Attributes:
        key: Globally unique badge key
        category: Badge category
        threshold: Percentage for completion badges, day count for streak
            badges, absolute unique-card count otherwise
        display_name: Human readable name
        description: One-line description
        icon: Emoji icon
        color: Hex color
        tag: Card type tracked by a specialist badge
    """
    key: str
    category: BadgeCategory
    threshold: int
    display_name: str
    description: str
    icon: str
    color: str
    tag: Optional[str] = None


BADGE_DEFINITIONS: tuple[BadgeDefinition, ...] = (
    # Set completion (percentage of a set)
    BadgeDefinition("set_explorer", BadgeCategory.COMPLETION, 25, "Set Explorer",
                    "Collect 25% of a set", "🗺️", "#78C850"),
    BadgeDefinition("set_adventurer", BadgeCategory.COMPLETION, 50, "Set Adventurer",
                    "Collect 50% of a set", "🎒", "#6890F0"),
    BadgeDefinition("set_master", BadgeCategory.COMPLETION, 75, "Set Master",
                    "Collect 75% of a set", "🏅", "#A040A0"),
    BadgeDefinition("set_champion", BadgeCategory.COMPLETION, 100, "Set Champion",
                    "Complete a set 100%", "🏆", "#F8D030"),

    # Collector milestones (unique cards)
    BadgeDefinition("first_catch", BadgeCategory.MILESTONE, 1, "First Catch",
                    "Add your first card", "🎯", "#A8A878"),
    BadgeDefinition("starter_collector", BadgeCategory.MILESTONE, 10, "Starter Collector",
                    "Collect 10 cards", "⭐", "#78C850"),
    BadgeDefinition("rising_trainer", BadgeCategory.MILESTONE, 50, "Rising Trainer",
                    "Collect 50 cards", "🌟", "#6890F0"),
    BadgeDefinition("pokemon_trainer", BadgeCategory.MILESTONE, 100, "Pokemon Trainer",
                    "Collect 100 cards", "💫", "#A040A0"),
    BadgeDefinition("elite_collector", BadgeCategory.MILESTONE, 250, "Elite Collector",
                    "Collect 250 cards", "🎖️", "#F08030"),
    BadgeDefinition("pokemon_master", BadgeCategory.MILESTONE, 500, "Pokemon Master",
                    "Collect 500 cards", "👑", "#F8D030"),
    BadgeDefinition("legendary_collector", BadgeCategory.MILESTONE, 1000, "Legendary Collector",
                    "Collect 1000 cards", "🌈", "#7038F8"),

    # Type specialists (cards carrying a type tag)
    BadgeDefinition("fire_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Fire Trainer",
                    "Collect 10+ Fire-type cards", "🔥", "#F08030", tag="Fire"),
    BadgeDefinition("water_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Water Trainer",
                    "Collect 10+ Water-type cards", "💧", "#6890F0", tag="Water"),
    BadgeDefinition("grass_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Grass Trainer",
                    "Collect 10+ Grass-type cards", "🌿", "#78C850", tag="Grass"),
    BadgeDefinition("electric_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Electric Trainer",
                    "Collect 10+ Electric-type cards", "⚡", "#F8D030", tag="Lightning"),
    BadgeDefinition("psychic_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Psychic Trainer",
                    "Collect 10+ Psychic-type cards", "🔮", "#F85888", tag="Psychic"),
    BadgeDefinition("fighting_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Fighting Trainer",
                    "Collect 10+ Fighting-type cards", "🥊", "#C03028", tag="Fighting"),
    BadgeDefinition("darkness_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Darkness Trainer",
                    "Collect 10+ Darkness-type cards", "🌑", "#705848", tag="Darkness"),
    BadgeDefinition("metal_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Metal Trainer",
                    "Collect 10+ Metal-type cards", "⚙️", "#B8B8D0", tag="Metal"),
    BadgeDefinition("dragon_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Dragon Trainer",
                    "Collect 10+ Dragon-type cards", "🐉", "#7038F8", tag="Dragon"),
    BadgeDefinition("fairy_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Fairy Trainer",
                    "Collect 10+ Fairy-type cards", "🧚", "#EE99AC", tag="Fairy"),
    BadgeDefinition("colorless_trainer", BadgeCategory.CATEGORY_SPECIALIST, 10, "Colorless Trainer",
                    "Collect 10+ Colorless-type cards", "⚪", "#A8A878", tag="Colorless"),

    # Named targets (see named_targets.py for the matching rules)
    BadgeDefinition("pikachu_fan", BadgeCategory.NAMED_TARGET, 5, "Pikachu Fan",
                    "Collect 5+ Pikachu cards", "⚡", "#F8D030"),
    BadgeDefinition("eevee_fan", BadgeCategory.NAMED_TARGET, 5, "Eevee Fan",
                    "Collect 5+ Eevee/Eeveelution cards", "🦊", "#A8A878"),
    BadgeDefinition("charizard_fan", BadgeCategory.NAMED_TARGET, 3, "Charizard Fan",
                    "Collect 3+ Charizard cards", "🔥", "#F08030"),
    BadgeDefinition("mewtwo_fan", BadgeCategory.NAMED_TARGET, 3, "Mewtwo Fan",
                    "Collect 3+ Mewtwo cards", "🔮", "#F85888"),
    BadgeDefinition("legendary_fan", BadgeCategory.NAMED_TARGET, 10, "Legendary Fan",
                    "Collect 10+ Legendary Pokemon cards", "✨", "#7038F8"),

    # Streaks (consecutive days with cards added)
    BadgeDefinition("streak_3", BadgeCategory.STREAK, 3, "3-Day Streak",
                    "Add cards 3 days in a row", "🔥", "#F08030"),
    BadgeDefinition("streak_7", BadgeCategory.STREAK, 7, "Week Warrior",
                    "Add cards 7 days in a row", "📅", "#6890F0"),
    BadgeDefinition("streak_14", BadgeCategory.STREAK, 14, "Dedicated Collector",
                    "Add cards 14 days in a row", "💪", "#A040A0"),
    BadgeDefinition("streak_30", BadgeCategory.STREAK, 30, "Monthly Master",
                    "Add cards 30 days in a row", "🏆", "#F8D030"),
)

CATEGORY_DISPLAY_NAMES: dict[BadgeCategory, str] = {
    BadgeCategory.COMPLETION: "Set Completion",
    BadgeCategory.MILESTONE: "Collector Milestones",
    BadgeCategory.CATEGORY_SPECIALIST: "Type Specialist",
    BadgeCategory.NAMED_TARGET: "Pokemon Fan",
    BadgeCategory.STREAK: "Collection Streaks",
}

_BY_KEY: dict[str, BadgeDefinition] = {d.key: d for d in BADGE_DEFINITIONS}
_BY_CATEGORY: dict[BadgeCategory, tuple[BadgeDefinition, ...]] = {
    category: tuple(
        sorted(
            (d for d in BADGE_DEFINITIONS if d.category == category),
            key=lambda d: (d.threshold, d.key),
        )
    )
    for category in BadgeCategory
}
_BY_TAG: dict[str, BadgeDefinition] = {
    d.tag.lower(): d for d in BADGE_DEFINITIONS if d.tag is not None
}

if len(_BY_KEY) != len(BADGE_DEFINITIONS):
    raise RuntimeError("Duplicate badge keys in BADGE_DEFINITIONS")


def definitions_by_category(category: BadgeCategory) -> list[BadgeDefinition]:
    """Definitions of one category, ordered by ascending threshold."""
    return list(_BY_CATEGORY[BadgeCategory(category)])


def definition_by_key(key: str) -> Optional[BadgeDefinition]:
    """
    Look up a definition by key.

    Composite completion keys ("sv1_set_master") resolve to their base
    definition. Unknown keys return None.
    """
    definition = _BY_KEY.get(key)
    if definition is not None:
        return definition
    parsed = parse_completion_badge_key(key)
    if parsed is None:
        return None
    return _BY_KEY[parsed[1]]


def all_keys() -> frozenset[str]:
    """All base badge keys."""
    return frozenset(_BY_KEY)


def total_badge_count() -> int:
    return len(BADGE_DEFINITIONS)


def specialist_definition_for_tag(tag: str) -> Optional[BadgeDefinition]:
    """Specialist badge tracking a card type tag, case-insensitive."""
    return _BY_TAG.get(tag.lower())


def category_display_name(category: BadgeCategory) -> str:
    return CATEGORY_DISPLAY_NAMES[BadgeCategory(category)]


def completion_badge_key(set_id: str, base_key: str) -> str:
    """Composite key for a completion badge: one award per set per level."""
    return f"{set_id}_{base_key}"


def parse_completion_badge_key(key: str) -> Optional[tuple[str, str]]:
    """
    Split a composite completion key into (set_id, base_key).

    Matches on the known base-key suffix since set ids may themselves
    contain underscores.
    """
    for definition in _BY_CATEGORY[BadgeCategory.COMPLETION]:
        suffix = "_" + definition.key
        if key.endswith(suffix) and len(key) > len(suffix):
            return key[: -len(suffix)], definition.key
    return None
