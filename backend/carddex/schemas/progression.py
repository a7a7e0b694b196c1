"""
Progression schemas: award context, evaluation, progress and streak calendar.
"""
from datetime import date, datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# ============ Award Context (tagged by badge category) ============


class MilestoneContext(BaseModel):
    """Context stored with a collector milestone award."""
    category: Literal["milestone"] = "milestone"
    unique_items: int


class CompletionContext(BaseModel):
    """Context stored with a set completion award."""
    category: Literal["completion"] = "completion"
    set_id: str
    set_name: str
    items_owned: int
    total_items: int
    completion_percentage: int
    badge_level: Optional[str] = None


class SpecialistContext(BaseModel):
    """Context stored with a type specialist award."""
    category: Literal["category_specialist"] = "category_specialist"
    tag: str
    item_count: int


class NamedTargetContext(BaseModel):
    """Context stored with a Pokemon fan award."""
    category: Literal["named_target"] = "named_target"
    target: str
    item_count: int


class StreakContext(BaseModel):
    """Context stored with a streak award."""
    category: Literal["streak"] = "streak"
    streak_days: int


AwardContext = Annotated[
    Union[
        MilestoneContext,
        CompletionContext,
        SpecialistContext,
        NamedTargetContext,
        StreakContext,
    ],
    Field(discriminator="category"),
]

award_context_adapter: TypeAdapter[AwardContext] = TypeAdapter(AwardContext)


# ============ Catalog & Ledger ============


class BadgeDefinitionResponse(BaseModel):
    """Catalog entry for a badge."""
    key: str
    category: str
    threshold: int
    display_name: str
    description: str
    icon: str
    color: str
    tag: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AwardedBadgeResponse(BaseModel):
    """A badge held by a collector."""
    collector_id: int
    badge_key: str
    category: str
    earned_at: datetime
    context_data: Optional[AwardContext] = None

    model_config = ConfigDict(from_attributes=True)


class EvaluationResult(BaseModel):
    """Outcome of evaluate-and-award for one category."""
    collector_id: int
    category: str
    scope_id: Optional[str] = None
    awarded_keys: list[str] = Field(default_factory=list)
    current_metric: int = 0


# ============ Progress ============


class ProgressResult(BaseModel):
    """Read-only progress toward the next badge in a category."""
    category: str
    scope_id: Optional[str] = None
    current_value: int
    current_badge: Optional[BadgeDefinitionResponse] = None
    next_badge: Optional[BadgeDefinitionResponse] = None
    distance_to_next: int = 0
    percentage: int = Field(0, ge=0, le=100)
    # Completion only: cards still missing for the next level
    items_needed: Optional[int] = None


# ============ Streak Calendar ============


class CalendarDay(BaseModel):
    """Status flags for one calendar day."""
    date: date
    day_of_week: int  # ISO weekday, 1 = Monday
    has_activity: bool
    is_grace_day: bool
    is_part_of_streak: bool
    is_today: bool
    is_weekend: bool


class CalendarWeek(BaseModel):
    """Days of one ISO week inside the window."""
    iso_year: int
    week_number: int
    days: list[CalendarDay]


class StreakCalendar(BaseModel):
    """Calendar grid plus streak aggregates."""
    days: list[CalendarDay]
    weeks: list[CalendarWeek]
    total_days: int
    current_streak_days: int
    longest_streak_days: int
    active_days: int
    grace_days_used: int
    longest_gap: int
    streak_start_date: Optional[date] = None


# ============ Grace Days ============


class GraceDayAvailability(BaseModel):
    """Weekly grace-day quota status."""
    is_available: bool
    used_this_week: int
    max_per_week: int
    remaining: int
    resets_on: date
    days_until_reset: int


class GraceDayUsageResponse(BaseModel):
    """A recorded grace-day usage."""
    collector_id: int
    used_on: date
    protected_date: date
    iso_year: int
    week_number: int
    streak_length_at_use: int

    model_config = ConfigDict(from_attributes=True)


class GraceDayStatusResponse(BaseModel):
    """Grace-day availability plus the day that could be protected now, if any."""
    availability: GraceDayAvailability
    protectable_date: Optional[date] = None
    history: list[GraceDayUsageResponse] = Field(default_factory=list)


class ConsumeGraceDayRequest(BaseModel):
    """Request to spend a grace day on a missed day."""
    protected_date: date
    today: Optional[date] = None
