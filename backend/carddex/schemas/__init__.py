"""
Pydantic schemas for progression results and API payloads.
"""
from carddex.schemas.progression import (
    AwardContext,
    AwardedBadgeResponse,
    BadgeDefinitionResponse,
    CalendarDay,
    CalendarWeek,
    CompletionContext,
    ConsumeGraceDayRequest,
    EvaluationResult,
    GraceDayAvailability,
    GraceDayStatusResponse,
    GraceDayUsageResponse,
    MilestoneContext,
    NamedTargetContext,
    ProgressResult,
    SpecialistContext,
    StreakCalendar,
    StreakContext,
)

__all__ = [
    "AwardContext",
    "AwardedBadgeResponse",
    "BadgeDefinitionResponse",
    "CalendarDay",
    "CalendarWeek",
    "CompletionContext",
    "ConsumeGraceDayRequest",
    "EvaluationResult",
    "GraceDayAvailability",
    "GraceDayStatusResponse",
    "GraceDayUsageResponse",
    "MilestoneContext",
    "NamedTargetContext",
    "ProgressResult",
    "SpecialistContext",
    "StreakCalendar",
    "StreakContext",
]
