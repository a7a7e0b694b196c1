"""
SQLAlchemy models for the CardDex progression backend.
"""
from carddex.models.collector import Collector
from carddex.models.collection import CollectionCard, CachedCard, CachedSet
from carddex.models.activity_log import ActivityLog, ActivityKind
from carddex.models.awarded_badge import AwardedBadge
from carddex.models.grace_day import GraceDayUsage

__all__ = [
    "Collector",
    "CollectionCard",
    "CachedCard",
    "CachedSet",
    "ActivityLog",
    "ActivityKind",
    "AwardedBadge",
    "GraceDayUsage",
]
