"""
Repository layer for data access.

Repositories wrap the SQLAlchemy models and implement the collaborator
interfaces the progression engine consumes.
"""
from carddex.repositories.base import BaseRepository
from carddex.repositories.collection_repo import CollectionRepository
from carddex.repositories.activity_repo import ActivityLogRepository
from carddex.repositories.award_repo import AwardRepository
from carddex.repositories.grace_day_repo import GraceDayRepository

__all__ = [
    "BaseRepository",
    "CollectionRepository",
    "ActivityLogRepository",
    "AwardRepository",
    "GraceDayRepository",
]
