"""
API dependencies.
"""
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from carddex.core.config import Settings, get_settings
from carddex.db.session import get_db
from carddex.services.progression.engine import ProgressionEngine


async def get_engine(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ProgressionEngine:
    """Progression engine bound to the request's database session."""
    return ProgressionEngine(db, settings)


__all__ = ["get_db", "get_engine"]
