"""
Transaction boundaries for progression writes.

- atomic(): commit everything or nothing, for callers that own the session
- savepoint(): isolate one award or grace-day insert inside a larger
  transaction, so a uniqueness violation discards only that write
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

logger = structlog.get_logger()


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Commit on success, roll back and re-raise on any error.

    Usage:
        async with atomic(db) as session:
            await engine.evaluate_and_award(collector_id, category)
    """
    try:
        yield db
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error("Transaction rolled back", error=str(e), error_type=type(e).__name__)
        raise


@asynccontextmanager
async def savepoint(db: AsyncSession, name: str = "sp") -> AsyncGenerator[AsyncSession, None]:
    """
    Run a block inside SAVEPOINT; on error only the block is undone.

    The error is re-raised. A constraint violation is logged at info level
    since losing a uniqueness race is an expected outcome for the ledger.

    Usage:
        try:
            async with savepoint(db, "award_badge"):
                db.add(badge)
                await db.flush()
        except IntegrityError:
            ...
    """
    async with db.begin_nested():
        try:
            yield db
        except IntegrityError as e:
            logger.info("Savepoint rolled back on constraint", savepoint=name, error=str(e.orig))
            raise
        except Exception as e:
            logger.warning("Savepoint rolled back", savepoint=name, error=str(e))
            raise
