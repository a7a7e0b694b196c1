"""
Base repository shared by the progression providers.

Every read goes through _execute so a storage failure surfaces as
CollaboratorUnavailableError, which fails the whole evaluation instead of
looking like an empty collection.
"""
from typing import Any, Generic, Sequence, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from carddex.core.exceptions import CollaboratorUnavailableError
from carddex.db.base import Base

logger = structlog.get_logger()

# Type variable for generic repository
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Column-filter lookups over one model.

    Usage:
        class GraceDayRepository(BaseRepository[GraceDayUsage]):
            def __init__(self, db: AsyncSession):
                super().__init__(GraceDayUsage, db)
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def _execute(self, query: Any) -> Result:
        try:
            return await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(
                "Provider read failed",
                model=self.model.__name__,
                error=str(e),
            )
            raise CollaboratorUnavailableError(
                f"{self.model.__tablename__} unavailable: {e}"
            ) from e

    def _filtered(self, query: Select, filters: dict[str, Any]) -> Select:
        for key, value in filters.items():
            query = query.where(getattr(self.model, key) == value)
        return query

    async def get_by_id(self, id: int) -> ModelType | None:
        result = await self._execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def find_one_by(self, **filters: Any) -> ModelType | None:
        """
        Single record matching every column filter.

        Raises:
            AttributeError: A filter names a column the model does not have
        """
        result = await self._execute(self._filtered(select(self.model), filters))
        return result.scalar_one_or_none()

    async def find_by(self, **filters: Any) -> Sequence[ModelType]:
        """Records matching every column filter, in insertion order."""
        query = self._filtered(select(self.model), filters).order_by(self.model.id)
        result = await self._execute(query)
        return result.scalars().all()

    async def count(self, **filters: Any) -> int:
        query = self._filtered(select(func.count()).select_from(self.model), filters)
        result = await self._execute(query)
        return result.scalar() or 0

    async def create(self, **values: Any) -> ModelType:
        """
        Insert a record and flush it.

        Constraint violations are raised as IntegrityError so callers can
        run this inside a savepoint and react to duplicates.
        """
        instance = self.model(**values)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance
