"""
Base repository class with common CRUD operations.
Repositories handle database access using async SQLAlchemy sessions.
"""

from typing import Generic, TypeVar, Type, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, exists

from app.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository for models keyed by an integer ``id``."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def add(self, instance: ModelType) -> ModelType:
        """Insert a built instance and flush so the store assigns its id."""
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def get(self, id: int) -> Optional[ModelType]:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def exists(self, id: int) -> bool:
        result = await self.session.execute(
            select(exists().where(self.model.id == id))
        )
        return bool(result.scalar())

    async def count_all(self) -> int:
        result = await self.session.execute(
            select(func.count(self.model.id))
        )
        return result.scalar() or 0

    async def update(self, instance: ModelType, **kwargs) -> ModelType:
        """
        Set attributes on a loaded instance and flush.

        Args:
            instance: Persistent model instance
            **kwargs: Column values to assign

        Returns:
            The same instance
        """
        for key, value in kwargs.items():
            setattr(instance, key, value)
        await self.session.flush()
        return instance

    async def delete(self, id: int) -> bool:
        """
        Delete a record through the ORM so relationship cascades run.

        Returns:
            True if deleted, False if no record has the id
        """
        instance = await self.get(id)
        if instance is None:
            return False
        await self.session.delete(instance)
        await self.session.flush()
        return True
