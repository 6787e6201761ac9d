"""Generic repository over a mapped model with an integer surrogate key."""

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.models.orm.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Lookups and deletion shared by all repositories.

    Subclasses set ``model``. Nothing here commits: the request's session
    owns the transaction.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: int) -> ModelT | None:
        """Load a row by its surrogate id, or None."""
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def delete(self, instance: ModelT) -> None:
        """Delete a loaded row and flush, cascading to owned children."""
        await self.session.delete(instance)
        await self.session.flush()
