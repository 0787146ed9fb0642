"""Async repository pattern for database access.

Provides a generic base repository with the primitive CRUD operations and
FastAPI dependency injection. Verticals subclass this to add domain-specific
queries.

Example: TaskRepository extending BaseRepository.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.base import Base

# ---------------------------------------------------------------------------
# Type variable for model classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ConcurrencyConflictError(RuntimeError):
    """A write lost an optimistic-concurrency race and the row still exists.

    Not retried or merged; callers let it terminate the request.
    """

    def __init__(self, entity: str, item_id: Any):
        self.entity = entity
        self.item_id = item_id
        super().__init__(f"Concurrent modification conflict on {entity.lower()} {item_id}")


# ---------------------------------------------------------------------------
# Base repository
# ---------------------------------------------------------------------------

class BaseRepository(Generic[ModelT]):
    """Generic async repository with CRUD primitives.

    Subclass and set `model` to your SQLAlchemy model::

        class TaskRepository(BaseRepository[Task]):
            model = Task

            async def with_status(self, status: TaskStatus):
                stmt = select(self.model).where(self.model.status == status)
                result = await self.session.execute(stmt)
                return [r.to_dict() for r in result.scalars().all()]
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- Query helpers --

    async def _fetch_all(self, stmt) -> list[dict]:
        result = await self.session.execute(stmt)
        return [row.to_dict() for row in result.scalars().all()]

    async def _load(self, item_id: Any) -> ModelT | None:
        return await self.session.get(self.model, item_id)

    # -- List --

    async def list_all(self) -> list[dict]:
        """Every row, in store order."""
        return await self._fetch_all(select(self.model))

    # -- Get by ID --

    async def get(self, item_id: Any) -> dict | None:
        """Get a single item by primary key."""
        item = await self._load(item_id)
        return item.to_dict() if item else None

    async def exists(self, item_id: Any) -> bool:
        """Check presence with a fresh query, bypassing the identity map."""
        stmt = select(exists().where(self.model.id == item_id))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    # -- Create --

    async def create(self, data: dict[str, Any]) -> dict:
        """Create a new item. Any caller-supplied id is discarded."""
        values = {k: v for k, v in data.items() if k != "id"}
        item = self.model(**values)
        self.session.add(item)
        await self.session.flush()
        return item.to_dict()

    # -- Delete --

    async def delete(self, item_id: Any) -> bool:
        """Delete an item. Returns True if deleted, False if not found."""
        item = await self._load(item_id)
        if not item:
            return False

        await self.session.delete(item)
        await self.session.flush()
        return True
