"""Task repository — async database access for the tasks vertical.

Extends BaseRepository with task-specific queries: title substring search,
calendar-date search, status filtering, and a full-overwrite update that
reports optimistic-concurrency conflicts instead of raising them.
"""

import logging
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Optional

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from core.database import get_session
from patterns.repository import BaseRepository
from verticals.tasks.models.db_models import Task
from verticals.tasks.models.schemas import TaskStatus

logger = logging.getLogger(__name__)

# Fields a PUT overwrites; id is never among them
MUTABLE_FIELDS = ("title", "description", "due_date", "status")


class UpdateOutcome(str, Enum):
    UPDATED = "updated"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


# ---------------------------------------------------------------------------
# Task repository
# ---------------------------------------------------------------------------

class TaskRepository(BaseRepository[Task]):
    """Repository for task CRUD and lookups.

    ``title_case_sensitive`` selects how title search matches:
    None uses the database's own LIKE behaviour, True demands an exact-case
    substring, False ignores case.
    """

    model = Task

    def __init__(self, session: AsyncSession, title_case_sensitive: Optional[bool] = None):
        super().__init__(session)
        self.title_case_sensitive = title_case_sensitive

    async def search_by_title(self, title: str) -> list[dict]:
        """Tasks whose title contains ``title``. Wildcards match literally."""
        if self.title_case_sensitive is False:
            clause = Task.title.icontains(title, autoescape=True)
        else:
            clause = Task.title.contains(title, autoescape=True)

        tasks = await self._fetch_all(select(Task).where(clause))

        # LIKE is never stricter than an exact-case match, so narrow here
        if self.title_case_sensitive:
            tasks = [t for t in tasks if title in t["title"]]
        return tasks

    async def search_by_date(self, day: date) -> list[dict]:
        """Tasks due on ``day``, whatever the time of day."""
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        stmt = select(Task).where(Task.due_date >= start, Task.due_date < end)
        return await self._fetch_all(stmt)

    async def filter_by_status(self, status: TaskStatus) -> list[dict]:
        return await self._fetch_all(select(Task).where(Task.status == status))

    async def update(self, task_id: int, data: dict[str, Any]) -> UpdateOutcome:
        """Overwrite every mutable field of an existing task.

        On a concurrency conflict the session is rolled back and the row's
        existence is checked once: a vanished row is NOT_FOUND, anything else
        is CONFLICT. Nothing is retried.
        """
        task = await self._load(task_id)
        if task is None:
            return UpdateOutcome.NOT_FOUND

        for key in MUTABLE_FIELDS:
            setattr(task, key, data.get(key))

        try:
            await self.session.flush()
        except StaleDataError:
            await self.session.rollback()
            if not await self.exists(task_id):
                logger.info("Task %s disappeared during update", task_id)
                return UpdateOutcome.NOT_FOUND
            logger.warning("Task %s was modified concurrently", task_id)
            return UpdateOutcome.CONFLICT

        return UpdateOutcome.UPDATED


# ---------------------------------------------------------------------------
# FastAPI dependency factory
# ---------------------------------------------------------------------------

def get_task_repository(
    request: Request,
    session: AsyncSession = Depends(get_session),
) -> TaskRepository:
    """FastAPI dependency for TaskRepository."""
    config = request.app.state.settings
    return TaskRepository(session, title_case_sensitive=config.title_search_case_sensitive)
