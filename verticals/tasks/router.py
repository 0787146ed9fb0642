"""Tasks API router — CRUD plus title, date and status lookups.

Follows the standard router pattern:
- Repository injection via FastAPI Depends
- Path and query validation at the boundary (bad input never reaches the store)
- HTTPException for 400/404, ConcurrencyConflictError for unrecoverable writes
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from patterns.repository import ConcurrencyConflictError
from verticals.tasks.models.schemas import TaskCreate, TaskRead, TaskStatus, TaskUpdate
from verticals.tasks.repository import (
    TaskRepository,
    UpdateOutcome,
    get_task_repository,
)

logger = logging.getLogger(__name__)

RESOURCE_ROOT = "/Tarefa"

router = APIRouter(prefix=RESOURCE_ROOT, tags=["Tarefa"])


# ============================================================================
# Lookups
# ============================================================================
# Fixed paths are registered before /{task_id} so they are not captured by it.

@router.get("/ObterTodos", response_model=list[TaskRead])
async def list_tasks(repo: TaskRepository = Depends(get_task_repository)):
    """Every stored task."""
    return await repo.list_all()


@router.get("/ObterPorTitulo", response_model=list[TaskRead])
async def search_tasks_by_title(
    titulo: Optional[str] = Query(None, description="Substring to look for in titles"),
    repo: TaskRepository = Depends(get_task_repository),
):
    """Tasks whose title contains the given text."""
    if titulo is None or not titulo.strip():
        raise HTTPException(status_code=400, detail="title must not be empty")
    return await repo.search_by_title(titulo)


@router.get("/ObterPorData", response_model=list[TaskRead])
async def search_tasks_by_date(
    data: datetime = Query(..., description="Calendar date, YYYY-MM-DD; any time part is ignored"),
    repo: TaskRepository = Depends(get_task_repository),
):
    """Tasks due on the given day. Time of day is ignored."""
    return await repo.search_by_date(data.date())


@router.get("/ObterPorStatus", response_model=list[TaskRead])
async def filter_tasks_by_status(
    status: TaskStatus = Query(..., description="Status name"),
    repo: TaskRepository = Depends(get_task_repository),
):
    return await repo.filter_by_status(status)


# ============================================================================
# Single task
# ============================================================================

@router.get("/{task_id}", response_model=TaskRead, name="get_task")
async def get_task(
    task_id: int,
    repo: TaskRepository = Depends(get_task_repository),
):
    task = await repo.get(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("", status_code=201, response_model=TaskRead)
async def create_task(
    payload: TaskCreate,
    request: Request,
    response: Response,
    repo: TaskRepository = Depends(get_task_repository),
):
    """Store a new task. The id is assigned by the database."""
    task = await repo.create(payload.model_dump())
    response.headers["Location"] = str(request.url_for("get_task", task_id=task["id"]))
    logger.info("Created task %s", task["id"])
    return task


@router.put("/{task_id}", status_code=204)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    repo: TaskRepository = Depends(get_task_repository),
):
    """Replace title, description, due date and status of a task."""
    if payload.id != task_id:
        raise HTTPException(
            status_code=400,
            detail="Route id does not match the task id in the request body",
        )

    outcome = await repo.update(task_id, payload.model_dump(exclude={"id"}))
    if outcome is UpdateOutcome.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Task not found")
    if outcome is UpdateOutcome.CONFLICT:
        raise ConcurrencyConflictError("Task", task_id)

    logger.info("Updated task %s", task_id)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: int,
    repo: TaskRepository = Depends(get_task_repository),
):
    deleted = await repo.delete(task_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Task not found")
    logger.info("Deleted task %s", task_id)
