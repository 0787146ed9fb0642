"""Pydantic schemas for API request/response validation."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskStatus(str, Enum):
    """Closed set of task states, serialized by name in JSON."""

    PENDING = "Pending"
    COMPLETED = "Completed"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class TaskBase(BaseModel):
    title: str = Field(..., max_length=500)
    description: Optional[str] = None
    due_date: datetime
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("due_date")
    @classmethod
    def _naive_utc(cls, value: datetime) -> datetime:
        """Store offsets as UTC wall time; the column holds naive timestamps."""
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class TaskCreate(TaskBase):
    """Creation payload. An `id` sent by the client is ignored."""

    model_config = ConfigDict(extra="ignore")


class TaskUpdate(TaskBase):
    """Full replacement payload. `id` must repeat the id in the URL."""

    id: Optional[int] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class TaskRead(TaskBase):
    id: int
