"""Database model for ambassador tasks."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

TASK_OPEN = "open"
TASK_CLOSED = "closed"
TASK_STATUSES = (TASK_OPEN, TASK_CLOSED)


class Task(SQLModel, table=True):
    """Task that ambassadors complete by submitting a file."""

    id: Optional[int] = ORMField(default=None, primary_key=True)
    title: str
    description: str = ""
    status: str = ORMField(default=TASK_OPEN, index=True)
    max_points: int = 10
    deadline: Optional[datetime] = None
    created_by: Optional[str] = None
    pending_count: int = 0
    total_submissions: int = 0
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["TASK_CLOSED", "TASK_OPEN", "TASK_STATUSES", "Task"]
