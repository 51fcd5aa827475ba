"""Database model for task submissions."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Submission(SQLModel, table=True):
    """A user's file submission for a task, reviewed by an admin.

    Several submissions for the same (user, task) pair are allowed.
    """

    id: Optional[int] = ORMField(default=None, primary_key=True)
    task_id: int = ORMField(index=True, foreign_key="task.id")
    user_id: str = ORMField(index=True, foreign_key="user_profile.id")
    user_email: str
    user_name: Optional[str] = None
    file_url: str
    file_name: str
    comment: Optional[str] = None
    points_awarded: Optional[int] = None
    reviewed: bool = ORMField(default=False, index=True)
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    submitted_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Submission"]
