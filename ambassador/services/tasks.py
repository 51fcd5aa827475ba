"""Helpers for task and submission domain objects."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlmodel import Session

from ..core.logging import get_logger
from ..core.time import isoformat, utcnow
from ..models import TASK_OPEN, TASK_STATUSES, Submission, Task, UserProfile
from .errors import NotFoundError, ValidationError
from .validation import optional_text

logger = get_logger(__name__)


def _parse_deadline(raw: Any) -> Optional[datetime]:
    if raw in (None, ""):
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError("Deadline must be an ISO-8601 timestamp") from exc


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _validate_max_points(raw: Any) -> int:
    try:
        max_points = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Max points must be a whole number") from exc
    if max_points < 0:
        raise ValidationError("Max points cannot be negative")
    return max_points


def create_task(session: Session, body: Dict[str, Any], created_by: str) -> Task:
    title = optional_text(body.get("title"), "Title")
    if not title:
        raise ValidationError("Title is required")

    task = Task(
        title=title,
        description=optional_text(body.get("description"), "Description"),
        status=TASK_OPEN,
        max_points=_validate_max_points(body.get("max_points", 10)),
        deadline=_parse_deadline(body.get("deadline")),
        created_by=created_by,
    )
    session.add(task)
    session.commit()
    session.refresh(task)
    logger.info("task_created", task_id=task.id, created_by=created_by)
    return task


def update_task(session: Session, task: Task, body: Dict[str, Any]) -> Task:
    """Apply a partial update. Lowering ``max_points`` leaves past awards alone."""

    if "title" in body:
        title = optional_text(body.get("title"), "Title")
        if not title:
            raise ValidationError("Title is required")
        task.title = title
    if "description" in body:
        task.description = optional_text(body.get("description"), "Description")
    if "max_points" in body:
        task.max_points = _validate_max_points(body.get("max_points"))
    if "deadline" in body:
        task.deadline = _parse_deadline(body.get("deadline"))
    if "status" in body:
        status = body.get("status")
        if status not in TASK_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(TASK_STATUSES)}")
        task.status = status

    task.updated_at = utcnow()
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def task_accepts_submissions(task: Task, now: Optional[datetime] = None) -> bool:
    if task.status != TASK_OPEN:
        return False
    if task.deadline is None:
        return True
    return _as_utc(now or utcnow()) <= _as_utc(task.deadline)


def create_submission(
    session: Session,
    *,
    task_id: int,
    user: UserProfile,
    file_url: str,
    file_name: str,
    comment: Optional[str],
) -> Submission:
    """Record a submission and bump the task's counters in one commit."""

    task = session.get(Task, task_id)
    if not task:
        raise NotFoundError("Task not found")

    submission = Submission(
        task_id=task_id,
        user_id=user.id,
        user_email=user.email,
        user_name=user.display_name,
        file_url=file_url,
        file_name=file_name,
        comment=optional_text(comment, "Comment") or None,
    )
    try:
        session.add(submission)
        session.execute(
            update(Task)
            .where(Task.id == task_id)
            .values(
                total_submissions=Task.total_submissions + 1,
                pending_count=Task.pending_count + 1,
            )
            .execution_options(synchronize_session=False)
        )
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("submission_failed", task_id=task_id, user_id=user.id)
        raise
    session.refresh(submission)
    logger.info(
        "submission_created",
        submission_id=submission.id,
        task_id=task_id,
        user_id=user.id,
    )
    return submission


def task_to_dict(task: Task) -> Dict[str, Any]:
    """Serialise a task model to API-friendly dict."""

    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "max_points": task.max_points,
        "deadline": isoformat(task.deadline),
        "created_by": task.created_by,
        "pending_count": task.pending_count,
        "total_submissions": task.total_submissions,
        "created_at": isoformat(task.created_at),
        "updated_at": isoformat(task.updated_at),
    }


def submission_to_dict(submission: Submission) -> Dict[str, Any]:
    return {
        "id": submission.id,
        "task_id": submission.task_id,
        "user_id": submission.user_id,
        "user_email": submission.user_email,
        "user_name": submission.user_name,
        "file_url": submission.file_url,
        "file_name": submission.file_name,
        "comment": submission.comment,
        "points_awarded": submission.points_awarded,
        "reviewed": submission.reviewed,
        "reviewed_by": submission.reviewed_by,
        "reviewed_at": isoformat(submission.reviewed_at),
        "submitted_at": isoformat(submission.submitted_at),
    }


__all__ = [
    "create_submission",
    "create_task",
    "submission_to_dict",
    "task_accepts_submissions",
    "task_to_dict",
    "update_task",
]
