"""Task listing and submission upload endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import FileResponse
from sqlmodel import Session, select

from ...core import MAX_UPLOAD_BYTES, TASKS_CACHE_TTL, get_session
from ...models import Submission, Task, UserProfile
from ...services.cache import TASKS_KEY, cache
from ...services.storage import (
    delete_file,
    resolve_upload,
    submission_owner,
    submission_path,
    upload_file,
)
from ...services.tasks import (
    create_submission,
    submission_to_dict,
    task_accepts_submissions,
    task_to_dict,
)
from ..deps import current_user, optional_admin, optional_user

router = APIRouter(tags=["tasks"])


@router.get("/tasks")
def list_tasks(session: Session = Depends(get_session)) -> List[Dict[str, Any]]:
    """List all tasks, newest first."""

    cached = cache.get(TASKS_KEY)
    if cached is not None:
        return cached

    tasks = session.exec(select(Task).order_by(Task.created_at.desc(), Task.id.desc())).all()
    payload = [task_to_dict(task) for task in tasks]
    cache.set(TASKS_KEY, payload, TASKS_CACHE_TTL)
    return payload


@router.get("/tasks/{task_id}")
def get_task(
    task_id: int,
    user: UserProfile = Depends(current_user),
    session: Session = Depends(get_session),
):
    """Get a task together with the caller's submissions for it."""

    task = session.get(Task, task_id)
    if not task:
        raise HTTPException(404, "Task not found")

    mine = session.exec(
        select(Submission)
        .where(Submission.task_id == task_id, Submission.user_id == user.id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
    ).all()
    return {
        **task_to_dict(task),
        "accepting_submissions": task_accepts_submissions(task),
        "my_submissions": [submission_to_dict(item) for item in mine],
    }


@router.post("/tasks/{task_id}/submissions")
async def submit_task(
    task_id: int,
    file: UploadFile = File(...),
    comment: Optional[str] = Form(None),
    user: UserProfile = Depends(current_user),
    session: Session = Depends(get_session),
):
    """Upload a file for a task."""

    task = session.get(Task, task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    if not task_accepts_submissions(task):
        raise HTTPException(400, "Task is not accepting submissions")

    data = await file.read()
    if not data:
        raise HTTPException(400, "File is empty")
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(400, "File too large")

    file_name = file.filename or "upload"
    path = submission_path(user.id, task_id, file_name)
    file_url = upload_file(data, path)

    try:
        submission = create_submission(
            session,
            task_id=task_id,
            user=user,
            file_url=file_url,
            file_name=file_name,
            comment=comment,
        )
    except Exception:
        delete_file(path)
        raise
    cache.invalidate(TASKS_KEY)
    return {"ok": True, "submission": submission_to_dict(submission)}


@router.get("/uploads/{path:path}")
def serve_upload(
    path: str,
    user: Optional[UserProfile] = Depends(optional_user),
    admin: Optional[Dict[str, str]] = Depends(optional_admin),
):
    """Serve an uploaded file to its uploader or to an admin."""

    if not admin:
        if not user:
            raise HTTPException(401, "Not authenticated")
        if submission_owner(path) != user.id:
            raise HTTPException(403, "Not allowed to view this file")
    return FileResponse(resolve_upload(path))


__all__ = ["router"]
