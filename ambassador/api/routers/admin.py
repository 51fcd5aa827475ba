"""Admin session, task management and review endpoints."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session, select

from ...core import get_session
from ...models import Submission, Task
from ...services.admin_auth import verify_admin_credentials
from ...services.cache import LEADERBOARD_KEY, TASKS_KEY, cache
from ...services.counters import recount_task_counters
from ...services.points import award_points
from ...services.ranking import materialize_ranks
from ...services.tasks import create_task, submission_to_dict, task_to_dict, update_task
from ..deps import require_admin

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login")
def admin_login(body: Dict[str, Any], request: Request):
    admin = verify_admin_credentials(
        body.get("username") or "", body.get("password") or ""
    )
    request.session["admin"] = admin
    return {"admin": admin}


@router.post("/logout")
def admin_logout(request: Request):
    request.session.pop("admin", None)
    return JSONResponse({"ok": True})


@router.get("/me")
def admin_me(admin: Dict[str, str] = Depends(require_admin)):
    return {"admin": admin}


@router.get("/tasks")
def admin_list_tasks(
    admin: Dict[str, str] = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Tasks with review counters, read straight from the database."""

    tasks = session.exec(select(Task).order_by(Task.created_at.desc(), Task.id.desc())).all()
    return {
        "tasks": [task_to_dict(task) for task in tasks],
        "pending_total": sum(task.pending_count for task in tasks),
    }


@router.post("/tasks")
def admin_create_task(
    body: Dict[str, Any],
    admin: Dict[str, str] = Depends(require_admin),
    session: Session = Depends(get_session),
):
    task = create_task(session, body, created_by=admin["username"])
    cache.invalidate(TASKS_KEY)
    return task_to_dict(task)


@router.patch("/tasks/{task_id}")
def admin_update_task(
    task_id: int,
    body: Dict[str, Any],
    admin: Dict[str, str] = Depends(require_admin),
    session: Session = Depends(get_session),
):
    task = session.get(Task, task_id)
    if not task:
        raise HTTPException(404, "Task not found")
    task = update_task(session, task, body)
    cache.invalidate(TASKS_KEY)
    return task_to_dict(task)


@router.get("/tasks/{task_id}/submissions")
def admin_task_submissions(
    task_id: int,
    filter: Literal["all", "pending", "reviewed"] = "all",
    admin: Dict[str, str] = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """List a task's submissions, optionally only pending or reviewed ones."""

    task = session.get(Task, task_id)
    if not task:
        raise HTTPException(404, "Task not found")

    query = select(Submission).where(Submission.task_id == task_id)
    if filter == "pending":
        query = query.where(Submission.reviewed == False)  # noqa: E712
    elif filter == "reviewed":
        query = query.where(Submission.reviewed == True)  # noqa: E712
    submissions = session.exec(
        query.order_by(Submission.submitted_at.asc(), Submission.id.asc())
    ).all()

    return {
        "task": task_to_dict(task),
        "submissions": [submission_to_dict(item) for item in submissions],
    }


@router.post("/submissions/{submission_id}/award")
def admin_award_points(
    submission_id: int,
    body: Dict[str, Any],
    admin: Dict[str, str] = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Review a submission and adjust its owner's point total."""

    user_id = body.get("user_id")
    if not user_id:
        raise HTTPException(400, "user_id is required")
    if "points" not in body:
        raise HTTPException(400, "points is required")

    result = award_points(
        session,
        submission_id=submission_id,
        user_id=str(user_id),
        points=body.get("points"),
        reviewer=admin["username"],
    )
    cache.invalidate(LEADERBOARD_KEY)
    cache.invalidate(TASKS_KEY)

    submission = session.get(Submission, submission_id)
    return {
        "ok": True,
        "award": asdict(result),
        "submission": submission_to_dict(submission) if submission else None,
    }


@router.post("/maintenance/ranks")
def admin_materialize_ranks(
    admin: Dict[str, str] = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Recompute every user's leaderboard rank."""

    summary = materialize_ranks(session)
    cache.invalidate(LEADERBOARD_KEY)
    return {"ok": True, **asdict(summary)}


@router.post("/maintenance/task-counters")
def admin_recount_tasks(
    admin: Dict[str, str] = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Rebuild pending/total submission counters for every task."""

    summary = recount_task_counters(session)
    cache.invalidate(TASKS_KEY)
    return {"ok": True, **asdict(summary)}


__all__ = ["router"]
