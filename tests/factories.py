"""Row factories for tests."""

from __future__ import annotations

import itertools
from datetime import timedelta
from typing import Any

from sqlmodel import Session

from ambassador.core.time import utcnow
from ambassador.models import Submission, Task, UserProfile

_counter = itertools.count(1)
_EPOCH = utcnow()


def make_user(session: Session, points: int = 0, **overrides: Any) -> UserProfile:
    n = next(_counter)
    data = {
        "email": f"user{n}@example.edu",
        "display_name": f"User {n}",
        "points": points,
        # Strictly increasing sign-up times keep tie order deterministic.
        "created_at": _EPOCH + timedelta(seconds=n),
    }
    data.update(overrides)
    user = UserProfile(**data)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def make_task(session: Session, max_points: int = 10, **overrides: Any) -> Task:
    n = next(_counter)
    data = {"title": f"Task {n}", "description": "Share the event poster", "max_points": max_points}
    data.update(overrides)
    task = Task(**data)
    session.add(task)
    session.commit()
    session.refresh(task)
    return task


def make_submission(
    session: Session, task: Task, user: UserProfile, **overrides: Any
) -> Submission:
    data = {
        "task_id": task.id,
        "user_id": user.id,
        "user_email": user.email,
        "user_name": user.display_name,
        "file_url": f"/uploads/submissions/{user.id}/{task.id}/proof.png",
        "file_name": "proof.png",
    }
    data.update(overrides)
    submission = Submission(**data)
    session.add(submission)
    task.pending_count += 1
    task.total_submissions += 1
    session.add(task)
    session.commit()
    session.refresh(submission)
    return submission
