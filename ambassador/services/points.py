"""Point award operation.

Reviewing a submission touches two rows: the submission (awarded value and
reviewer metadata) and the owner's profile (running point total). Both
writes happen inside one transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import update
from sqlmodel import Session, select

from ..core.logging import get_logger
from ..core.time import utcnow
from ..models import Submission, Task, UserProfile
from .errors import (
    AmbassadorError,
    ConcurrentReviewError,
    NotFoundError,
    ValidationError,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class AwardResult:
    """Outcome of a single point award."""

    submission_id: int
    user_id: str
    previous: int
    awarded: int
    delta: int
    user_points: int
    first_review: bool


def validate_award(points: object, max_points: int) -> int:
    """Return ``points`` as an int within ``[0, max_points]`` or raise."""

    if isinstance(points, bool) or not isinstance(points, int):
        raise ValidationError("Points must be a whole number")
    if points < 0 or points > max_points:
        raise ValidationError(f"Points must be between 0 and {max_points}")
    return points


def award_points(
    session: Session,
    submission_id: int,
    user_id: str,
    points: int,
    reviewer: str,
) -> AwardResult:
    """Award ``points`` to a submission and adjust the owner's total.

    The total is adjusted by ``points - previous`` with an in-database
    increment, so awards on different submissions for the same user compose.
    The submission update is conditional on the awarded value read at the
    start of the transaction; if another reviewer changed it in between,
    nothing is written and :class:`ConcurrentReviewError` is raised.

    Re-awarding the same value is a no-op for the total but still rewrites
    ``reviewed_by`` and ``reviewed_at``.
    """

    log = logger.bind(submission_id=submission_id, user_id=user_id, reviewer=reviewer)

    try:
        submission = session.exec(
            select(Submission).where(Submission.id == submission_id).with_for_update()
        ).first()
        if not submission:
            raise NotFoundError("Submission not found")
        if submission.user_id != user_id:
            raise ValidationError("Submission does not belong to this user")

        task = session.get(Task, submission.task_id)
        if not task:
            raise NotFoundError("Task not found")
        requested = validate_award(points, task.max_points)

        if not session.get(UserProfile, user_id):
            raise NotFoundError("User not found")

        previous_raw: Optional[int] = submission.points_awarded
        previous = previous_raw or 0
        first_review = not submission.reviewed
        delta = requested - previous
        now = utcnow()

        if previous_raw is None:
            awarded_unchanged = Submission.points_awarded.is_(None)
        else:
            awarded_unchanged = Submission.points_awarded == previous_raw

        marked = session.execute(
            update(Submission)
            .where(
                Submission.id == submission_id,
                awarded_unchanged,
                Submission.reviewed == submission.reviewed,
            )
            .values(
                points_awarded=requested,
                reviewed=True,
                reviewed_by=reviewer,
                reviewed_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if marked.rowcount != 1:
            raise ConcurrentReviewError(
                "Submission was reviewed by someone else; reload and try again"
            )

        session.execute(
            update(UserProfile)
            .where(UserProfile.id == user_id)
            .values(points=UserProfile.points + delta, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        if first_review:
            session.execute(
                update(Task)
                .where(Task.id == task.id, Task.pending_count > 0)
                .values(pending_count=Task.pending_count - 1)
                .execution_options(synchronize_session=False)
            )

        session.commit()
    except AmbassadorError as exc:
        session.rollback()
        log.warning("award_points_rejected", requested=points, reason=exc.message)
        raise
    except Exception:
        session.rollback()
        log.exception("award_points_failed", requested=points)
        raise

    session.expire_all()
    user = session.get(UserProfile, user_id)
    result = AwardResult(
        submission_id=submission_id,
        user_id=user_id,
        previous=previous,
        awarded=requested,
        delta=delta,
        user_points=user.points if user else 0,
        first_review=first_review,
    )
    log.info(
        "points_awarded",
        previous=previous,
        awarded=requested,
        delta=delta,
        user_points=result.user_points,
    )
    return result


__all__ = ["AwardResult", "award_points", "validate_award"]
