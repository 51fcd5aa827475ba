"""Task submission counters."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from sqlmodel import Session, select

from ..core.logging import get_logger
from ..core.time import utcnow
from ..models import Submission, Task

logger = get_logger(__name__)


@dataclass(frozen=True)
class CounterSummary:
    tasks: int
    submissions: int


def recount_task_counters(session: Session) -> CounterSummary:
    """Rebuild ``pending_count`` and ``total_submissions`` for every task."""

    tasks = session.exec(select(Task)).all()
    submissions = session.exec(select(Submission)).all()

    totals: Counter[int] = Counter()
    pending: Counter[int] = Counter()
    for submission in submissions:
        totals[submission.task_id] += 1
        if not submission.reviewed:
            pending[submission.task_id] += 1

    now = utcnow()
    try:
        for task in tasks:
            task.total_submissions = totals[task.id]
            task.pending_count = pending[task.id]
            task.updated_at = now
            session.add(task)
            logger.debug(
                "task_counters",
                task_id=task.id,
                pending=task.pending_count,
                total=task.total_submissions,
            )
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("task_recount_failed")
        raise

    summary = CounterSummary(tasks=len(tasks), submissions=len(submissions))
    logger.info("task_counters_rebuilt", tasks=summary.tasks, submissions=summary.submissions)
    return summary


__all__ = ["CounterSummary", "recount_task_counters"]
