"""Leaderboard ranking helpers.

``rank`` on a profile is a materialized projection of the point ordering.
It is only ever written by :func:`materialize_ranks`; display-time
corrections from :func:`patch_rank` are never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlmodel import Session, select

from ..core.logging import get_logger
from ..core.time import utcnow
from ..models import UserProfile

logger = get_logger(__name__)


@dataclass(frozen=True)
class RankingSummary:
    users: int
    changed: int


def competition_ranks(points_desc: Sequence[int]) -> List[int]:
    """Rank a descending sequence of point totals.

    Tied totals share a rank and the next distinct total skips past the tied
    block, so ``[50, 50, 30]`` ranks as ``[1, 1, 3]``.
    """

    ranks: List[int] = []
    rank = 1
    previous: Optional[int] = None
    for index, points in enumerate(points_desc):
        if previous is not None and points > previous:
            raise ValueError("points must be sorted in descending order")
        if previous is not None and points < previous:
            rank = index + 1
        ranks.append(rank)
        previous = points
    return ranks


def ranked_users_query():
    """Users ordered by points, ties listed in sign-up order."""

    return select(UserProfile).order_by(
        UserProfile.points.desc(),
        UserProfile.created_at.asc(),
        UserProfile.id.asc(),
    )


def materialize_ranks(session: Session) -> RankingSummary:
    """Recompute and persist ``rank`` for every user.

    Users with zero points are ranked too. Running it again on unchanged
    data writes the same ranks.
    """

    users = session.exec(ranked_users_query()).all()
    ranks = competition_ranks([user.points or 0 for user in users])

    changed = 0
    now = utcnow()
    try:
        for user, rank in zip(users, ranks):
            if user.rank != rank:
                changed += 1
                user.updated_at = now
            user.rank = rank
            session.add(user)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("rank_materialization_failed", users=len(users))
        raise

    summary = RankingSummary(users=len(users), changed=changed)
    logger.info("ranks_materialized", users=summary.users, changed=summary.changed)
    return summary


def patch_rank(
    snapshot: Sequence[Mapping[str, Any]],
    user_id: Optional[str],
    cached_rank: Optional[int],
) -> Optional[int]:
    """Prefer a rank derived from a top-N snapshot over a stale cached rank.

    Only users inside the snapshot can be corrected; everyone else keeps the
    rank from the last materialization.
    """

    if not user_id:
        return cached_rank
    mine = next((entry for entry in snapshot if entry.get("id") == user_id), None)
    if mine is None:
        return cached_rank
    my_points = mine.get("points") or 0
    return sum(1 for entry in snapshot if (entry.get("points") or 0) > my_points) + 1


def leaderboard_snapshot(session: Session, limit: int) -> List[Dict[str, Any]]:
    """Top ``limit`` users with display ranks computed from the snapshot."""

    users = session.exec(ranked_users_query().limit(limit)).all()
    ranks = competition_ranks([user.points or 0 for user in users])
    return [
        {
            "id": user.id,
            "display_name": user.display_name or user.email.split("@")[0],
            "college": user.college,
            "points": user.points or 0,
            "rank": rank,
        }
        for user, rank in zip(users, ranks)
    ]


__all__ = [
    "RankingSummary",
    "competition_ranks",
    "leaderboard_snapshot",
    "materialize_ranks",
    "patch_rank",
    "ranked_users_query",
]
