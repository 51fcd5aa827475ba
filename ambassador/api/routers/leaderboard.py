"""Leaderboard endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ...core import LEADERBOARD_CACHE_TTL, LEADERBOARD_SIZE, get_session
from ...models import UserProfile
from ...services.cache import LEADERBOARD_KEY, cache
from ...services.ranking import leaderboard_snapshot, patch_rank
from ..deps import optional_user

router = APIRouter(tags=["leaderboard"])


@router.get("/leaderboard")
def get_leaderboard(
    user: Optional[UserProfile] = Depends(optional_user),
    session: Session = Depends(get_session),
):
    """Top users plus the caller's best-known rank.

    The caller's stored rank comes from the last materialization; when they
    appear in the snapshot it is replaced by the snapshot-derived rank.
    """

    entries = cache.get(LEADERBOARD_KEY)
    cached = entries is not None
    if entries is None:
        entries = leaderboard_snapshot(session, LEADERBOARD_SIZE)
        cache.set(LEADERBOARD_KEY, entries, LEADERBOARD_CACHE_TTL)

    me = None
    if user:
        me = {
            "id": user.id,
            "points": user.points or 0,
            "rank": patch_rank(entries, user.id, user.rank),
            "stored_rank": user.rank,
        }

    return {"entries": entries, "me": me, "cached": cached}


__all__ = ["router"]
