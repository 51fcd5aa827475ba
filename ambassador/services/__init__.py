"""Service layer helpers."""

from .admin_auth import verify_admin_credentials
from .cache import cache
from .counters import CounterSummary, recount_task_counters
from .errors import (
    AmbassadorError,
    AuthenticationError,
    ConcurrentReviewError,
    NotFoundError,
    ValidationError,
)
from .points import AwardResult, award_points, validate_award
from .ranking import (
    RankingSummary,
    competition_ranks,
    leaderboard_snapshot,
    materialize_ranks,
    patch_rank,
)

__all__ = [
    "AmbassadorError",
    "AuthenticationError",
    "AwardResult",
    "ConcurrentReviewError",
    "CounterSummary",
    "NotFoundError",
    "RankingSummary",
    "ValidationError",
    "award_points",
    "cache",
    "competition_ranks",
    "leaderboard_snapshot",
    "materialize_ranks",
    "patch_rank",
    "recount_task_counters",
    "validate_award",
    "verify_admin_credentials",
]
