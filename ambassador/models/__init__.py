"""Database model exports."""

from .submission import Submission
from .task import TASK_CLOSED, TASK_OPEN, TASK_STATUSES, Task
from .user import UserProfile

__all__ = [
    "Submission",
    "TASK_CLOSED",
    "TASK_OPEN",
    "TASK_STATUSES",
    "Task",
    "UserProfile",
]
