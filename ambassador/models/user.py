"""Database model for ambassador profiles."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


def _new_uid() -> str:
    return uuid.uuid4().hex


class UserProfile(SQLModel, table=True):
    """Ambassador account with point total and materialized rank."""

    __tablename__ = "user_profile"

    id: str = ORMField(default_factory=_new_uid, primary_key=True, nullable=False)
    email: str = ORMField(index=True, unique=True)
    display_name: Optional[str] = None
    phone_number: Optional[str] = None
    college: Optional[str] = None
    graduation_year: Optional[int] = None
    profile_completed: bool = False
    role: str = ORMField(default="user")
    points: int = ORMField(default=0, index=True)
    # Only as fresh as the last rank materialization run.
    rank: Optional[int] = None
    provider: str = ORMField(default="password")
    provider_sub: Optional[str] = ORMField(default=None, index=True)
    password_hash: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["UserProfile"]
