"""Helpers for ambassador accounts and profiles."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from sqlmodel import Session, func, select

from ..core.logging import get_logger
from ..core.time import isoformat, utcnow
from ..models import UserProfile
from .errors import AuthenticationError, ValidationError
from .passwords import hash_password, verify_password
from .validation import optional_text

logger = get_logger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^\d{10}$")
PHONE_PREFIX = "+91"
MIN_PASSWORD_LENGTH = 6


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def get_user_by_email(session: Session, email: str) -> Optional[UserProfile]:
    normalized = normalize_email(email)
    return session.exec(
        select(UserProfile).where(func.lower(UserProfile.email) == normalized)
    ).first()


def create_password_user(
    session: Session, *, email: str, password: str, display_name: Optional[str]
) -> UserProfile:
    """Register an email/password account with zero points."""

    normalized = optional_text(email, "Email").lower()
    if not _EMAIL_RE.match(normalized):
        raise ValidationError("A valid email address is required")
    if password is not None and not isinstance(password, str):
        raise ValidationError("Password must be a string")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    name = optional_text(display_name, "Display name")
    if get_user_by_email(session, normalized):
        raise ValidationError("An account with this email already exists")

    user = UserProfile(
        email=normalized,
        display_name=name or None,
        provider="password",
        password_hash=hash_password(password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("user_registered", user_id=user.id, provider="password")
    return user


def authenticate_password_user(
    session: Session, *, email: str, password: str
) -> UserProfile:
    normalized = optional_text(
        email, "Email", AuthenticationError, "Invalid email or password"
    ).lower()
    user = get_user_by_email(session, normalized)
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password")
    return user


def upsert_google_user(
    session: Session,
    *,
    email: str,
    sub: str,
    name: Optional[str],
) -> UserProfile:
    """Find or create the profile for a Google sign-in."""

    normalized_email = normalize_email(email)
    user = get_user_by_email(session, normalized_email)
    if user:
        changed = False
        if not user.provider_sub:
            user.provider_sub = sub
            changed = True
        if name and not user.display_name:
            user.display_name = name
            changed = True
        if changed:
            user.updated_at = utcnow()
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    user = UserProfile(
        email=normalized_email,
        display_name=name,
        provider="google",
        provider_sub=sub,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("user_registered", user_id=user.id, provider="google")
    return user


def normalize_phone(raw: str | None) -> str:
    """Accept exactly ten digits and return the stored ``+91`` form."""

    digits = raw.strip() if isinstance(raw, str) else ""
    if not _PHONE_RE.match(digits):
        raise ValidationError("Please enter a valid 10-digit phone number")
    return f"{PHONE_PREFIX}{digits}"


def complete_profile(
    session: Session,
    user: UserProfile,
    *,
    phone_number: str | None,
    college: str | None,
    graduation_year: Any,
    display_name: str | None = None,
) -> UserProfile:
    phone = normalize_phone(phone_number)
    college_name = optional_text(college, "College")
    if not college_name:
        raise ValidationError("College is required")
    name = optional_text(display_name, "Display name")
    try:
        year = int(graduation_year)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Graduation year must be a number") from exc
    current_year = utcnow().year
    if year < current_year - 10 or year > current_year + 10:
        raise ValidationError("Graduation year is out of range")

    user.phone_number = phone
    user.college = college_name
    user.graduation_year = year
    if name:
        user.display_name = name
    user.profile_completed = True
    user.updated_at = utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def user_to_dict(user: UserProfile) -> Dict[str, Any]:
    """Serialise a profile for API responses."""

    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name or user.email.split("@")[0],
        "phone_number": user.phone_number,
        "college": user.college,
        "graduation_year": user.graduation_year,
        "profile_completed": user.profile_completed,
        "role": user.role,
        "points": user.points or 0,
        "rank": user.rank,
        "provider": user.provider,
        "created_at": isoformat(user.created_at),
    }


__all__ = [
    "authenticate_password_user",
    "complete_profile",
    "create_password_user",
    "get_user_by_email",
    "normalize_email",
    "normalize_phone",
    "upsert_google_user",
    "user_to_dict",
]
