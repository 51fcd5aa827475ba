"""Request dependencies shared by the routers."""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from ..core import get_session
from ..models import UserProfile


def optional_user(
    request: Request, session: Session = Depends(get_session)
) -> Optional[UserProfile]:
    """Return the signed-in user, clearing sessions that point nowhere."""

    uid = request.session.get("uid")
    if not uid:
        return None
    user = session.get(UserProfile, str(uid))
    if not user:
        request.session.pop("uid", None)
        return None
    return user


def current_user(user: Optional[UserProfile] = Depends(optional_user)) -> UserProfile:
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def optional_admin(request: Request) -> Optional[Dict[str, str]]:
    admin = request.session.get("admin")
    if not admin or not admin.get("username"):
        return None
    return admin


def require_admin(
    admin: Optional[Dict[str, str]] = Depends(optional_admin),
) -> Dict[str, str]:
    if not admin:
        raise HTTPException(status_code=401, detail="Admin login required")
    return admin


__all__ = ["current_user", "optional_admin", "optional_user", "require_admin"]
