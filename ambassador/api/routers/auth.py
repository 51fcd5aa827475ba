"""Sign-in, sign-up and current-user routes."""

from __future__ import annotations

from typing import Any, Dict, List

from authlib.integrations.starlette_client import OAuth
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlmodel import Session, select

from ...core import (
    FRONTEND_ORIGIN,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    OAUTH_REDIRECT_URL,
    get_logger,
    get_session,
)
from ...models import Submission, UserProfile
from ...services.cache import LEADERBOARD_KEY, cache
from ...services.tasks import submission_to_dict
from ...services.users import (
    authenticate_password_user,
    complete_profile,
    create_password_user,
    upsert_google_user,
    user_to_dict,
)
from ..deps import current_user, optional_user

router = APIRouter(tags=["auth"])
logger = get_logger(__name__)

oauth = OAuth()

if GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET:
    oauth.register(
        name="google",
        client_id=GOOGLE_CLIENT_ID,
        client_secret=GOOGLE_CLIENT_SECRET,
        server_metadata_url="https://accounts.google.com/.well-known/openid-configuration",
        client_kwargs={"scope": "openid email profile"},
    )


def _require_google() -> None:
    if not GOOGLE_CLIENT_ID or not GOOGLE_CLIENT_SECRET:
        raise HTTPException(
            status_code=500,
            detail="Google OAuth not configured. Check GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET.",
        )


def _sign_in(request: Request, user: UserProfile) -> None:
    request.session["uid"] = user.id
    request.session["email"] = user.email


@router.post("/auth/signup")
def signup(body: Dict[str, Any], request: Request, session: Session = Depends(get_session)):
    """Register with email and password and start a session."""

    user = create_password_user(
        session,
        email=body.get("email") or "",
        password=body.get("password") or "",
        display_name=body.get("display_name"),
    )
    _sign_in(request, user)
    cache.invalidate(LEADERBOARD_KEY)
    return {"user": user_to_dict(user)}


@router.post("/auth/login")
def login(body: Dict[str, Any], request: Request, session: Session = Depends(get_session)):
    user = authenticate_password_user(
        session,
        email=body.get("email") or "",
        password=body.get("password") or "",
    )
    _sign_in(request, user)
    logger.info("user_login", user_id=user.id)
    return {"user": user_to_dict(user)}


@router.get("/auth/google/start")
async def auth_google_start(request: Request, next: str | None = None):
    _require_google()
    if next:
        request.session["next"] = next
    try:
        return await oauth.google.authorize_redirect(request, OAUTH_REDIRECT_URL)
    except Exception as exc:  # pragma: no cover - defensive
        raise HTTPException(status_code=500, detail=f"OAuth error: {exc}") from exc


@router.get("/auth/google/callback")
async def auth_google_callback(
    request: Request, session: Session = Depends(get_session)
):
    _require_google()
    token = await oauth.google.authorize_access_token(request)
    userinfo = token.get("userinfo") or await oauth.google.parse_id_token(request, token)
    email = userinfo.get("email")
    sub = userinfo.get("sub")
    name = userinfo.get("name") or (email.split("@")[0] if email else None)
    if not email or not sub:
        raise HTTPException(status_code=400, detail="Unable to read Google profile.")

    user = upsert_google_user(session, email=email, sub=sub, name=name)
    cache.invalidate(LEADERBOARD_KEY)
    _sign_in(request, user)

    if user.profile_completed:
        default_next = FRONTEND_ORIGIN
    else:
        default_next = f"{FRONTEND_ORIGIN}/complete-profile"
    next_url = request.session.pop("next", None) or default_next
    if not str(next_url).startswith(FRONTEND_ORIGIN):
        next_url = FRONTEND_ORIGIN
    return RedirectResponse(next_url, status_code=302)


@router.post("/auth/logout")
def auth_logout(request: Request):
    request.session.pop("uid", None)
    request.session.pop("email", None)
    return JSONResponse({"ok": True})


@router.get("/me")
def me(user: UserProfile | None = Depends(optional_user)):
    if not user:
        return JSONResponse({"user": None})
    return {"user": user_to_dict(user)}


@router.post("/me/profile")
def complete_my_profile(
    body: Dict[str, Any],
    user: UserProfile = Depends(current_user),
    session: Session = Depends(get_session),
):
    """Fill in the contact details required after first sign-in."""

    user = complete_profile(
        session,
        user,
        phone_number=body.get("phone_number"),
        college=body.get("college"),
        graduation_year=body.get("graduation_year"),
        display_name=body.get("display_name"),
    )
    cache.invalidate(LEADERBOARD_KEY)
    return {"user": user_to_dict(user)}


@router.get("/me/submissions")
def my_submissions(
    user: UserProfile = Depends(current_user),
    session: Session = Depends(get_session),
) -> Dict[str, List[Dict[str, Any]]]:
    submissions = session.exec(
        select(Submission)
        .where(Submission.user_id == user.id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
    ).all()
    return {"submissions": [submission_to_dict(item) for item in submissions]}


__all__ = ["router"]
