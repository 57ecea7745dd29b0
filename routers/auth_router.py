import logging
import urllib.parse

import requests
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from core.auth import get_bearer_token, get_current_user
from core.config import settings
from core.database import get_db
from core.errors import StoreUnavailable
from crud.profile_crud import get_profile
from crud.session_crud import delete_session_by_token, issue_session, purge_expired_sessions
from crud.user_crud import upsert_user
from crud.verification_crud import consume_oauth_state, issue_oauth_state
from schemas.auth_schema import AuthTokenResponse, GoogleLoginRequest, LoginUrlResponse
from schemas.user_schema import MeResponse, UserCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"
PROVIDER_TIMEOUT = 10


def _provider_call(method, url, **kwargs):
    try:
        return method(url, timeout=PROVIDER_TIMEOUT, **kwargs)
    except (requests.Timeout, requests.ConnectionError) as exc:
        logger.error("Identity provider call to %s failed: %s", url, exc)
        raise StoreUnavailable("Identity provider unavailable; retry later") from exc


def _me(db: Session, user) -> MeResponse:
    profile = get_profile(db, user.id)
    me = MeResponse.model_validate(user)
    me.role = profile.role if profile else None
    return me


def _start_session(db: Session, request: Request, info: dict):
    email = info.get("email")
    if not email:
        raise HTTPException(status_code=400, detail="Token missing email")

    user = upsert_user(
        db,
        UserCreate(email=email, name=info.get("name"), image=info.get("picture")),
        email_verified=str(info.get("email_verified", "")).lower() == "true",
    )
    purge_expired_sessions(db, user.id)
    session = issue_session(
        db,
        user_id=user.id,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    logger.info("Session issued for user %s", user.id)
    return user, session


@router.post("/login/google", response_model=AuthTokenResponse)
def google_login(body: GoogleLoginRequest, request: Request, db: Session = Depends(get_db)):
    """
    Verify Google ID token, upsert user, and issue a bearer token.
    """
    response = _provider_call(requests.get, GOOGLE_TOKENINFO_URL, params={"id_token": body.token})
    if response.status_code != 200:
        raise HTTPException(status_code=400, detail="Invalid token")

    payload = response.json()
    if payload.get("aud") and payload.get("aud") != settings.GOOGLE_CLIENT_ID:
        raise HTTPException(status_code=400, detail="Token issued for another client")

    user, session = _start_session(db, request, payload)
    return AuthTokenResponse(access_token=session.token, expires_at=session.expires_at, user=_me(db, user))


@router.get("/me", response_model=MeResponse)
def get_me(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    return _me(db, current_user)


@router.post("/logout", status_code=204)
def logout(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    if not delete_session_by_token(db, token):
        raise HTTPException(status_code=401, detail="Invalid token")
    return None


@router.get("/google/login", response_model=LoginUrlResponse)
def google_login_url(request: Request, db: Session = Depends(get_db)):
    """
    Create a state token and return the Google OAuth consent URL.
    """
    state = issue_oauth_state(db)

    # Build redirect_uri dynamically from the current request host/port
    redirect_uri = str(request.url_for("google_callback"))
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": "openid email profile",
        "access_type": "offline",
        "include_granted_scopes": "true",
        "state": state,
        "prompt": "consent",
    }
    return LoginUrlResponse(url=GOOGLE_AUTH_URL + "?" + urllib.parse.urlencode(params))


@router.get("/google/callback")
def google_callback(code: str, state: str, request: Request, db: Session = Depends(get_db)):
    """
    Handle Google OAuth callback, exchange code for tokens, upsert user, create session,
    and redirect to FRONTEND_URL with the session token.
    """
    if not consume_oauth_state(db, state):
        raise HTTPException(status_code=400, detail="Invalid state")

    # Must match the redirect_uri used in the initial authorization request
    redirect_uri = str(request.url_for("google_callback"))
    token_resp = _provider_call(
        requests.post,
        GOOGLE_TOKEN_URL,
        data={
            "client_id": settings.GOOGLE_CLIENT_ID,
            "client_secret": settings.GOOGLE_CLIENT_SECRET,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    if token_resp.status_code != 200:
        raise HTTPException(status_code=400, detail="Token exchange failed")

    access_token = token_resp.json().get("access_token")
    if not access_token:
        raise HTTPException(status_code=400, detail="No access token returned")

    userinfo = _provider_call(
        requests.get,
        GOOGLE_USERINFO_URL,
        headers={"Authorization": f"Bearer {access_token}"},
    )
    if userinfo.status_code != 200:
        raise HTTPException(status_code=400, detail="Failed to fetch userinfo")

    user, session = _start_session(db, request, userinfo.json())

    # New users land on role selection, returning users on their dashboard
    fe = settings.FRONTEND_URL.rstrip('/')
    next_step = "dashboard" if get_profile(db, user.id) else "onboarding"
    query = urllib.parse.urlencode({"token": session.token, "next": next_step})
    return RedirectResponse(url=f"{fe}/auth/callback?{query}", status_code=302)
