from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from firebase_admin.exceptions import FirebaseError
import logging

from certadmin.core.config import settings
from certadmin.core.dependencies import get_current_user
from certadmin.core.security import create_session_cookie, verify_firebase_id_token
from certadmin.schemas.user_schema import AuthUser, MeResponse, OkResponse, SessionCreateRequest

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Authentication"])


def clear_session_cookie(response: Response) -> None:
    """Expires the session cookie in the browser."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


@router.post("/auth/session", response_model=OkResponse)
def create_session(
    response: Response,
    payload: SessionCreateRequest = Body(...),
):
    """
    Exchange a Firebase ID token (obtained by the browser after signing in)
    for an httpOnly session cookie.
    """
    if not payload.id_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing idToken.")

    token_data = verify_firebase_id_token(payload.id_token)

    try:
        session_cookie = create_session_cookie(payload.id_token)
    except FirebaseError as e:
        logger.warning(f"Could not create session cookie for {token_data.email}: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not create session.")

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_cookie,
        max_age=settings.SESSION_EXPIRES_SECONDS,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )
    logger.info(f"Session created for {token_data.email}")
    return OkResponse()


@router.delete("/auth/session", response_model=OkResponse)
def delete_session(response: Response):
    """Clears the session cookie. Same as POST /logout."""
    clear_session_cookie(response)
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
def logout(response: Response):
    """
    Logs the user out by clearing the `session` cookie.
    Always succeeds, with or without an active session.
    """
    clear_session_cookie(response)
    logger.info("Session cookie cleared on logout.")
    return OkResponse()


@router.get("/auth/me", response_model=MeResponse)
def read_current_user(current_user: AuthUser = Depends(get_current_user)):
    """Email and role of the signed-in staff member."""
    return MeResponse(email=current_user.email, role=current_user.role)
