import logging
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, status
from firebase_admin import auth
from firebase_admin.auth import (
    InvalidIdTokenError, ExpiredIdTokenError, RevokedIdTokenError,
    InvalidSessionCookieError, RevokedSessionCookieError, UserDisabledError,
)
from firebase_admin.exceptions import FirebaseError

from certadmin.core.config import settings
from certadmin.core.firebase_config import get_firebase_app # Ensure Firebase app is initialized
from certadmin.models.enums import ROLE_HIERARCHY, UserRole
from certadmin.schemas.user_schema import TokenData

logger = logging.getLogger(__name__)

def verify_firebase_id_token(id_token: str) -> TokenData:
    """
    Verifies a Firebase ID token and extracts user information.

    Raises:
        HTTPException:
            - 401 UNAUTHORIZED if the token is invalid, expired, revoked or lacks uid/email claims.
            - 500 INTERNAL_SERVER_ERROR for other Firebase Admin SDK errors.
    """
    try:
        get_firebase_app()

        decoded_token = auth.verify_id_token(id_token)

        firebase_uid = decoded_token.get("uid")
        email = decoded_token.get("email")

        if not firebase_uid or not email:
            logger.warning("Firebase ID token is missing 'uid' or 'email' claims.")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid authentication credentials: Missing essential token claims.",
            )

        logger.info(f"Firebase ID token verified successfully for UID: {firebase_uid}, Email: {email}")
        return TokenData(firebase_uid=firebase_uid, email=email)

    except (InvalidIdTokenError, ExpiredIdTokenError, RevokedIdTokenError) as e:
        logger.warning(f"Firebase ID token verification failed: {e}")
        detail_message = "Invalid or expired authentication token."
        if isinstance(e, ExpiredIdTokenError):
            detail_message = "Authentication token has expired. Please log in again."
        elif isinstance(e, RevokedIdTokenError):
            detail_message = "Authentication token has been revoked. Please log in again."

        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail_message,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"An unexpected error occurred during Firebase ID token verification: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not verify authentication token due to a server error.",
        )


def create_session_cookie(id_token: str) -> str:
    """Exchanges a verified ID token for a Firebase session cookie."""
    get_firebase_app()
    return auth.create_session_cookie(id_token, expires_in=timedelta(seconds=settings.SESSION_EXPIRES_SECONDS))


def verify_session_cookie(session_cookie: str) -> Optional[TokenData]:
    """
    Verifies a Firebase session cookie (checking revocation).
    Returns None instead of raising when the cookie is not usable: an absent session
    is a redirect condition for pages, not an error.
    """
    try:
        get_firebase_app()
        decoded = auth.verify_session_cookie(session_cookie, check_revoked=True)
    except (InvalidSessionCookieError, RevokedSessionCookieError, UserDisabledError) as e:
        logger.warning(f"Session cookie rejected: {e}")
        return None
    except FirebaseError as e:
        logger.error(f"Firebase error while verifying session cookie: {e}", exc_info=True)
        return None

    if not decoded.get("email"):
        logger.warning("Session cookie has no email claim.")
        return None

    return TokenData(firebase_uid=decoded["uid"], email=decoded["email"])


def has_role(user_role: UserRole, required_role: UserRole) -> bool:
    """True when `user_role` is `required_role` or above it in the hierarchy."""
    return ROLE_HIERARCHY[UserRole(user_role)] >= ROLE_HIERARCHY[UserRole(required_role)]
