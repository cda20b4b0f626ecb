from fastapi import Depends, HTTPException, status, Request
from typing import Optional
import logging

from certadmin.core.config import settings
from certadmin.core.database import get_db
from certadmin.core.security import verify_session_cookie, has_role
from certadmin.crud.admin_user_crud import get_admin_role
from certadmin.crud.certificate_crud import get_certificate
from certadmin.crud.course_crud import get_course
from certadmin.models.certificate_model import Certificate
from certadmin.models.course_model import Course
from certadmin.models.enums import UserRole
from certadmin.schemas.user_schema import AuthUser

logger = logging.getLogger(__name__)


def resolve_role(db, email: str) -> UserRole:
    """Role from `adminUsers`; otherwise MASTER_ADMIN for configured master emails; otherwise VIEWER."""
    role = get_admin_role(db, email)
    if role is not None:
        return role
    if email.lower() in settings.MASTER_ADMIN_EMAILS:
        logger.info(f"User {email} granted MASTER_ADMIN through MASTER_ADMIN_EMAILS.")
        return UserRole.MASTER_ADMIN
    return UserRole.VIEWER


# Dependency to get the current user from the session cookie, or None
def get_optional_user(request: Request, db=Depends(get_db)) -> Optional[AuthUser]:
    session_cookie = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not session_cookie:
        logger.debug("No session cookie present.")
        return None

    token_data = verify_session_cookie(session_cookie)
    if token_data is None:
        return None

    role = resolve_role(db, token_data.email)
    return AuthUser(uid=token_data.firebase_uid, email=token_data.email, role=role)


def get_current_user(user: Optional[AuthUser] = Depends(get_optional_user)) -> AuthUser:
    """
    Dependency to get the current authenticated user.
    Raises 401 when there is no valid session.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated.",
        )
    return user


def require_role(required_role: UserRole):
    """Builds a dependency that lets through users at `required_role` or above."""
    def _check_role(current_user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if not has_role(current_user.role, required_role):
            logger.warning(f"Access denied for user: {current_user.email} (Role: {current_user.role}, required: {required_role.value})")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Operation not permitted: Requires {required_role.value} privileges.",
            )
        return current_user
    return _check_role


require_viewer = require_role(UserRole.VIEWER)
require_editor = require_role(UserRole.EDITOR)
require_admin = require_role(UserRole.ADMIN)
require_master_admin = require_role(UserRole.MASTER_ADMIN)


# --- Resource Specific Fetching ---

def get_certificate_or_404(certificate_id: str, db=Depends(get_db)) -> Certificate:
    certificate = get_certificate(db, certificate_id)
    if not certificate:
        logger.warning(f"Certificate with ID {certificate_id} not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Certificate with ID {certificate_id} not found.")
    return certificate

def get_course_or_404(course_id: str, db=Depends(get_db)) -> Course:
    course = get_course(db, course_id)
    if not course:
        logger.warning(f"Course with ID {course_id} not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Course with ID {course_id} not found.")
    return course
