from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List, Optional
import logging

from certadmin.core.config import settings
from certadmin.core.database import get_db
from certadmin.core.dependencies import require_master_admin
from certadmin.core.exceptions import NotFoundError, ValidationError
from certadmin.core.toast import ToastDispatcher, get_toaster
from certadmin.crud import admin_user_crud as crud
from certadmin.crud.history_crud import list_history, record_history
from certadmin.schemas import admin_user_schema as schemas
from certadmin.schemas.certificate_schema import DeleteResponse
from certadmin.schemas.user_schema import AuthUser

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin-users", tags=["Admin Users"])

ENTITY_TYPE = "adminUser"


@router.get("", response_model=List[schemas.AdminUserDisplay])
def read_admin_users(
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_master_admin),
):
    """Staff with a stored role, ordered by email. (Master admin only)"""
    return crud.list_admin_users(db)


@router.post("", response_model=schemas.AdminUserSaveResponse)
def save_admin_user(
    user_in: schemas.AdminUserCreate,
    response: Response,
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_master_admin),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Assign a role to a staff email, creating the entry when needed. (Master admin only)
    Responds 201 for a new entry and 200 when an existing role was changed.
    """
    logger.info(f"Master admin {current_user.email} assigning role {user_in.role} to {user_in.email}")
    created, previous_role = crud.save_admin_user(db, user_in.email, user_in.role, current_user.email)
    details = {"role": user_in.role}
    if not created:
        details["previousRole"] = previous_role
    record_history(
        db, "create" if created else "update", ENTITY_TYPE, user_in.email, user_in.email, current_user.email,
        details=details,
    )
    toaster.success(f"Rol {user_in.role} asignado a {user_in.email}")
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return schemas.AdminUserSaveResponse(email=user_in.email, role=user_in.role, created=created)


@router.delete("", response_model=DeleteResponse)
def remove_admin_user(
    email: Optional[str] = Query(None),
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_master_admin),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Remove the stored role of a staff email. (Master admin only)
    Emails listed in MASTER_ADMIN_EMAILS and the caller's own email cannot be removed.
    """
    normalized = (email or "").strip().lower()
    if not normalized:
        raise ValidationError(message="Email is required.", field="email")
    if normalized in settings.MASTER_ADMIN_EMAILS:
        logger.warning(f"{current_user.email} tried to remove master admin {normalized}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot remove a user listed in MASTER_ADMIN_EMAILS. Remove it from the setting first.",
        )
    if normalized == current_user.email.lower():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You cannot remove your own user.")

    previous_role = crud.delete_admin_user(db, normalized)
    if previous_role is None:
        raise NotFoundError(message=f"Admin user {normalized} not found.", resource="adminUser")

    record_history(
        db, "delete", ENTITY_TYPE, normalized, normalized, current_user.email,
        details={"role": previous_role},
    )
    toaster.success(f"Usuario {normalized} eliminado")
    return DeleteResponse(message=f"Admin user {normalized} removed.")


@router.get("/history", response_model=schemas.HistoryPage)
def read_history(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    entity_type: Optional[str] = Query(None, alias="entityType"),
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_master_admin),
):
    """
    Audit trail of every change made through the service, newest first. (Master admin only)
    `entityType` narrows it to one kind of record (certificate, course or adminUser).
    """
    return list_history(db, page=page, limit=limit, entity_type=entity_type)
