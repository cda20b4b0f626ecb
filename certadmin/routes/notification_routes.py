from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from certadmin.core.dependencies import get_current_user
from certadmin.schemas.notification_schema import Toast, ToastCloseResponse
from certadmin.schemas.user_schema import AuthUser
from certadmin.services.toast_center import ToastCenter, get_toast_center

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[Toast])
def read_active_notifications(
    current_user: AuthUser = Depends(get_current_user),
    center: ToastCenter = Depends(get_toast_center),
):
    """Notifications that are still live, oldest first."""
    return center.active()


@router.delete("/{toast_id}", response_model=ToastCloseResponse)
def close_notification(
    toast_id: str,
    current_user: AuthUser = Depends(get_current_user),
    center: ToastCenter = Depends(get_toast_center),
):
    """Dismiss one notification by id."""
    if not center.close(toast_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Notification {toast_id} not found.")
    logger.debug(f"Notification {toast_id} closed by {current_user.email}")
    return ToastCloseResponse(ok=True, id=toast_id)
