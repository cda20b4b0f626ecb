import logging
import re
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from certadmin.models.enums import UserRole
from certadmin.schemas.admin_user_schema import AdminUserDisplay

logger = logging.getLogger(__name__)

COLLECTION = "adminUsers"

_FORBIDDEN_DOC_ID_CHARS = re.compile(r"[.#$/\[\]]")

def admin_user_doc_id(email: str) -> str:
    """`adminUsers` documents are keyed by the lower-cased email with `.#$/[]` replaced by `_`."""
    return _FORBIDDEN_DOC_ID_CHARS.sub("_", email.lower())

def get_admin_role(db, email: str) -> Optional[UserRole]:
    """Returns the role stored for this email, or None when the user has no `adminUsers` entry."""
    doc_id = admin_user_doc_id(email)
    logger.debug(f"Looking up admin user document: {doc_id}")
    snapshot = db.collection(COLLECTION).document(doc_id).get()
    if not snapshot.exists:
        return None

    role = (snapshot.to_dict() or {}).get("role")
    try:
        return UserRole(role)
    except ValueError:
        logger.warning(f"Admin user {doc_id} has unknown role '{role}'. Falling back to VIEWER.")
        return UserRole.VIEWER


def list_admin_users(db) -> List[AdminUserDisplay]:
    users: List[AdminUserDisplay] = []
    for snapshot in db.collection(COLLECTION).stream():
        data = snapshot.to_dict() or {}
        stored_role = data.get("role")
        try:
            role = UserRole(stored_role)
        except ValueError:
            logger.warning(f"Admin user {snapshot.id} has unknown role '{stored_role}'. Listed as VIEWER.")
            role = UserRole.VIEWER
        users.append(AdminUserDisplay(
            id=snapshot.id,
            email=data.get("email") or snapshot.id,
            role=role,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            updated_by=data.get("updatedBy"),
        ))
    return sorted(users, key=lambda user: user.email)


def save_admin_user(db, email: str, role: UserRole, performed_by: str) -> Tuple[bool, Optional[str]]:
    """
    Creates or updates the role entry for `email`, keeping the original `createdAt`.
    Returns (created, previous_role).
    """
    ref = db.collection(COLLECTION).document(admin_user_doc_id(email))
    snapshot = ref.get()
    existing = (snapshot.to_dict() or {}) if snapshot.exists else {}
    now = datetime.now(timezone.utc).isoformat()
    ref.set(
        {
            "email": email.lower(),
            "role": UserRole(role).value,
            "updatedAt": now,
            "updatedBy": performed_by,
            "createdAt": existing.get("createdAt") or now,
        },
        merge=True,
    )
    logger.info(f"Admin user {email} saved with role {UserRole(role).value} by {performed_by}")
    return not snapshot.exists, existing.get("role")


def delete_admin_user(db, email: str) -> Optional[str]:
    """Removes the role entry. Returns the role it had, or None when there was no entry."""
    ref = db.collection(COLLECTION).document(admin_user_doc_id(email))
    snapshot = ref.get()
    if not snapshot.exists:
        return None
    role = (snapshot.to_dict() or {}).get("role")
    ref.delete()
    logger.info(f"Admin user {email} deleted (role was {role})")
    return role or UserRole.VIEWER.value
