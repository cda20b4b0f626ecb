from pydantic import EmailStr, Field, field_validator
from typing import Any, Dict, List, Optional

from certadmin.models.enums import UserRole
from certadmin.schemas.base_schema import CamelModel

# MASTER_ADMIN comes only from the MASTER_ADMIN_EMAILS setting
ASSIGNABLE_ROLES = (UserRole.VIEWER, UserRole.EDITOR, UserRole.ADMIN)

# --- Admin User Schemas ---
class AdminUserCreate(CamelModel):
    email: EmailStr
    role: UserRole

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("role")
    @classmethod
    def _assignable_role(cls, v: UserRole) -> UserRole:
        if UserRole(v) not in ASSIGNABLE_ROLES:
            raise ValueError(f"role must be one of: {', '.join(r.value for r in ASSIGNABLE_ROLES)}")
        return v

class AdminUserDisplay(CamelModel):
    id: str
    email: str
    role: UserRole
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None

class AdminUserSaveResponse(CamelModel):
    success: bool = True
    email: str
    role: UserRole
    created: bool


# --- Audit History ---
class HistoryEntry(CamelModel):
    id: str
    action: str
    entity_type: str
    entity_id: str
    entity_name: Optional[str] = None
    performed_by: Optional[str] = None
    timestamp: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)

class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

class HistoryPage(CamelModel):
    data: List[HistoryEntry]
    pagination: Pagination
