from pydantic import BaseModel, EmailStr, Field
from typing import Optional

from certadmin.models.enums import UserRole

# Schema representing the data decoded from a Firebase ID token or session cookie
class TokenData(BaseModel):
    firebase_uid: str
    email: EmailStr

# The authenticated staff member, with the role resolved from `adminUsers` or MASTER_ADMIN_EMAILS
class AuthUser(BaseModel):
    uid: str
    email: EmailStr
    role: UserRole = UserRole.VIEWER

    class Config:
        use_enum_values = True

# Body of POST /api/auth/session. The client signs in with Firebase in the browser and sends the ID token.
class SessionCreateRequest(BaseModel):
    id_token: Optional[str] = Field(None, alias="idToken")

    class Config:
        populate_by_name = True

class OkResponse(BaseModel):
    ok: bool = True

class MeResponse(BaseModel):
    email: EmailStr
    role: UserRole
