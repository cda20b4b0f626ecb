from pydantic import BaseModel, Field

from certadmin.models.enums import ToastType

class Toast(BaseModel):
    id: str = Field(..., description="Unique identifier, used to close the notification")
    message: str
    type: ToastType = ToastType.INFO
    duration: int = Field(..., description="Display duration in milliseconds")

    class Config:
        use_enum_values = True

class ToastCloseResponse(BaseModel):
    ok: bool
    id: str
