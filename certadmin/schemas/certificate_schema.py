import re
from pydantic import EmailStr, Field, StrictBool, field_validator
from typing import Dict, List, Optional

from certadmin.models.enums import ContactSource, DeliveryStatus, Origin
from certadmin.schemas.base_schema import CamelModel, blank_to_none, check_required_text, check_year

PHONE_PATTERN = re.compile(r"^[\d\-\(\)\+]{8,20}$")

MAX_BULK_IDS = 100

# --- Certificate Schemas ---
class CertificateBase(CamelModel):
    full_name: str = Field(..., description="Full name of the certificate holder")
    course_name: str
    course_id: str = Field(..., description="Course code or sequenced id such as LM-2025-03")
    course_type: str
    year: int

    origin: Origin = Origin.NEW

    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    contact_source: ContactSource = ContactSource.NONE

    drive_file_id: Optional[str] = None

    delivery_status: DeliveryStatus = DeliveryStatus.FILED
    delivery_date: Optional[str] = None
    delivered_to: Optional[str] = None
    physical_location: Optional[str] = None
    folio_code: Optional[str] = None

    email_sent: StrictBool = False
    whatsapp_sent: StrictBool = False
    marketing_consent: StrictBool = False

    @field_validator("full_name", "course_name", "course_id", "course_type")
    @classmethod
    def _required_text(cls, v: str) -> str:
        return check_required_text(v)

    @field_validator("year")
    @classmethod
    def _valid_year(cls, v: int) -> int:
        return check_year(v)

    @field_validator("drive_file_id", "delivery_date", "delivered_to", "physical_location", "folio_code")
    @classmethod
    def _blank_is_null(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_null(cls, v):
        if isinstance(v, str):
            return blank_to_none(v)
        return v

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @field_validator("phone")
    @classmethod
    def _valid_phone(cls, v: Optional[str]) -> Optional[str]:
        v = blank_to_none(v)
        if v is None:
            return None
        if not PHONE_PATTERN.match(re.sub(r"\s", "", v)):
            raise ValueError("invalid phone format")
        return v

class CertificateCreate(CertificateBase):
    pass

class CertificateUpdate(CertificateBase):
    # Full replacement of the editable fields, as sent by the edit form
    pass


# --- Bulk Operations ---
class BulkIdsRequest(CamelModel):
    ids: List[str] = Field(..., min_length=1, max_length=MAX_BULK_IDS)

    @field_validator("ids")
    @classmethod
    def _non_blank_ids(cls, v: List[str]) -> List[str]:
        cleaned = [item.strip() for item in v]
        for index, item in enumerate(cleaned):
            if not item:
                raise ValueError(f"ids[{index}] must be a non-empty string")
        return cleaned

class BulkStatusUpdateRequest(BulkIdsRequest):
    delivery_status: DeliveryStatus

class BulkStatusUpdateResponse(CamelModel):
    success: bool = True
    message: str
    updated: int

class BulkDeleteResponse(CamelModel):
    success: bool = True
    message: str
    deleted: int


# --- Stats & Sequencing ---
class StatusCounts(CamelModel):
    delivered: int = 0
    ready_for_delivery: int = 0
    filed: int = 0
    sent_digitally: int = 0
    voided: int = 0

class CertificateStats(CamelModel):
    total: int
    by_status: StatusCounts
    by_year: Dict[int, int]
    this_year: int

class NextSequenceResponse(CamelModel):
    next_sequence: int
    formatted_id: str

class EmailNoticeResponse(CamelModel):
    ok: bool = True
    email_sent: bool

class DeleteResponse(CamelModel):
    success: bool = True
    message: str
