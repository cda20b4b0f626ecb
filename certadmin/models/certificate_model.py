from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional

from certadmin.models.enums import ContactSource, DeliveryStatus, Origin

COLLECTION = "certificates"


class Certificate(BaseModel):
    """
    Shape of a document in the `certificates` collection.

    Firestore stores the fields in camelCase; the aliases keep the Python side snake_case.
    `id` is the Firestore document id and is never written into the document body.
    """
    id: Optional[str] = None

    full_name: str
    course_name: str
    course_id: str # Course code or sequenced id, e.g. "LM-2025-03"
    course_type: str
    year: int

    origin: Origin = Origin.NEW

    email: Optional[str] = None
    phone: Optional[str] = None
    contact_source: ContactSource = ContactSource.NONE

    drive_file_id: Optional[str] = None

    delivery_status: DeliveryStatus = DeliveryStatus.FILED

    # Delivery metadata
    delivery_date: Optional[str] = None
    delivered_to: Optional[str] = None
    physical_location: Optional[str] = None
    folio_code: Optional[str] = None

    email_sent: bool = False
    whatsapp_sent: bool = False
    marketing_consent: bool = False

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True

    @classmethod
    def from_snapshot(cls, snapshot) -> "Certificate":
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        return cls.model_validate(data)

    def to_firestore(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"})

    def __repr__(self):
        return f"<Certificate(id={self.id}, course_id='{self.course_id}', status='{self.delivery_status}')>"
