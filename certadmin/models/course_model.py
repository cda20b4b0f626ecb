from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional

from certadmin.models.enums import CourseStatus, CourseType, Origin

COLLECTION = "courses"


class Course(BaseModel):
    """
    Shape of a document in the `courses` collection.

    The short code (e.g. "LM-2025") is both the document id and the `id` field inside
    the document, and is the join key certificates use through their `courseId`.
    """
    id: str
    name: str
    course_type: CourseType = CourseType.COURSE
    year: int
    month: Optional[int] = None # 1-12
    edition: Optional[int] = None
    origin: Origin = Origin.NEW
    status: CourseStatus = CourseStatus.ACTIVE
    drive_folder_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True

    @classmethod
    def from_snapshot(cls, snapshot) -> "Course":
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id # The document id wins over a stale `id` field
        return cls.model_validate(data)

    def to_firestore(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def __repr__(self):
        return f"<Course(id='{self.id}', name='{self.name}', status='{self.status}')>"
