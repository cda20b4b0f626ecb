from pydantic import Field, field_validator, model_validator
from typing import Optional

from certadmin.models.enums import CourseStatus, CourseType, Origin
from certadmin.schemas.base_schema import CamelModel, check_required_text, check_year

COURSE_CODE_PATTERN = r"^[A-Z0-9\-]{1,20}$"


def check_month_requires_edition(month: Optional[int], edition: Optional[int]) -> None:
    if month is not None and edition is None:
        raise ValueError("edition is required when month is set")


# --- Course Schemas ---
class CourseBase(CamelModel):
    name: str = Field(..., description="Full course name")
    course_type: CourseType = CourseType.COURSE
    year: int
    month: Optional[int] = Field(None, ge=1, le=12)
    edition: Optional[int] = Field(None, ge=1, description="Edition number (1, 2, 3...)")
    origin: Origin = Origin.NEW
    status: CourseStatus = CourseStatus.ACTIVE
    drive_folder_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _required_name(cls, v: str) -> str:
        return check_required_text(v)

    @field_validator("year")
    @classmethod
    def _valid_year(cls, v: int) -> int:
        return check_year(v)

    @model_validator(mode="after")
    def _month_needs_edition(self):
        check_month_requires_edition(self.month, self.edition)
        return self

class CourseCreate(CourseBase):
    id: str = Field(..., pattern=COURSE_CODE_PATTERN, description="Short course code, e.g. LM-2025")

class CourseUpdate(CamelModel):
    """Partial update. The code (id) is immutable."""
    name: Optional[str] = None
    course_type: Optional[CourseType] = None
    year: Optional[int] = None
    month: Optional[int] = Field(None, ge=1, le=12)
    edition: Optional[int] = Field(None, ge=1)
    origin: Optional[Origin] = None
    status: Optional[CourseStatus] = None
    drive_folder_id: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _required_name(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else check_required_text(v)

    @field_validator("year")
    @classmethod
    def _valid_year(cls, v: Optional[int]) -> Optional[int]:
        return None if v is None else check_year(v)
