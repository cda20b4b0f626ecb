from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

MIN_YEAR = 2000
MAX_TEXT_LENGTH = 500

class CamelModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True


def check_year(year: int) -> int:
    max_year = datetime.now().year + 1
    if year < MIN_YEAR or year > max_year:
        raise ValueError(f"year must be between {MIN_YEAR} and {max_year}")
    return year

def check_required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    if len(value) > MAX_TEXT_LENGTH:
        raise ValueError(f"must not exceed {MAX_TEXT_LENGTH} characters")
    return value

def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
