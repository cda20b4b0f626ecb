# This file makes the 'models' directory a Python package.
# Models here describe the shape of Firestore documents; they carry no persistence logic.

from .enums import (
    Origin, ContactSource, DeliveryStatus, CourseType, CourseStatus, UserRole, ToastType,
    DELIVERED_STATUSES, ROLE_HIERARCHY
)

from .certificate_model import Certificate
from .course_model import Course


__all__ = [
    # Models
    "Certificate",
    "Course",
    # Enums
    "Origin",
    "ContactSource",
    "DeliveryStatus",
    "CourseType",
    "CourseStatus",
    "UserRole",
    "ToastType",
    "DELIVERED_STATUSES",
    "ROLE_HIERARCHY",
]
