# This package contains business logic services.

from . import delivery_service
from . import email_service
from . import toast_center

__all__ = [
    "delivery_service",
    "email_service",
    "toast_center",
]
