"""
Transient notifications ("toasts").

Code that wants to tell staff something calls `toast.success(...)` and friends. The
dispatcher does not keep anything itself: it hands each record to whichever subscriber
registered last (see `certadmin.services.toast_center`). With nobody registered it
falls back to an alert in the log so the message is never silently dropped.
"""
import logging
import uuid
from typing import Callable, Optional, Union

from certadmin.core.config import settings
from certadmin.models.enums import ToastType
from certadmin.schemas.notification_schema import Toast

logger = logging.getLogger(__name__)

ToastCallback = Callable[[Toast], None]


def log_alert(message: str) -> None:
    logger.warning(f"[ALERT] {message}")


class ToastDispatcher:
    def __init__(
        self,
        fallback: Callable[[str], None] = log_alert,
        default_duration_ms: int = 5000,
    ):
        self._subscriber: Optional[ToastCallback] = None
        self._fallback = fallback
        self.default_duration_ms = default_duration_ms

    @property
    def subscriber(self) -> Optional[ToastCallback]:
        return self._subscriber

    def set_subscriber(self, callback: ToastCallback) -> None:
        """Registers the single active subscriber. The last registration wins."""
        self._subscriber = callback

    def notify(
        self,
        message: str,
        kind: Union[ToastType, str] = ToastType.INFO,
        duration_ms: Optional[int] = None,
    ) -> Toast:
        record = Toast(
            id=uuid.uuid4().hex,
            message=message,
            type=ToastType(kind),
            duration=self.default_duration_ms if duration_ms is None else duration_ms,
        )
        if self._subscriber is not None:
            self._subscriber(record)
        else:
            self._fallback(message)
        return record

    def success(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, ToastType.SUCCESS, duration_ms)

    def error(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, ToastType.ERROR, duration_ms)

    def warning(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, ToastType.WARNING, duration_ms)

    def info(self, message: str, duration_ms: Optional[int] = None) -> Toast:
        return self.notify(message, ToastType.INFO, duration_ms)


# Process-wide dispatcher
toast = ToastDispatcher(default_duration_ms=settings.TOAST_DEFAULT_DURATION_MS)


def set_subscriber(callback: ToastCallback) -> None:
    toast.set_subscriber(callback)


def notify(message: str, kind: Union[ToastType, str] = ToastType.INFO, duration_ms: Optional[int] = None) -> Toast:
    return toast.notify(message, kind, duration_ms)


def get_toaster() -> ToastDispatcher:
    """Dependency giving route handlers the process-wide dispatcher."""
    return toast
