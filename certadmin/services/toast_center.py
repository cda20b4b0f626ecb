import logging
import threading
import time
from typing import Callable, List, Tuple

from certadmin.core.toast import ToastDispatcher, toast
from certadmin.schemas.notification_schema import Toast

logger = logging.getLogger(__name__)


class ToastCenter:
    """
    Subscriber that owns the live queue of notifications.

    Records keep insertion order. Each one leaves the queue when it is closed by id or
    when its own duration has elapsed since it was received.
    """

    def __init__(self, dispatcher: ToastDispatcher, clock: Callable[[], float] = time.monotonic):
        self._dispatcher = dispatcher
        self._clock = clock
        self._entries: List[Tuple[Toast, float]] = [] # (record, expires_at)
        # Sync route handlers run in FastAPI's thread pool
        self._lock = threading.Lock()

    @property
    def is_registered(self) -> bool:
        return self._dispatcher.subscriber == self.receive

    def activate(self) -> None:
        """Registers with the dispatcher. Call again after any other subscriber took over."""
        self._dispatcher.set_subscriber(self.receive)
        logger.info("Toast center registered as notification subscriber.")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _prune(self, now: float) -> None:
        # Caller holds the lock
        self._entries = [(record, expires_at) for record, expires_at in self._entries if expires_at > now]

    def receive(self, record: Toast) -> None:
        now = self._clock()
        with self._lock:
            self._prune(now)
            self._entries.append((record, now + record.duration / 1000.0))
        logger.debug(f"Toast queued: {record.id} ({record.type}) '{record.message}'")

    def close(self, toast_id: str) -> bool:
        with self._lock:
            for index, (record, _) in enumerate(self._entries):
                if record.id == toast_id:
                    del self._entries[index]
                    return True
        return False

    def active(self) -> List[Toast]:
        """Returns the live queue, dropping records whose duration has elapsed."""
        now = self._clock()
        with self._lock:
            self._prune(now)
            return [record for record, _ in self._entries]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


toast_center = ToastCenter(toast)


def get_toast_center() -> ToastCenter:
    return toast_center
