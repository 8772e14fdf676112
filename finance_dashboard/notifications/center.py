"""
Notification Center

Form actions and auth calls report their outcome as a Notice. The center:
- Logs every notice locally through structlog, at a level matching it
- Keeps the most recent notices for the UI to show as transient toasts
- Never raises; a failing listener is logged and skipped
"""

from collections import deque
from typing import Callable, Optional

import structlog

from finance_dashboard.models.notice import Notice, NoticeLevel


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class NotificationCenter:
    """
    Central sink for user-facing notices.

    The UI calls drain() once per render to pop what it should display.
    """

    def __init__(self, max_pending: int = 20):
        self._pending: deque[Notice] = deque(maxlen=max_pending)
        self._listeners: list[Callable[[Notice], None]] = []
        self._logger = structlog.get_logger(__name__)

    def publish(self, notice: Notice) -> Notice:
        """
        Record a notice.

        Always logs locally, queues it for display, and tells listeners.
        Returns the notice so callers can hand it straight back.
        """
        log_dict = notice.to_log_dict()

        if notice.level == NoticeLevel.ERROR:
            self._logger.error("notice", **log_dict)
        elif notice.level == NoticeLevel.WARNING:
            self._logger.warning("notice", **log_dict)
        else:
            self._logger.info("notice", **log_dict)

        self._pending.append(notice)

        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception as e:
                self._logger.error(
                    "notice_listener_failed",
                    error=str(e),
                    notice_id=str(notice.notice_id),
                )

        return notice

    def subscribe(self, listener: Callable[[Notice], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def drain(self) -> list[Notice]:
        """Pop all pending notices, oldest first."""
        notices = list(self._pending)
        self._pending.clear()
        return notices

    def peek(self) -> Optional[Notice]:
        """Most recent pending notice without removing it."""
        return self._pending[-1] if self._pending else None

    def __len__(self) -> int:
        return len(self._pending)
