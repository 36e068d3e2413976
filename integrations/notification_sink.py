from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List

from core.models import NotificationEvent, Severity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Severity.critical: logging.ERROR,
    Severity.warning: logging.WARNING,
}


class LoggingNotificationSink:
    """
    Delivers notifications to the service log and keeps the most recent ones.

    The tag is passed through untouched; collapsing repeated tags is up to
    whatever presents the notifications.
    """

    def __init__(self, capacity: int = 50) -> None:
        self._recent: Deque[NotificationEvent] = deque(maxlen=capacity)

    def send(self, title: str, body: str, tag: str, severity: Severity = Severity.info) -> None:
        self._recent.append(NotificationEvent(title=title, body=body, tag=tag, severity=severity))
        level = _LOG_LEVELS.get(severity, logging.INFO)
        logger.log(level, "%s: %s", title, body, extra={"tag": tag})

    def recent(self) -> List[NotificationEvent]:
        return list(self._recent)
