"""
Analytics collaborator. Fire-and-forget: a failing sink never reaches the caller.
"""

import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

CHAT_SUBMIT = "chat_submit"
EXTERNAL_LINK_CLICK = "external_link_click"


class Analytics(Protocol):
    def capture(self, event: str, properties: Optional[dict[str, Any]] = None) -> None: ...


class LoggingAnalytics:
    def capture(self, event: str, properties: Optional[dict[str, Any]] = None) -> None:
        logger.info("analytics event %s %s", event, properties or {})


class NullAnalytics:
    def capture(self, event: str, properties: Optional[dict[str, Any]] = None) -> None:
        pass


def safe_capture(analytics: Analytics, event: str, properties: Optional[dict[str, Any]] = None) -> None:
    try:
        analytics.capture(event, properties)
    except Exception as e:
        logger.warning("Analytics capture of %s failed: %s", event, e)
