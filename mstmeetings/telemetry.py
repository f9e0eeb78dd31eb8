"""Usage tracking for slash command actions."""

import logging
from collections import Counter
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)


class UsageTracker:
    """Records usage events. Tracking never raises into the caller."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._counts: Counter = Counter()

    def track_event(self, event: str, user_id: str, properties: Optional[Dict[str, Any]] = None) -> None:
        if not self.enabled:
            return
        self._counts[event] += 1
        logger.info(f"Telemetry event: {event} (user: {user_id}, properties: {properties or {}})")

    def count(self, event: str) -> int:
        """Number of times an event was tracked"""
        return self._counts[event]
