import logging
import time
from typing import Callable, List, Optional

from .classifier import Verdict
from .config import Config

TITLE = "Correct your posture, Pretzel!"
BODY = "You look like a pretzel, straighten up that neck."


class PretzelNotifier:
    """Turns pretzel verdict changes into rate-limited notifications."""

    def __init__(self, config: Config, clock: Callable[[], float] = time.time,
                 logger: Optional[logging.Logger] = None):
        self.config = config
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

        self.last_notification_time: Optional[float] = None
        self.notifications_sent = 0
        self.handlers: List[Callable[[str, str], None]] = []

    def add_handler(self, handler: Callable[[str, str], None]):
        """Add handler called with (title, body) for each notification."""
        self.handlers.append(handler)

    def on_verdict(self, verdict: Verdict) -> bool:
        """Verdict callback. Returns True if a notification went out."""
        if not verdict.is_pretzel:
            return False

        current_time = self.clock()
        if (self.last_notification_time is not None and
                current_time - self.last_notification_time < self.config.NOTIFICATION_COOLDOWN_SECONDS):
            self.logger.debug("Pretzel notification suppressed by cooldown")
            return False

        self.last_notification_time = current_time
        self.notifications_sent += 1
        self.logger.warning(f"{TITLE} {BODY} (average angle {verdict.average_angle:.1f} deg)")

        for handler in self.handlers:
            try:
                handler(TITLE, BODY)
            except Exception as e:
                self.logger.warning(f"Notification handler failed: {e}")
        return True
