import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from .config import Config
from .resolver import AngleSample


@dataclass(frozen=True)
class Verdict:
    is_pretzel: bool = False
    average_angle: float = 0.0


class TemporalClassifier:
    """Windowed, debounced pretzel classification.

    Primary angles are buffered until more than FRAME_THRESHOLD frames have
    been observed; the window mean is then compared against ANGLE_THRESHOLD.
    The secondary angle of the triggering sample can force a pretzel verdict
    on its own. Thresholds are read from the config at each evaluation, so
    live changes apply from the next evaluation onwards.
    """

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        self.window: List[float] = []
        self.frame_count = 0
        self.verdict = Verdict()
        self.verdict_callbacks: List[Callable[[Verdict], None]] = []

    def add_verdict_callback(self, callback: Callable[[Verdict], None]):
        """Add callback fired whenever the pretzel status flips."""
        self.verdict_callbacks.append(callback)

    def observe(self, sample: AngleSample) -> bool:
        """Record one sample. Returns True if the window was evaluated."""
        self.window.append(sample.primary_angle)
        self.frame_count += 1

        frame_threshold = int(self.config.FRAME_THRESHOLD)
        if self.frame_count <= frame_threshold:
            return False

        average = float(np.mean(self.window))
        is_pretzel = (average > self.config.ANGLE_THRESHOLD
                      or sample.secondary_angle < self.config.SECONDARY_ANGLE_THRESHOLD)

        previous = self.verdict
        self.verdict = Verdict(is_pretzel=is_pretzel, average_angle=average)
        self.logger.debug(f"Window evaluated: {len(self.window)} samples, "
                          f"mean={average:.2f}, secondary={sample.secondary_angle:.2f}")

        # carry over frames past the threshold instead of resetting to zero
        self.frame_count -= frame_threshold
        self.window.clear()

        if previous.is_pretzel != is_pretzel:
            self._notify(self.verdict)
        return True

    def reset(self):
        """Drop buffered samples; the current verdict is kept."""
        self.window.clear()
        self.frame_count = 0

    def _notify(self, verdict: Verdict):
        self.logger.info(f"Pretzel status changed: {verdict.is_pretzel} "
                         f"(average angle {verdict.average_angle:.2f})")
        for callback in self.verdict_callbacks:
            try:
                callback(verdict)
            except Exception as e:
                self.logger.warning(f"Verdict callback failed: {e}")
