import logging
import math
import time
from typing import Optional, Tuple

import cv2
import numpy as np

from .classifier import Verdict
from .config import Config
from .engine import FrameAnalysis
from .geometry import Landmark
from .resolver import AngleSample
from .timer import SessionTimer

Pixel = Tuple[int, int]

CONNECTOR_COLOR = (0, 255, 0)
LANDMARK_COLOR = (0, 0, 255)
NORMAL_COLOR = (0, 255, 255)


# ================= OVERLAY RENDERER =================
class OverlayRenderer:
    """Draws the analyzer geometry and a status HUD onto camera frames."""

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        # Palette: #003049 (navy), #D62828 (red), #FCBF49 (yellow), #EAE2B7 (cream)
        self.text_color = (183, 226, 234)
        self.bg_color = (73, 48, 0)
        self.good_color = (73, 191, 252)
        self.bad_color = (40, 40, 214)
        self.font = cv2.FONT_HERSHEY_SIMPLEX
        self.last_alert_time = 0.0

    @staticmethod
    def to_pixel(point: Landmark, width: int, height: int) -> Optional[Pixel]:
        if point is None or not (math.isfinite(point.x) and math.isfinite(point.y)):
            return None
        return int(point.x * width), int(point.y * height)

    def _line(self, frame: np.ndarray, a: Landmark, b: Landmark, color, thickness: int):
        h, w = frame.shape[:2]
        pa, pb = self.to_pixel(a, w, h), self.to_pixel(b, w, h)
        if pa is None or pb is None:
            return
        cv2.line(frame, pa, pb, color, thickness)

    def draw_geometry(self, frame: np.ndarray, analysis: FrameAnalysis):
        """Draw connector segments between raw and derived points."""
        left_shoulder, right_shoulder, left_ear, right_ear, \
            left_hip, right_hip, _, _ = analysis.landmarks_used
        p = analysis.points

        connectors = [
            (left_shoulder, p.shoulder_midpoint),
            (right_shoulder, p.shoulder_midpoint),
            (p.ear_midpoint, p.shoulder_midpoint),
            (p.ear_midpoint, left_ear),
            (p.ear_midpoint, right_ear),
            (p.shoulder_midpoint, p.normal_vertex),
            (left_hip, p.hip_midpoint),
            (right_hip, p.hip_midpoint),
            (p.hip_midpoint, p.shoulder_midpoint),
            (p.hip_midpoint, p.knee_midpoint),
        ]
        for a, b in connectors:
            self._line(frame, a, b, CONNECTOR_COLOR, 4)

        h, w = frame.shape[:2]
        for landmark in analysis.landmarks_used:
            pos = self.to_pixel(landmark, w, h)
            if pos is not None:
                cv2.circle(frame, pos, 5, LANDMARK_COLOR, cv2.FILLED)

        # vertical reference on top
        self._line(frame, p.shoulder_midpoint, p.normal_vertex, NORMAL_COLOR, 2)

    def _draw_text_with_background(self, frame: np.ndarray, text: str,
                                   pos: Pixel, scale: float = None,
                                   text_color=None, padding: int = 5) -> int:
        """Draw text with background for better readability."""
        scale = scale or self.config.TEXT_SCALE
        text_color = text_color or self.text_color

        (text_width, text_height), baseline = cv2.getTextSize(
            text, self.font, scale, self.config.TEXT_THICKNESS
        )
        text_height += baseline

        bg_start = (pos[0] - padding, pos[1] - text_height - padding)
        bg_end = (pos[0] + text_width + padding, pos[1] + padding)
        cv2.rectangle(frame, bg_start, bg_end, self.bg_color, cv2.FILLED)
        cv2.putText(frame, text, pos, self.font, scale, text_color, self.config.TEXT_THICKNESS)

        return text_height + 2 * padding

    def draw_hud(self, frame: np.ndarray, verdict: Verdict,
                 sample: Optional[AngleSample], timer: Optional[SessionTimer]):
        """Draw the verdict, thresholds, angles and session countdown."""
        x = self.config.HUD_MARGIN
        y = self.config.HUD_MARGIN + 20

        verdict_color = self.bad_color if verdict.is_pretzel else self.good_color
        if self._flash_active() and int(time.time() * 8) % 2:
            verdict_color = (0, 0, 255)
        answer = "Yes, you are." if verdict.is_pretzel else "Not yet."
        y += self._draw_text_with_background(frame, f"Are you a pretzel? {answer}", (x, y),
                                             scale=self.config.TEXT_SCALE + 0.2,
                                             text_color=verdict_color)

        lines = [
            f"Ear/shoulder threshold: {self.config.ANGLE_THRESHOLD:.0f} deg "
            f"(current {verdict.average_angle:.2f} deg)",
            f"Window: {int(self.config.FRAME_THRESHOLD)} frames",
        ]
        if sample is not None:
            lines.append(f"Upper/lower body angle: {sample.secondary_angle:.2f} deg "
                         f"(min {self.config.SECONDARY_ANGLE_THRESHOLD:.0f})")
        if timer is not None:
            if not timer.is_active:
                lines.append("Press SPACE to start")
            elif timer.is_running:
                lines.append(f"Program ends in: {timer.countdown}s")
            else:
                lines.append(f"Program starts in: {timer.countdown}s")

        for text in lines:
            y += self._draw_text_with_background(frame, text, (x, y))

    def trigger_alert_flash(self, *_):
        """Trigger visual alert flash."""
        self.last_alert_time = time.time()

    def _flash_active(self) -> bool:
        return time.time() - self.last_alert_time < self.config.ALERT_FLASH_DURATION
