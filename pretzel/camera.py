import logging
from typing import Optional

import cv2
import numpy as np

from .config import Config


class CameraCapture:
    """Webcam collaborator; the session timer opens and releases it."""

    def __init__(self, index: int, config: Config, logger: Optional[logging.Logger] = None):
        self.index = index
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.cap = None

    @property
    def is_open(self) -> bool:
        return self.cap is not None and self.cap.isOpened()

    def start(self):
        if self.is_open:
            return
        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise RuntimeError(f"Could not open camera {self.index}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.WINDOW_WIDTH)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.WINDOW_HEIGHT)
        cap.set(cv2.CAP_PROP_FPS, self.config.FPS_TARGET)
        self.cap = cap
        self.logger.info(f"Camera {self.index} started")

    def stop(self):
        if self.cap is None:
            return
        self.cap.release()
        self.cap = None
        self.logger.info(f"Camera {self.index} stopped")

    def read(self) -> Optional[np.ndarray]:
        """Next mirrored frame, or None if the camera is stopped or failed."""
        if not self.is_open:
            return None
        ret, frame = self.cap.read()
        if not ret:
            self.logger.warning("Failed to read camera frame")
            return None
        return cv2.flip(frame, 1)
