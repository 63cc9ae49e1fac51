import logging
from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np

from .config import Config
from .geometry import Landmark


def landmarks_from_mediapipe(pose_landmarks) -> List[Landmark]:
    """Convert a MediaPipe NormalizedLandmarkList into Landmarks."""
    if pose_landmarks is None:
        return []
    return [
        Landmark(x=lm.x, y=lm.y, z=lm.z, visibility=getattr(lm, 'visibility', None))
        for lm in pose_landmarks.landmark
    ]


# ================= POSE DETECTOR =================
class PoseDetector:
    """MediaPipe Pose wrapper producing normalized landmarks per frame."""

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        try:
            self.mp_pose = mp.solutions.pose
            self.pose = self.mp_pose.Pose(
                static_image_mode=False,
                model_complexity=config.MODEL_COMPLEXITY,
                smooth_landmarks=True,
                min_detection_confidence=config.DETECTION_CONFIDENCE,
                min_tracking_confidence=config.TRACKING_CONFIDENCE
            )
        except Exception as e:
            self.logger.error(f"Failed to initialize MediaPipe Pose: {e}")
            raise

        self.results = None

    def process(self, frame_bgr: np.ndarray) -> List[Landmark]:
        """Detect the pose in a BGR frame; empty list when nothing is found."""
        if frame_bgr is None or frame_bgr.size == 0:
            return []

        try:
            rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            rgb.flags.writeable = False
            self.results = self.pose.process(rgb)
        except Exception as e:
            self.logger.warning(f"Pose processing failed: {e}")
            return []

        return landmarks_from_mediapipe(self.results.pose_landmarks)

    def close(self):
        self.pose.close()
