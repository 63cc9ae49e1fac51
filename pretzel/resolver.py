"""Reference points and posture angles for a single landmark frame."""
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from .geometry import Landmark, angle_from_normal, midpoint, normalize, offset, translate_up

LandmarkPair = Tuple[Landmark, Landmark]

# MediaPipe Pose landmark indices
LEFT_EAR = 7
RIGHT_EAR = 8
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_KNEE = 25
RIGHT_KNEE = 26

USED_LANDMARKS = (
    LEFT_SHOULDER, RIGHT_SHOULDER,
    LEFT_EAR, RIGHT_EAR,
    LEFT_HIP, RIGHT_HIP,
    LEFT_KNEE, RIGHT_KNEE,
)

UP = np.array([0.0, -1.0, 0.0])


@dataclass(frozen=True)
class FrameInput:
    """The landmarks the resolver needs from one frame, as (left, right) pairs."""
    ears: LandmarkPair
    shoulders: LandmarkPair
    hips: LandmarkPair
    knees: LandmarkPair
    neck_extension: float = 0.5

    @classmethod
    def from_landmarks(cls, landmarks: Optional[Sequence[Landmark]],
                       neck_extension: float = 0.5) -> Optional["FrameInput"]:
        """Pick the needed landmarks out of a full pose frame.

        Returns None when the frame carries no (or too few) landmarks.
        """
        if not landmarks or len(landmarks) <= max(USED_LANDMARKS):
            return None
        return cls(
            ears=(landmarks[LEFT_EAR], landmarks[RIGHT_EAR]),
            shoulders=(landmarks[LEFT_SHOULDER], landmarks[RIGHT_SHOULDER]),
            hips=(landmarks[LEFT_HIP], landmarks[RIGHT_HIP]),
            knees=(landmarks[LEFT_KNEE], landmarks[RIGHT_KNEE]),
            neck_extension=neck_extension
        )


@dataclass(frozen=True)
class DerivedPoints:
    reference_point_hip_shoulder: Landmark
    reference_point_shoulder_only: Landmark
    shoulder_midpoint: Landmark
    ear_midpoint: Landmark
    hip_midpoint: Landmark
    knee_midpoint: Landmark
    normal_vertex: Landmark


@dataclass(frozen=True)
class AngleSample:
    primary_angle: float  # head forward tilt
    secondary_angle: float  # upper vs. lower body


def pick_reference_side(frame: FrameInput) -> str:
    """Return the side whose shoulder the model sees better."""
    left_shoulder, right_shoulder = frame.shoulders
    left_vis = left_shoulder.visibility or 0.0
    right_vis = right_shoulder.visibility or 0.0
    return 'left' if left_vis > right_vis else 'right'


class ReferencePointResolver:
    """Turns a FrameInput into derived points and the two posture angles."""

    def __init__(self, translate_up_offset: float = 0.3):
        self.translate_up_offset = translate_up_offset

    def reference_points(self, frame: FrameInput) -> Tuple[Landmark, Landmark]:
        """Neck projection points: following the torso lean, and straight up."""
        index = 0 if pick_reference_side(frame) == 'left' else 1
        shoulder = frame.shoulders[index]
        hip = frame.hips[index]

        # torso direction in the image plane only
        torso = np.array([shoulder.x - hip.x, shoulder.y - hip.y, 0.0])
        along_torso = offset(shoulder, normalize(torso) * frame.neck_extension)
        straight_up = offset(shoulder, UP * frame.neck_extension)
        return along_torso, straight_up

    def resolve(self, frame: FrameInput,
                translate_up_offset: Optional[float] = None) -> Tuple[DerivedPoints, AngleSample]:
        if translate_up_offset is None:
            translate_up_offset = self.translate_up_offset
        along_torso, straight_up = self.reference_points(frame)

        shoulder_mid = midpoint(*frame.shoulders)
        ear_mid = midpoint(*frame.ears)
        hip_mid = midpoint(*frame.hips)
        knee_mid = midpoint(*frame.knees)
        normal_vertex = translate_up(shoulder_mid, translate_up_offset)

        points = DerivedPoints(
            reference_point_hip_shoulder=along_torso,
            reference_point_shoulder_only=straight_up,
            shoulder_midpoint=shoulder_mid,
            ear_midpoint=ear_mid,
            hip_midpoint=hip_mid,
            knee_midpoint=knee_mid,
            normal_vertex=normal_vertex
        )
        sample = AngleSample(
            primary_angle=angle_from_normal(ear_mid, shoulder_mid, normal_vertex),
            secondary_angle=angle_from_normal(knee_mid, hip_mid, shoulder_mid)
        )
        return points, sample
