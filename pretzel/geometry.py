"""Pure geometry over normalized 3-D landmarks.

Coordinates follow the pose model's normalized image space: x grows to the
right, y grows downwards and z is depth. Every function here is total over
finite input and degrades to a neutral value instead of returning NaN.
"""
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

NEUTRAL_ANGLE = 90.0
EPSILON = 1e-9


@dataclass(frozen=True)
class Landmark:
    """A single body keypoint estimate."""
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)


def vector(start: Landmark, end: Landmark) -> np.ndarray:
    """Vector pointing from ``start`` to ``end``."""
    return end.as_array() - start.as_array()


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector in the direction of ``v``; the zero vector maps to itself."""
    v = np.asarray(v, dtype=float)
    norm = np.linalg.norm(v)
    if not np.isfinite(norm) or norm < EPSILON:
        return np.zeros_like(v)
    return v / norm


def midpoint(a: Landmark, b: Landmark) -> Landmark:
    return Landmark(
        x=(a.x + b.x) / 2,
        y=(a.y + b.y) / 2,
        z=(a.z + b.z) / 2
    )


def translate_up(a: Landmark, amount: float = 0.3) -> Landmark:
    """Move a point up the screen (towards smaller y)."""
    return Landmark(x=a.x, y=a.y - amount, z=a.z)


def offset(a: Landmark, v: np.ndarray) -> Landmark:
    """Translate ``a`` by the vector ``v``."""
    return Landmark(x=a.x + float(v[0]), y=a.y + float(v[1]), z=a.z + float(v[2]))


def angle_from_normal(p: Landmark, center: Landmark, n: Landmark) -> float:
    """Angle in degrees at ``center`` between the rays towards ``p`` and ``n``.

    The cosine is clamped into [0, 1] before ``arccos``, so the result lies in
    [0, 90]. A zero-length ray (coincident points) or non-finite input yields
    ``NEUTRAL_ANGLE``.
    """
    if p is None or center is None or n is None:
        return NEUTRAL_ANGLE

    a = vector(center, p)
    b = vector(center, n)
    norms = np.linalg.norm(a) * np.linalg.norm(b)
    if not np.isfinite(norms) or norms < EPSILON:
        return NEUTRAL_ANGLE

    cos_angle = np.dot(a, b) / norms
    if not np.isfinite(cos_angle):
        return NEUTRAL_ANGLE

    cos_angle = np.clip(cos_angle, 0.0, 1.0)
    return math.degrees(np.arccos(cos_angle))


def planar_distance(a: Optional[Landmark], b: Optional[Landmark]) -> float:
    """Euclidean distance in the image plane, ignoring depth."""
    if a is None or b is None:
        return 0.0
    dist = math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2)
    return 0.0 if math.isnan(dist) else dist
