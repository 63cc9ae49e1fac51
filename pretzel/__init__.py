"""Webcam posture monitor that tells you when you sit like a pretzel."""
from .classifier import TemporalClassifier, Verdict
from .config import Config
from .engine import FrameAnalysis, PostureEngine
from .geometry import Landmark
from .resolver import AngleSample, DerivedPoints, FrameInput, ReferencePointResolver
from .timer import SessionTimer, TimerPhase

__version__ = "0.1.0"
