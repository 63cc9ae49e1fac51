import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .classifier import TemporalClassifier, Verdict
from .config import Config
from .geometry import Landmark
from .resolver import USED_LANDMARKS, AngleSample, DerivedPoints, FrameInput, ReferencePointResolver


@dataclass(frozen=True)
class FrameAnalysis:
    """Everything produced for one analyzed frame."""
    points: DerivedPoints
    sample: AngleSample
    verdict: Verdict
    evaluated: bool
    landmarks_used: List[Landmark]


class PostureEngine:
    """Frame analysis pipeline: landmarks -> resolver -> classifier."""

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.resolver = ReferencePointResolver(config.TRANSLATE_UP_OFFSET)
        self.classifier = TemporalClassifier(config, self.logger)
        self.last_sample: Optional[AngleSample] = None

    @property
    def verdict(self) -> Verdict:
        return self.classifier.verdict

    def add_verdict_callback(self, callback: Callable[[Verdict], None]):
        self.classifier.add_verdict_callback(callback)

    def process(self, landmarks: Optional[Sequence[Landmark]]) -> Optional[FrameAnalysis]:
        """Analyze one pose frame. Frames without landmarks are skipped."""
        frame = FrameInput.from_landmarks(landmarks, self.config.NECK_EXTENSION)
        if frame is None:
            return None

        points, sample = self.resolver.resolve(frame, self.config.TRANSLATE_UP_OFFSET)
        evaluated = self.classifier.observe(sample)
        self.last_sample = sample

        return FrameAnalysis(
            points=points,
            sample=sample,
            verdict=self.classifier.verdict,
            evaluated=evaluated,
            landmarks_used=[landmarks[i] for i in USED_LANDMARKS]
        )

    def reset(self):
        self.classifier.reset()
        self.last_sample = None
