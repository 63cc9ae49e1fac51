from dataclasses import dataclass, fields, asdict


# ================= CONFIG =================
@dataclass
class Config:
    """Runtime configuration. All analysis and timer knobs can be changed live."""

    # Display settings
    WINDOW_WIDTH: int = 1280
    WINDOW_HEIGHT: int = 720
    FPS_TARGET: int = 30
    WINDOW_NAME: str = "Pretzel Monitor"

    # Pose detection
    DETECTION_CONFIDENCE: float = 0.5
    TRACKING_CONFIDENCE: float = 0.5
    MODEL_COMPLEXITY: int = 1

    # Reference geometry
    NECK_EXTENSION: float = 0.5
    TRANSLATE_UP_OFFSET: float = 0.3  # normalized screen units

    # Classifier
    ANGLE_THRESHOLD: float = 20.0  # degrees, ears vs. vertical
    SECONDARY_ANGLE_THRESHOLD: float = 70.0  # degrees, shoulders-hips-knees
    FRAME_THRESHOLD: int = 30

    # Session timer
    RUN_DURATION: float = 120.0  # seconds
    PAUSE_DURATION: float = 20.0  # seconds
    TICK_SECONDS: float = 0.6

    # Notifications
    NOTIFICATION_COOLDOWN_SECONDS: float = 600.0
    ENABLE_VISUAL_ALERTS: bool = True
    ALERT_FLASH_DURATION: float = 3.0

    # UI settings
    HUD_MARGIN: int = 15
    TEXT_SCALE: float = 0.6
    TEXT_THICKNESS: int = 1

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_config()

    def _validate_config(self):
        """Validate configuration parameters."""
        if not (0.1 <= self.DETECTION_CONFIDENCE <= 1.0):
            raise ValueError("DETECTION_CONFIDENCE must be between 0.1 and 1.0")
        if not (0.1 <= self.TRACKING_CONFIDENCE <= 1.0):
            raise ValueError("TRACKING_CONFIDENCE must be between 0.1 and 1.0")
        if not (0 <= self.MODEL_COMPLEXITY <= 2):
            raise ValueError("MODEL_COMPLEXITY must be 0, 1, or 2")
        if self.NECK_EXTENSION < 0:
            raise ValueError("NECK_EXTENSION must not be negative")
        if not (0 <= self.ANGLE_THRESHOLD <= 90):
            raise ValueError("ANGLE_THRESHOLD must be between 0 and 90 degrees")
        if not (0 <= self.SECONDARY_ANGLE_THRESHOLD <= 180):
            raise ValueError("SECONDARY_ANGLE_THRESHOLD must be between 0 and 180 degrees")
        if int(self.FRAME_THRESHOLD) != self.FRAME_THRESHOLD or self.FRAME_THRESHOLD < 1:
            raise ValueError("FRAME_THRESHOLD must be a positive whole number of frames")
        if not (3 <= self.RUN_DURATION <= 180):
            raise ValueError("RUN_DURATION must be between 3 and 180 seconds")
        if not (0 <= self.PAUSE_DURATION <= 600):
            raise ValueError("PAUSE_DURATION must be between 0 and 600 seconds")
        if self.TICK_SECONDS <= 0:
            raise ValueError("TICK_SECONDS must be positive")
        if self.NOTIFICATION_COOLDOWN_SECONDS < 0:
            raise ValueError("NOTIFICATION_COOLDOWN_SECONDS must not be negative")

    def update(self, **changes):
        """Apply live changes; on invalid input the previous values are kept."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown config option(s): {', '.join(sorted(unknown))}")

        previous = asdict(self)
        for name, value in changes.items():
            setattr(self, name, value)
        try:
            self._validate_config()
        except ValueError:
            for name, value in previous.items():
                setattr(self, name, value)
            raise
