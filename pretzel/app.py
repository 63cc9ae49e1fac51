import argparse
import logging
from typing import Optional

import cv2
import numpy as np

from .camera import CameraCapture
from .config import Config
from .engine import PostureEngine
from .log import setup_logging
from .notification import PretzelNotifier
from .overlay import OverlayRenderer
from .pose import PoseDetector
from .timer import SessionTimer


# ================= APPLICATION =================
class PretzelApp:
    """Wires camera, pose model, engine, timer and overlay into one loop."""

    def __init__(self, config: Config, camera_index: int = 0,
                 logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        try:
            self.camera = CameraCapture(camera_index, config, self.logger)
            self.detector = PoseDetector(config, self.logger)
            self.engine = PostureEngine(config, self.logger)
            self.notifier = PretzelNotifier(config, logger=self.logger)
            self.renderer = OverlayRenderer(config, self.logger)
            self.timer = SessionTimer(config, self.camera, logger=self.logger)
        except Exception as e:
            self.logger.error(f"Failed to initialize components: {e}")
            raise

        self.engine.add_verdict_callback(self.notifier.on_verdict)
        if config.ENABLE_VISUAL_ALERTS:
            self.notifier.add_handler(self.renderer.trigger_alert_flash)

    def toggle_session(self):
        if self.timer.is_active:
            self.timer.force_stop()
        else:
            self.engine.reset()
            self.timer.start()

    def adjust(self, name: str, delta):
        try:
            self.config.update(**{name: getattr(self.config, name) + delta})
            self.logger.info(f"{name} set to {getattr(self.config, name)}")
        except ValueError as e:
            self.logger.warning(f"Ignoring change: {e}")

    def handle_key(self, key: int) -> bool:
        """Handle a keypress; returns False when the app should quit."""
        if key == ord('q') or key == 27:  # Q or ESC
            self.logger.info("Shutting down application")
            return False
        elif key == ord(' '):
            self.toggle_session()
        elif key in (ord('+'), ord('=')):
            self.adjust('ANGLE_THRESHOLD', 1)
        elif key == ord('-'):
            self.adjust('ANGLE_THRESHOLD', -1)
        elif key == ord(']'):
            self.adjust('FRAME_THRESHOLD', 5)
        elif key == ord('['):
            self.adjust('FRAME_THRESHOLD', -5)
        return True

    def step(self) -> np.ndarray:
        """Run one loop iteration and return the frame to display."""
        self.timer.poll()

        frame = self.camera.read() if self.timer.is_running else None
        if frame is None:
            frame = np.zeros((self.config.WINDOW_HEIGHT, self.config.WINDOW_WIDTH, 3), dtype=np.uint8)
        else:
            analysis = self.engine.process(self.detector.process(frame))
            if analysis is not None:
                self.renderer.draw_geometry(frame, analysis)

        self.renderer.draw_hud(frame, self.engine.verdict, self.engine.last_sample, self.timer)
        return frame

    def run(self):
        """Main application loop."""
        try:
            cv2.namedWindow(self.config.WINDOW_NAME, cv2.WINDOW_AUTOSIZE)
            self.logger.info("Starting pretzel monitor")
            self.logger.info("Controls: SPACE=Start/Stop, +/-=Angle threshold, [/]=Frames, Q=Quit")

            while True:
                frame = self.step()
                cv2.imshow(self.config.WINDOW_NAME, frame)

                key = cv2.waitKey(1 if self.timer.is_running else 30) & 0xFF
                if not self.handle_key(key):
                    break
        finally:
            self.timer.force_stop()
            self.detector.close()
            cv2.destroyAllWindows()
            self.logger.info("Application shutdown complete")


# ================= MAIN ENTRY POINT =================
def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    defaults = Config()
    parser = argparse.ArgumentParser(description="Pretzel posture monitor")

    parser.add_argument('--camera', '-c', type=int, default=0,
                        help='Camera index (default: 0)')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    parser.add_argument('--window-width', type=int, default=defaults.WINDOW_WIDTH,
                        help='Window width')
    parser.add_argument('--window-height', type=int, default=defaults.WINDOW_HEIGHT,
                        help='Window height')
    parser.add_argument('--neck-extension', type=float, default=defaults.NECK_EXTENSION,
                        help='Length of the synthetic neck reference (normalized units)')
    parser.add_argument('--angle-threshold', type=float, default=defaults.ANGLE_THRESHOLD,
                        help='Ear/shoulder angle above which you are a pretzel (degrees)')
    parser.add_argument('--frame-threshold', type=int, default=defaults.FRAME_THRESHOLD,
                        help='Frames to analyze before giving a verdict')
    parser.add_argument('--run-duration', type=float, default=defaults.RUN_DURATION,
                        help='Seconds to run the analyzer')
    parser.add_argument('--pause-duration', type=float, default=defaults.PAUSE_DURATION,
                        help='Seconds to pause (camera off) between runs')

    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    return Config(
        WINDOW_WIDTH=args.window_width,
        WINDOW_HEIGHT=args.window_height,
        NECK_EXTENSION=args.neck_extension,
        ANGLE_THRESHOLD=args.angle_threshold,
        FRAME_THRESHOLD=args.frame_threshold,
        RUN_DURATION=args.run_duration,
        PAUSE_DURATION=args.pause_duration,
    )


def main(argv=None):
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    logger = setup_logging(args.log_level)

    try:
        config = config_from_args(args)
        app = PretzelApp(config, args.camera, logger)
        app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise
