import logging
import unittest

import numpy as np

from pretzel.app import PretzelApp
from pretzel.config import Config
from pretzel.engine import PostureEngine
from pretzel.overlay import OverlayRenderer
from pretzel.timer import SessionTimer
from tests.frames import FakeClock, upright_frame


class FakeCamera:
    def __init__(self, config):
        self.config = config
        self.started = False

    def start(self):
        self.started = True

    def stop(self):
        self.started = False

    def read(self):
        if not self.started:
            return None
        return np.zeros((self.config.WINDOW_HEIGHT, self.config.WINDOW_WIDTH, 3), dtype=np.uint8)


class FakeDetector:
    def __init__(self):
        self.calls = 0

    def process(self, frame):
        self.calls += 1
        return upright_frame()


def build_app(config):
    """PretzelApp wired with fakes instead of a webcam and pose model."""
    app = PretzelApp.__new__(PretzelApp)
    app.config = config
    app.logger = logging.getLogger('pretzel.app')
    app.camera = FakeCamera(config)
    app.detector = FakeDetector()
    app.engine = PostureEngine(config)
    app.renderer = OverlayRenderer(config)
    app.timer = SessionTimer(config, app.camera, clock=FakeClock())
    return app


class TestPretzelApp(unittest.TestCase):
    """Keyboard controls and the per-iteration step"""

    def setUp(self):
        self.config = Config(WINDOW_WIDTH=320, WINDOW_HEIGHT=240)
        self.app = build_app(self.config)

    def test_space_starts_and_stops_session(self):
        for _ in range(5):
            self.app.engine.process(upright_frame())

        self.assertTrue(self.app.handle_key(ord(' ')))
        self.assertTrue(self.app.timer.is_running)
        self.assertTrue(self.app.camera.started)
        self.assertEqual(self.app.engine.classifier.frame_count, 0)

        self.assertTrue(self.app.handle_key(ord(' ')))
        self.assertFalse(self.app.timer.is_active)
        self.assertFalse(self.app.camera.started)

    def test_threshold_keys_update_config(self):
        self.app.handle_key(ord('+'))
        self.assertEqual(self.config.ANGLE_THRESHOLD, 21)
        self.app.handle_key(ord('-'))
        self.app.handle_key(ord('-'))
        self.assertEqual(self.config.ANGLE_THRESHOLD, 19)

        self.app.handle_key(ord(']'))
        self.assertEqual(self.config.FRAME_THRESHOLD, 35)
        self.app.handle_key(ord('['))
        self.assertEqual(self.config.FRAME_THRESHOLD, 30)

    def test_invalid_change_is_rolled_back(self):
        self.config.update(FRAME_THRESHOLD=5)
        with self.assertLogs('pretzel.app', level='WARNING'):
            self.app.handle_key(ord('['))
        self.assertEqual(self.config.FRAME_THRESHOLD, 5)

    def test_quit_keys(self):
        self.assertFalse(self.app.handle_key(ord('q')))
        self.assertFalse(self.app.handle_key(27))
        self.assertTrue(self.app.handle_key(ord('x')))

    def test_step_skips_analysis_while_idle(self):
        frame = self.app.step()
        self.assertEqual(frame.shape, (240, 320, 3))
        self.assertEqual(self.app.detector.calls, 0)
        self.assertEqual(self.app.engine.classifier.frame_count, 0)

    def test_step_analyzes_while_running(self):
        self.app.toggle_session()
        frame = self.app.step()
        self.assertEqual(frame.shape, (240, 320, 3))
        self.assertEqual(self.app.detector.calls, 1)
        self.assertEqual(self.app.engine.classifier.frame_count, 1)
        self.assertIsNotNone(self.app.engine.last_sample)


if __name__ == '__main__':
    unittest.main(verbosity=2)
