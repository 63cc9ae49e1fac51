import unittest

from pretzel.config import Config
from pretzel.engine import PostureEngine
from tests.frames import forward_head_frame, upright_frame


class TestPostureEngine(unittest.TestCase):
    """End-to-end frame analysis"""

    def setUp(self):
        self.config = Config(ANGLE_THRESHOLD=20, FRAME_THRESHOLD=30)
        self.engine = PostureEngine(self.config)
        self.changes = []
        self.engine.add_verdict_callback(self.changes.append)

    def test_frames_without_landmarks_are_skipped(self):
        self.assertIsNone(self.engine.process(None))
        self.assertIsNone(self.engine.process([]))
        self.assertEqual(self.engine.classifier.frame_count, 0)
        self.assertIsNone(self.engine.last_sample)

    def test_upright_posture_is_not_a_pretzel(self):
        results = [self.engine.process(upright_frame()) for _ in range(31)]
        last = results[-1]
        self.assertTrue(last.evaluated)
        self.assertFalse(any(r.evaluated for r in results[:-1]))
        self.assertAlmostEqual(last.sample.primary_angle, 0.0, places=4)
        self.assertFalse(last.verdict.is_pretzel)
        self.assertEqual(self.changes, [])

    def test_forward_head_becomes_pretzel(self):
        for _ in range(31):
            analysis = self.engine.process(forward_head_frame())
        self.assertTrue(analysis.verdict.is_pretzel)
        self.assertAlmostEqual(analysis.verdict.average_angle, 45.0, places=4)
        self.assertEqual(len(self.changes), 1)

    def test_analysis_carries_geometry_for_rendering(self):
        analysis = self.engine.process(upright_frame())
        self.assertEqual(len(analysis.landmarks_used), 8)
        self.assertAlmostEqual(analysis.points.shoulder_midpoint.y, 0.5)
        self.assertAlmostEqual(analysis.points.ear_midpoint.y, 0.3)

    def test_neck_extension_is_read_live(self):
        before = self.engine.process(upright_frame()).points.reference_point_shoulder_only
        self.config.update(NECK_EXTENSION=0.25)
        after = self.engine.process(upright_frame()).points.reference_point_shoulder_only
        self.assertAlmostEqual(before.y, 0.0)
        self.assertAlmostEqual(after.y, 0.25)

    def test_one_resolver_reads_offset_live(self):
        resolver = self.engine.resolver
        self.config.update(TRANSLATE_UP_OFFSET=0.1)
        analysis = self.engine.process(upright_frame())
        self.assertIs(self.engine.resolver, resolver)
        self.assertAlmostEqual(analysis.points.normal_vertex.y, 0.4)

    def test_reset_clears_window(self):
        for _ in range(10):
            self.engine.process(upright_frame())
        self.engine.reset()
        self.assertEqual(self.engine.classifier.frame_count, 0)
        self.assertIsNone(self.engine.last_sample)


if __name__ == '__main__':
    unittest.main(verbosity=2)
