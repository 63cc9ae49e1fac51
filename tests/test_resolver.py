import unittest

from pretzel.resolver import FrameInput, ReferencePointResolver, pick_reference_side
from tests.frames import forward_head_frame, make_frame, upright_frame


class TestFrameInput(unittest.TestCase):

    def test_missing_landmarks_yield_none(self):
        self.assertIsNone(FrameInput.from_landmarks(None))
        self.assertIsNone(FrameInput.from_landmarks([]))
        self.assertIsNone(FrameInput.from_landmarks(upright_frame()[:20]))

    def test_picks_pairs_from_full_frame(self):
        frame = FrameInput.from_landmarks(upright_frame(), neck_extension=0.25)
        self.assertEqual(frame.neck_extension, 0.25)
        self.assertAlmostEqual(frame.shoulders[0].x, 0.4)
        self.assertAlmostEqual(frame.shoulders[1].x, 0.6)
        self.assertAlmostEqual(frame.ears[0].y, 0.3)
        self.assertAlmostEqual(frame.knees[1].x, 0.9)


class TestReferencePointResolver(unittest.TestCase):

    def test_side_follows_shoulder_visibility(self):
        left = FrameInput.from_landmarks(make_frame(visibility=(0.9, 0.2)))
        right = FrameInput.from_landmarks(make_frame(visibility=(0.2, 0.9)))
        unknown = FrameInput.from_landmarks(make_frame(visibility=(None, None)))
        self.assertEqual(pick_reference_side(left), 'left')
        self.assertEqual(pick_reference_side(right), 'right')
        self.assertEqual(pick_reference_side(unknown), 'right')

    def test_upright_angles(self):
        points, sample = ReferencePointResolver().resolve(FrameInput.from_landmarks(upright_frame()))
        self.assertAlmostEqual(sample.primary_angle, 0.0, places=4)
        self.assertAlmostEqual(sample.secondary_angle, 90.0, places=4)
        self.assertAlmostEqual(points.shoulder_midpoint.x, 0.5)
        self.assertAlmostEqual(points.normal_vertex.y, 0.2)
        self.assertAlmostEqual(points.knee_midpoint.x, 0.8)

    def test_forward_head_angle(self):
        _, sample = ReferencePointResolver().resolve(FrameInput.from_landmarks(forward_head_frame()))
        self.assertAlmostEqual(sample.primary_angle, 45.0, places=4)

    def test_hunched_torso_angle(self):
        # knees pulled up towards the shoulders
        frame = make_frame(knees=((0.7, 0.5), (0.9, 0.5)))
        _, sample = ReferencePointResolver().resolve(FrameInput.from_landmarks(frame))
        self.assertLess(sample.secondary_angle, 70.0)

    def test_reference_points_upright(self):
        frame = FrameInput.from_landmarks(make_frame(visibility=(0.9, 0.2)), neck_extension=0.5)
        along_torso, straight_up = ReferencePointResolver().reference_points(frame)
        self.assertAlmostEqual(along_torso.x, 0.4)
        self.assertAlmostEqual(along_torso.y, 0.0)
        self.assertAlmostEqual(straight_up.x, 0.4)
        self.assertAlmostEqual(straight_up.y, 0.0)

    def test_reference_point_follows_torso_lean(self):
        frame = FrameInput.from_landmarks(
            make_frame(shoulders=((0.7, 0.4), (0.9, 0.4)), visibility=(0.9, 0.2)),
            neck_extension=0.5)
        along_torso, straight_up = ReferencePointResolver().reference_points(frame)
        self.assertAlmostEqual(along_torso.x, 1.0)
        self.assertAlmostEqual(along_torso.y, 0.0)
        self.assertAlmostEqual(straight_up.x, 0.7)
        self.assertAlmostEqual(straight_up.y, -0.1)

    def test_reference_point_uses_more_visible_side(self):
        frame = FrameInput.from_landmarks(make_frame(visibility=(0.1, 0.9)))
        along_torso, _ = ReferencePointResolver().reference_points(frame)
        self.assertAlmostEqual(along_torso.x, 0.6)

    def test_degenerate_torso_keeps_shoulder(self):
        frame = FrameInput.from_landmarks(
            make_frame(hips=((0.4, 0.5), (0.6, 0.5)), visibility=(0.9, 0.2)))
        along_torso, _ = ReferencePointResolver().reference_points(frame)
        self.assertAlmostEqual(along_torso.x, 0.4)
        self.assertAlmostEqual(along_torso.y, 0.5)

    def test_collapsed_frame_is_total(self):
        frame = make_frame(ears=((0.5, 0.5), (0.5, 0.5)),
                           shoulders=((0.5, 0.5), (0.5, 0.5)),
                           hips=((0.5, 0.5), (0.5, 0.5)),
                           knees=((0.5, 0.5), (0.5, 0.5)))
        _, sample = ReferencePointResolver().resolve(FrameInput.from_landmarks(frame))
        self.assertEqual(sample.primary_angle, 90.0)
        self.assertEqual(sample.secondary_angle, 90.0)


if __name__ == '__main__':
    unittest.main(verbosity=2)
