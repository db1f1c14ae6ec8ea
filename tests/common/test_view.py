"""Unit tests for the View class."""

import unittest

import numpy as np
from gtsam import Cal3Bundler, PinholeCameraCal3Bundler, Pose3

from bundler_export.common.view import CameraIntrinsicsPrior, View


class TestView(unittest.TestCase):
    def test_defaults(self) -> None:
        view = View("a.jpg")
        self.assertEqual(view.name, "a.jpg")
        self.assertFalse(view.is_estimated)
        self.assertFalse(view.camera_intrinsics_prior.is_focal_length_set)
        self.assertTrue(view.camera.pose().equals(Pose3(), 1e-9))
        self.assertEqual(view.number_features(), 0)

    def test_focal_length_prior(self) -> None:
        prior = CameraIntrinsicsPrior(focal_length=1500.0)
        view = View("a.jpg", camera_intrinsics_prior=prior)
        self.assertTrue(view.camera_intrinsics_prior.is_focal_length_set)
        self.assertEqual(view.camera_intrinsics_prior.focal_length, 1500.0)

    def test_features(self) -> None:
        view = View("a.jpg")
        view.add_feature(3, np.array([10.0, 20.0]))
        view.add_feature(1, [5, 6])

        np.testing.assert_allclose(view.get_feature(3), [10.0, 20.0])
        self.assertEqual(view.get_feature(1).dtype, np.float64)
        self.assertIsNone(view.get_feature(7))
        self.assertEqual(view.track_ids(), [3, 1])

        self.assertTrue(view.remove_feature(3))
        self.assertFalse(view.remove_feature(3))
        self.assertEqual(view.number_features(), 1)

    def test_eq(self) -> None:
        camera = PinholeCameraCal3Bundler(Pose3(), Cal3Bundler(500, 0, 0, 320, 240))
        view_1 = View("a.jpg", camera=camera, is_estimated=True)
        view_2 = View("a.jpg", camera=camera, is_estimated=True)
        view_1.add_feature(0, np.array([1.0, 2.0]))
        view_2.add_feature(0, np.array([1.0, 2.0]))
        self.assertEqual(view_1, view_2)

        view_2.is_estimated = False
        self.assertNotEqual(view_1, view_2)


if __name__ == "__main__":
    unittest.main()
