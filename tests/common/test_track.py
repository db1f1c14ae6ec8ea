"""Unit tests for the Track class."""

import numpy as np
from gtsam.utils.test_case import GtsamTestCase

from bundler_export.common.track import Track


class TestTrack(GtsamTestCase):
    def test_default_point_is_origin(self) -> None:
        track = Track()
        np.testing.assert_allclose(track.point, [0, 0, 0, 1])
        self.assertFalse(track.is_estimated)
        self.assertEqual(track.number_views(), 0)

    def test_point3_dehomogenizes(self) -> None:
        """Ensure the Euclidean point is obtained by dividing through by the homogeneous scale."""
        track = Track(np.array([2.0, -4.0, 8.0, 2.0]), is_estimated=True)
        np.testing.assert_allclose(track.point3(), [1.0, -2.0, 4.0])

    def test_euclidean_point_gets_unit_scale(self) -> None:
        track = Track(np.array([1.0, 2.0, 3.0]))
        np.testing.assert_allclose(track.point, [1.0, 2.0, 3.0, 1.0])

    def test_invalid_point_shape_raises(self) -> None:
        with self.assertRaises(ValueError):
            Track(np.array([1.0, 2.0]))

    def test_add_view_keeps_insertion_order(self) -> None:
        track = Track()
        self.assertTrue(track.add_view(5))
        self.assertTrue(track.add_view(2))
        self.assertTrue(track.add_view(9))
        self.assertFalse(track.add_view(2))
        self.assertEqual(track.view_ids(), [5, 2, 9])
        self.assertEqual(track.number_views(), 3)

    def test_remove_view(self) -> None:
        track = Track()
        track.add_view(0)
        track.add_view(1)
        self.assertTrue(track.remove_view(0))
        self.assertFalse(track.remove_view(0))
        self.assertEqual(track.view_ids(), [1])

    def test_eq(self) -> None:
        track_1 = Track(np.array([1.0, 2.0, 3.0, 1.0]), is_estimated=True)
        track_1.add_view(0)
        track_2 = Track(np.array([2.0, 4.0, 6.0, 2.0]) / 2, is_estimated=True)
        track_2.add_view(0)
        self.assertEqual(track_1, track_2)

        track_2.add_view(1)
        self.assertNotEqual(track_1, track_2)
