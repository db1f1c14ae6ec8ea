"""Class for a 3d landmark in homogeneous coordinates, and the views which observe it."""

from typing import Dict, List, Optional

import numpy as np

import bundler_export.utils.coordinate_conversions as conversion_utils
from bundler_export.common.types import ViewId


class Track:
    """A 3d point seen in multiple views.

    The point is stored in homogeneous coordinates (x, y, z, w). Observing views are kept in the order in which
    they were added, which fixes the order of observations in exported files.
    """

    def __init__(self, point: Optional[np.ndarray] = None, is_estimated: bool = False) -> None:
        """Initializes the track.

        Args:
            point (optional): homogeneous 4-vector, or a Euclidean 3-vector which gets a unit scale appended.
                Defaults to the origin.
            is_estimated (optional): whether the 3d point was triangulated by the SfM pipeline.
        """
        self.point = np.array([0.0, 0.0, 0.0, 1.0]) if point is None else point
        self.is_estimated = is_estimated
        # dict used as an insertion-ordered set.
        self._view_ids: Dict[ViewId, None] = {}

    def __repr__(self) -> str:
        return f"Track(point={self._point.tolist()}, is_estimated={self.is_estimated}, views={self.view_ids()})"

    def __eq__(self, other: object) -> bool:
        """Checks equality with the other object."""
        if not isinstance(other, Track):
            return False

        return (
            self.is_estimated == other.is_estimated
            and self.view_ids() == other.view_ids()
            and np.allclose(self._point, other.point)
        )

    @property
    def point(self) -> np.ndarray:
        """Homogeneous coordinates of the point."""
        return self._point

    @point.setter
    def point(self, value: np.ndarray) -> None:
        value = np.asarray(value, dtype=np.float64).reshape(-1)
        if value.shape == (3,):
            value = np.append(value, 1.0)
        if value.shape != (4,):
            raise ValueError(f"Track point must have 3 or 4 coordinates, got shape {value.shape}")
        self._point = value

    def point3(self) -> np.ndarray:
        """Returns the Euclidean (dehomogenized) coordinates of the point."""
        return conversion_utils.dehomogenize(self._point)

    def add_view(self, view_id: ViewId) -> bool:
        """Adds an observing view; returns False if the view already observes the track."""
        if view_id in self._view_ids:
            return False
        self._view_ids[view_id] = None
        return True

    def remove_view(self, view_id: ViewId) -> bool:
        if view_id not in self._view_ids:
            return False
        del self._view_ids[view_id]
        return True

    def view_ids(self) -> List[ViewId]:
        """Returns the ids of the observing views, in insertion order."""
        return list(self._view_ids.keys())

    def number_views(self) -> int:
        return len(self._view_ids)
