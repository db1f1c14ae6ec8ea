"""Class for holding a view (an image with an estimated camera) and its 2d observations."""

from typing import Dict, List, NamedTuple, Optional

import numpy as np

from bundler_export.common.types import CAMERA_TYPE, Feature, TrackId, create_default_camera


class CameraIntrinsicsPrior(NamedTuple):
    """Externally supplied intrinsics, e.g. a focal length (in pixels) derived from EXIF."""

    focal_length: Optional[float] = None

    @property
    def is_focal_length_set(self) -> bool:
        return self.focal_length is not None


class View:
    """An image in the reconstruction, with its camera and the features which observe tracks."""

    def __init__(
        self,
        name: str,
        camera: Optional[CAMERA_TYPE] = None,
        camera_intrinsics_prior: Optional[CameraIntrinsicsPrior] = None,
        is_estimated: bool = False,
    ) -> None:
        """Initializes the view.

        Args:
            name: human-readable name of the view, usually the image file name.
            camera (optional): camera of the view. Defaults to an identity-pose camera.
            camera_intrinsics_prior (optional): prior on the intrinsics. Defaults to an empty prior.
            is_estimated (optional): whether the camera pose was estimated by the SfM pipeline.
        """
        if name is None:
            raise ValueError("View name cannot be None")

        self._name = name
        self.camera: CAMERA_TYPE = camera if camera is not None else create_default_camera()
        self.camera_intrinsics_prior = (
            camera_intrinsics_prior if camera_intrinsics_prior is not None else CameraIntrinsicsPrior()
        )
        self.is_estimated = is_estimated
        self._features: Dict[TrackId, Feature] = {}

    def __repr__(self) -> str:
        return (
            f"View(name={self._name}, is_estimated={self.is_estimated}, num_features={len(self._features)})"
        )

    def __eq__(self, other: object) -> bool:
        """Checks equality with the other object."""
        if not isinstance(other, View):
            return False

        if self._name != other.name or self.is_estimated != other.is_estimated:
            return False

        if self.camera_intrinsics_prior != other.camera_intrinsics_prior:
            return False

        if not self.camera.equals(other.camera, 1e-9):  # type: ignore
            return False

        if self.track_ids() != other.track_ids():
            return False

        return all(np.allclose(feature, other.get_feature(track_id)) for track_id, feature in self._features.items())

    @property
    def name(self) -> str:
        return self._name

    def add_feature(self, track_id: TrackId, feature: Feature) -> None:
        """Records the 2d observation of a track in this view, replacing any previous one."""
        self._features[track_id] = np.asarray(feature, dtype=np.float64)

    def get_feature(self, track_id: TrackId) -> Optional[Feature]:
        """Returns the observation of the track in this view, or None."""
        return self._features.get(track_id)

    def remove_feature(self, track_id: TrackId) -> bool:
        """Removes the observation of the track; returns False if the track was not observed."""
        return self._features.pop(track_id, None) is not None

    def track_ids(self) -> List[TrackId]:
        """Returns the ids of all tracks observed in this view."""
        return list(self._features.keys())

    def number_features(self) -> int:
        return len(self._features)
