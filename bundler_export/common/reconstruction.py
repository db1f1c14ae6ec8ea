"""Class to hold the views and tracks of a 3D scene, as estimated by a structure-from-motion pipeline."""

import copy
from typing import Dict, List, Mapping, Optional, Sequence

import gtsam  # type: ignore
import numpy as np

import bundler_export.utils.logger as logger_utils
from bundler_export.common.track import Track
from bundler_export.common.types import CAMERA_TYPE, Feature, TrackId, ViewId
from bundler_export.common.view import CameraIntrinsicsPrior, View

logger = logger_utils.get_logger()

MIN_TRACK_LENGTH = 2


class Reconstruction:
    """Class containing views and tracks, keyed by opaque integer ids.

    Ids are handed out in increasing order and never reused. Iterating over `view_ids()` and `track_ids()` follows
    insertion order, which also decides the order of cameras and points in exported files.
    """

    def __init__(self) -> None:
        self._views: Dict[ViewId, View] = {}
        self._tracks: Dict[TrackId, Track] = {}
        self._view_name_to_id: Dict[str, ViewId] = {}
        self._next_view_id: ViewId = 0
        self._next_track_id: TrackId = 0

    def __repr__(self) -> str:
        """String representation of the object."""
        return f"Reconstruction(num_views={len(self._views)}, num_tracks={len(self._tracks)})"

    def __eq__(self, other: object) -> bool:
        """Checks equality with the other object."""
        if not isinstance(other, Reconstruction):
            return False

        if self.view_ids() != other.view_ids() or self.track_ids() != other.track_ids():
            return False

        for view_id, view in self._views.items():
            if view != other.get_view(view_id):
                return False

        for track_id, track in self._tracks.items():
            if track != other.get_track(track_id):
                return False

        return True

    @classmethod
    def from_sfm_data(cls, sfm_data: gtsam.SfmData, image_names: Optional[Sequence[str]] = None) -> "Reconstruction":
        """Initialize from a gtsam.SfmData instance.

        All cameras and tracks of the SfmData are marked as estimated.

        Args:
            sfm_data: camera parameters and point tracks.
            image_names (optional): name for each camera, in camera order. Defaults to `image_<i>`.

        Returns:
            A new Reconstruction instance.
        """
        num_cameras = sfm_data.numberCameras()
        if image_names is None:
            image_names = [f"image_{i}" for i in range(num_cameras)]
        if len(image_names) != num_cameras:
            raise ValueError(f"Got {len(image_names)} image names for {num_cameras} cameras.")

        reconstruction = cls()
        camera_idx_to_view_id = {}
        for i in range(num_cameras):
            camera_idx_to_view_id[i] = reconstruction.add_view(
                image_names[i], camera=sfm_data.camera(i), is_estimated=True
            )

        for j in range(sfm_data.numberTracks()):
            sfm_track = sfm_data.track(j)
            observations = {}
            for k in range(sfm_track.numberMeasurements()):
                i, uv = sfm_track.measurement(k)
                observations[camera_idx_to_view_id[i]] = uv
            reconstruction.add_track(observations, point=sfm_track.point3(), is_estimated=True)

        return reconstruction

    @classmethod
    def read_bal(cls, file_path: str, image_names: Optional[Sequence[str]] = None) -> "Reconstruction":
        """Read a "Bundle Adjustment in the Large" (BAL) file.

        See https://grail.cs.washington.edu/projects/bal/ for more details on the format.

        Args:
            file_path: File path of the BAL file.
            image_names (optional): name for each camera, in camera order.

        Returns:
            The data as a Reconstruction object.
        """
        sfm_data = gtsam.readBal(str(file_path))
        return cls.from_sfm_data(sfm_data, image_names)

    def number_views(self) -> int:
        """Returns the number of views."""
        return len(self._views)

    def number_tracks(self) -> int:
        """Returns the number of tracks."""
        return len(self._tracks)

    def view_ids(self) -> List[ViewId]:
        """Returns all view ids, in insertion order."""
        return list(self._views.keys())

    def track_ids(self) -> List[TrackId]:
        """Returns all track ids, in insertion order."""
        return list(self._tracks.keys())

    def get_view(self, view_id: ViewId) -> Optional[View]:
        """Returns view for given id, or None."""
        return self._views.get(view_id)

    def get_track(self, track_id: TrackId) -> Optional[Track]:
        """Returns track for given id, or None."""
        return self._tracks.get(track_id)

    def view_id_from_name(self, name: str) -> Optional[ViewId]:
        return self._view_name_to_id.get(name)

    def add_view(
        self,
        name: str,
        camera: Optional[CAMERA_TYPE] = None,
        intrinsics_prior: Optional[CameraIntrinsicsPrior] = None,
        is_estimated: bool = False,
    ) -> ViewId:
        """Adds a new view and returns its id.

        Raises:
            ValueError: if a view with the same name already exists.
        """
        if name in self._view_name_to_id:
            raise ValueError(f"A view named {name} already exists in the reconstruction")

        view_id = self._next_view_id
        self._next_view_id += 1
        self._views[view_id] = View(
            name, camera=camera, camera_intrinsics_prior=intrinsics_prior, is_estimated=is_estimated
        )
        self._view_name_to_id[name] = view_id
        return view_id

    def add_track(
        self,
        observations: Mapping[ViewId, Feature],
        point: Optional[np.ndarray] = None,
        is_estimated: bool = False,
    ) -> TrackId:
        """Adds a new track observed by the given views, and returns its id.

        The feature of each observation is also recorded on the observing view.

        Raises:
            ValueError: if any observing view is not in the reconstruction.
        """
        for view_id in observations:
            if view_id not in self._views:
                raise ValueError(f"Cannot add a track observed by view {view_id}, which does not exist")

        track_id = self._next_track_id
        self._next_track_id += 1
        track = Track(point, is_estimated=is_estimated)
        for view_id, feature in observations.items():
            track.add_view(view_id)
            self._views[view_id].add_feature(track_id, feature)
        self._tracks[track_id] = track
        return track_id

    def remove_view(self, view_id: ViewId) -> bool:
        """Removes the view. Tracks which list it as an observer are left untouched.

        Returns:
            False if the view does not exist.
        """
        view = self._views.pop(view_id, None)
        if view is None:
            return False
        del self._view_name_to_id[view.name]
        return True

    def remove_track(self, track_id: TrackId) -> bool:
        """Removes the track. Features recorded on the observing views are left untouched.

        Returns:
            False if the track does not exist.
        """
        return self._tracks.pop(track_id, None) is not None

    def estimated_subreconstruction(self, min_track_length: int = MIN_TRACK_LENGTH) -> "Reconstruction":
        """Creates a copy which only contains the estimated views and the estimated, well-observed tracks.

        A track is kept if it is estimated and has at least `min_track_length` observing views. The observer count
        is taken from this reconstruction, i.e. views which get removed for not being estimated still count.
        This reconstruction is not modified.

        Args:
            min_track_length (optional): minimum number of views observing a kept track.

        Returns:
            New Reconstruction with the ineligible views and tracks removed.
        """
        subreconstruction = copy.deepcopy(self)

        for view_id in subreconstruction.view_ids():
            view = subreconstruction.get_view(view_id)
            if view is None:
                continue

            if not view.is_estimated:
                subreconstruction.remove_view(view_id)

        for track_id in subreconstruction.track_ids():
            track = subreconstruction.get_track(track_id)
            if track is None:
                continue

            if not track.is_estimated or track.number_views() < min_track_length:
                subreconstruction.remove_track(track_id)

        logger.info(
            "Kept %d of %d views and %d of %d tracks for export.",
            subreconstruction.number_views(),
            self.number_views(),
            subreconstruction.number_tracks(),
            self.number_tracks(),
        )
        return subreconstruction
