"""Functions to write a reconstruction in the Bundler format, i.e. a `list.txt` and a `bundle.out` file.

Reference: https://www.cs.cornell.edu/~snavely/bundler/bundler-v0.4-manual.html#S6
"""
import glob
import os
from typing import Dict, List, TextIO, Union

import numpy as np

import bundler_export.utils.coordinate_conversions as conversion_utils
import bundler_export.utils.logger as logger_utils
from bundler_export.common.reconstruction import MIN_TRACK_LENGTH, Reconstruction
from bundler_export.common.types import ViewId

logger = logger_utils.get_logger()

IMG_EXTENSIONS = ["png", "PNG", "jpg", "JPG"]

BUNDLE_FILE_HEADER = "# Bundle file v0.3"
# Point colors are not tracked, so every point is written as white.
PLACEHOLDER_COLOR = (255, 255, 255)
# Keypoint index within the image's key file. We do not keep key files.
KEYPOINT_INDEX_PLACEHOLDER = 0

PathType = Union[str, os.PathLike]


def format_float(value: float) -> str:
    """Formats a number with full (17 significant digit) precision, without padding or trailing zeros."""
    return format(float(value), ".17g")


def format_row(values: np.ndarray) -> str:
    """Formats a vector as space-separated full-precision numbers."""
    return " ".join(format_float(v) for v in np.asarray(values).reshape(-1))


def write_bundler_files(
    reconstruction: Reconstruction,
    lists_file: PathType,
    bundle_file: PathType,
    min_track_length: int = MIN_TRACK_LENGTH,
) -> bool:
    """Writes the estimated part of a reconstruction as a Bundler list file and bundle file.

    Only estimated views, and estimated tracks seen by at least `min_track_length` views, are written. The input
    reconstruction is not modified. If the list file cannot be written, the bundle file is not attempted. A list
    file which was written is kept even if writing the bundle file fails.

    Args:
        reconstruction: Scene to export.
        lists_file: Path of the list file to create or overwrite.
        bundle_file: Path of the bundle file to create or overwrite.
        min_track_length (optional): Minimum number of observing views for a track to be exported.

    Returns:
        True if both files were written successfully.
    """
    estimated_reconstruction = reconstruction.estimated_subreconstruction(min_track_length)

    if not write_lists_file(estimated_reconstruction, lists_file):
        return False

    return write_bundle_file(estimated_reconstruction, bundle_file)


def write_lists_file(reconstruction: Reconstruction, lists_file: PathType) -> bool:
    """Writes the list file, with one line per view: its name and, if known, the focal length prior.

    A line reads `<name>` or `<name> 0 <focal_length>`.

    Args:
        reconstruction: Scene whose views are written, in view id order.
        lists_file: Path of the file to create or overwrite.

    Returns:
        False if the file could not be opened or written.
    """
    try:
        with open(lists_file, "w") as f:
            for view_id in reconstruction.view_ids():
                view = reconstruction.get_view(view_id)
                if view is None:
                    continue

                line = view.name
                prior = view.camera_intrinsics_prior
                if prior.is_focal_length_set:
                    line += f" 0 {format_float(prior.focal_length)}"
                f.write(line + "\n")
    except OSError:
        logger.exception("Cannot write the list file: %s", lists_file)
        return False

    logger.info("Wrote %d views to %s", reconstruction.number_views(), lists_file)
    return True


def write_bundle_file(reconstruction: Reconstruction, bundle_file: PathType) -> bool:
    """Writes the bundle file: the header, then all cameras, then all points with their observations.

    Args:
        reconstruction: Scene to write. Views and tracks are written in id order.
        bundle_file: Path of the file to create or overwrite.

    Returns:
        False if the file could not be opened or written.
    """
    try:
        with open(bundle_file, "w") as f:
            f.write(BUNDLE_FILE_HEADER + "\n")
            f.write(f"{reconstruction.number_views()} {reconstruction.number_tracks()}\n")

            view_id_to_index = _write_cameras(f, reconstruction)
            _write_points(f, reconstruction, view_id_to_index)
    except OSError:
        logger.exception("Cannot write the bundle file: %s", bundle_file)
        return False

    logger.info(
        "Wrote %d cameras and %d points to %s",
        reconstruction.number_views(),
        reconstruction.number_tracks(),
        bundle_file,
    )
    return True


def _write_cameras(f: TextIO, reconstruction: Reconstruction) -> Dict[ViewId, int]:
    """Writes one block per view and returns the index of each view in the camera section.

    Each block holds `<f> <k1> <k2>`, three rows of the rotation and one row of the translation.
    """
    view_id_to_index: Dict[ViewId, int] = {}
    for view_id in reconstruction.view_ids():
        view = reconstruction.get_view(view_id)
        if view is None:
            continue

        view_id_to_index[view_id] = len(view_id_to_index)
        calibration = view.camera.calibration()
        f.write(f"{format_float(calibration.fx())} {format_float(calibration.k1())} {format_float(calibration.k2())}\n")

        rotation, translation = conversion_utils.camera_extrinsics_to_bundler(view.camera)
        for row in rotation:
            f.write(format_row(row) + "\n")
        f.write(format_row(translation) + "\n")

    return view_id_to_index


def _write_points(f: TextIO, reconstruction: Reconstruction, view_id_to_index: Dict[ViewId, int]) -> None:
    """Writes one block per track: its position, its color and its observations.

    Observations by views which are missing from `view_id_to_index` are skipped, and the observation count only
    includes the written observations.
    """
    color_line = " ".join(str(c) for c in PLACEHOLDER_COLOR)
    for track_id in reconstruction.track_ids():
        track = reconstruction.get_track(track_id)
        if track is None:
            continue

        f.write(format_row(track.point3()) + "\n")
        f.write(color_line + "\n")

        observations: List[str] = []
        for view_id in track.view_ids():
            index = view_id_to_index.get(view_id)
            if index is None:
                continue
            view = reconstruction.get_view(view_id)
            feature = view.get_feature(track_id)
            if feature is None:
                continue

            calibration = view.camera.calibration()
            adjusted_feature = conversion_utils.feature_to_bundler(feature, (calibration.px(), calibration.py()))
            observations.append(f" {index} {KEYPOINT_INDEX_PLACEHOLDER} {format_row(adjusted_feature)}")

        # The count matches the written entries, not the observers of the track.
        f.write(str(len(observations)) + "".join(observations) + "\n")


def get_sorted_image_names_in_dir(dir_path: str) -> List[str]:
    """Finds all jpg and png images in directory and returns their file names in sorted order.

    Args:
        dir_path: Path to directory containing images.

    Returns:
        image_names: List of image file names in sorted order.
    """
    image_paths = []
    for extension in IMG_EXTENSIONS:
        search_path = os.path.join(dir_path, f"*.{extension}")
        image_paths.extend(glob.glob(search_path))

    return sorted(os.path.basename(path) for path in image_paths)
