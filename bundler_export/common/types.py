"""Common definitions for entity handles and camera types."""

import gtsam  # type: ignore
import numpy as np

# Opaque handles assigned by a Reconstruction.
ViewId = int
TrackId = int

# A 2d pixel observation (x, y), with the origin at the top-left corner of the image and y pointing down.
Feature = np.ndarray

CAMERA_TYPE = gtsam.PinholeCameraCal3Bundler


def create_default_camera() -> CAMERA_TYPE:
    """Returns an identity-pose camera with default Bundler intrinsics."""
    return gtsam.PinholeCameraCal3Bundler(gtsam.Pose3(), gtsam.Cal3Bundler())
