"""Utility functions to convert cameras, points and features into the Bundler conventions.

Bundler cameras look down the -z axis with +y up, while our cameras look down +z with +y down. Bundler pixel
coordinates have their origin at the principal point with +y up, while ours have the origin at the top-left corner
with +y down.

Reference: https://www.cs.cornell.edu/~snavely/bundler/bundler-v0.4-manual.html#S6
"""
from typing import Tuple

import numpy as np

from bundler_export.common.types import CAMERA_TYPE, Feature

# Flips the y and z axes of the camera frame.
THEIA_TO_BUNDLER = np.diag([1.0, -1.0, -1.0])


def camera_extrinsics_to_bundler(camera: CAMERA_TYPE) -> Tuple[np.ndarray, np.ndarray]:
    """Converts the pose of a camera into a Bundler rotation and translation.

    With R the world-to-camera rotation and C the camera center in world coordinates, Bundler expects
    R' = F @ R and t' = F @ (-R @ C), where F = diag(1, -1, -1).

    Args:
        camera: camera whose pose (wTc) is converted.

    Returns:
        rotation: 3x3 Bundler rotation matrix.
        translation: 3-vector Bundler translation.
    """
    wTc = camera.pose()
    cRw = wTc.rotation().matrix().T
    wtc = np.asarray(wTc.translation(), dtype=np.float64)

    rotation = THEIA_TO_BUNDLER @ cRw
    translation = THEIA_TO_BUNDLER @ (-cRw @ wtc)
    return rotation, translation


def bundler_extrinsics_to_camera_frame(rotation: np.ndarray, translation: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Inverse of `camera_extrinsics_to_bundler`: recovers the world-to-camera rotation and the camera center."""
    cRw = THEIA_TO_BUNDLER @ rotation
    ctw = THEIA_TO_BUNDLER @ translation
    wtc = -cRw.T @ ctw
    return cRw, wtc


def feature_to_bundler(feature: Feature, principal_point: Tuple[float, float]) -> np.ndarray:
    """Re-origins a pixel coordinate at the principal point and flips its vertical axis.

    Args:
        feature: (x, y) pixel coordinate, origin at the top-left corner, y down.
        principal_point: (cx, cy) of the observing camera.

    Returns:
        (x - cx, -(y - cy)).
    """
    cx, cy = principal_point
    return np.array([feature[0] - cx, -(feature[1] - cy)], dtype=np.float64)


def bundler_to_feature(adjusted_feature: np.ndarray, principal_point: Tuple[float, float]) -> np.ndarray:
    """Inverse of `feature_to_bundler`."""
    cx, cy = principal_point
    return np.array([adjusted_feature[0] + cx, cy - adjusted_feature[1]], dtype=np.float64)


def dehomogenize(point: np.ndarray) -> np.ndarray:
    """Divides a homogeneous point through by its last coordinate."""
    point = np.asarray(point, dtype=np.float64)
    return point[:-1] / point[-1]
