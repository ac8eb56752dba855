#!/usr/bin/env python3
"""
Camera calibration and projection for the front camera
"""

import numpy as np
from typing import Dict, Sequence, Union

ArrayLike = Union[np.ndarray, Sequence[Sequence[float]]]

# Front camera shipped with the recording rig (ego frame: x forward, y left, z up)
DEFAULT_K = (
    (819.162645, 0.000000, 640.000000),
    (0.000000, 819.162645, 240.000000),
    (0.000000, 0.000000, 1.000000),
)
DEFAULT_RT = (
    (-0.005317, 0.003402, 0.999980, 1.624150),
    (-0.999920, -0.011526, -0.005277, 0.296660),
    (0.011508, -0.999928, 0.003463, 1.457150),
    (0.0, 0.0, 0.0, 1.0),
)


class CalibrationError(ValueError):
    """Raised when intrinsics/extrinsics cannot form a projection"""


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class CalibrationModel:
    """
    Fixed pinhole calibration of one camera

    RT maps camera coordinates into the ego frame, so the projection is
    P = K @ inv(RT)[:3]. P is derived once at construction and never changes.
    """

    def __init__(self, K: ArrayLike, RT: ArrayLike):
        K = np.asarray(K, dtype=np.float64)
        RT = np.asarray(RT, dtype=np.float64)

        if K.shape != (3, 3):
            raise CalibrationError(f"K must be 3x3, got {K.shape}")
        if RT.shape != (4, 4):
            raise CalibrationError(f"RT must be 4x4, got {RT.shape}")
        if not (np.all(np.isfinite(K)) and np.all(np.isfinite(RT))):
            raise CalibrationError("Calibration contains non-finite values")

        try:
            RT_inv = np.linalg.inv(RT)
        except np.linalg.LinAlgError as e:
            raise CalibrationError(f"RT is not invertible: {e}") from e

        self.K = _readonly(K.copy())
        self.RT = _readonly(RT.copy())
        self.P = _readonly(K @ RT_inv[:3, :])

    @classmethod
    def default(cls) -> "CalibrationModel":
        """Calibration of the shipped front camera"""
        return cls(DEFAULT_K, DEFAULT_RT)

    @classmethod
    def from_dict(cls, data: Dict) -> "CalibrationModel":
        """Load from the `calibration` config block"""
        try:
            return cls(K=data['K'], RT=data['RT'])
        except KeyError as e:
            raise CalibrationError(f"Calibration missing key: {e}") from e

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization"""
        return {
            'K': self.K.tolist(),
            'RT': self.RT.tolist(),
        }

    def projection(self) -> np.ndarray:
        """Get projection matrix P [3, 4]"""
        return self.P

    def camera_center(self) -> np.ndarray:
        """Camera origin in the ego frame"""
        return self.RT[:3, 3]

    def project(self, points_3d: np.ndarray) -> np.ndarray:
        """
        Project 3D ego-frame points to pixel coordinates

        Args:
            points_3d: [3, N] ego-frame coordinates

        Returns:
            points_2d: [2, N] pixel coordinates (u, v)

        Points at or behind the camera plane (w <= 0) are still divided;
        the result is meaningless and must be gated on depth by the caller.
        """
        points_3d = np.asarray(points_3d, dtype=np.float64)
        if points_3d.ndim != 2 or points_3d.shape[0] != 3:
            raise ValueError(f"Expected [3, N] points, got {points_3d.shape}")

        points_h = np.vstack([points_3d, np.ones((1, points_3d.shape[1]))])
        projected = self.P @ points_h

        with np.errstate(divide='ignore', invalid='ignore'):
            return projected[:2] / projected[2:3]
