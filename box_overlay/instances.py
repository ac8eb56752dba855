#!/usr/bin/env python3
"""
Per-frame object instances built from tracker output rows

Each track row is [class_id, track_id, x, y, z, length, width, height, yaw]
in the ego frame (meters, radians). An instance lives for one frame only.
"""

import math
import numpy as np
from dataclasses import dataclass
from enum import IntEnum
from numbers import Integral, Real
from typing import NamedTuple, Sequence

from overlay_utils.camera_utils import CalibrationModel
from overlay_utils.geometry_utils import box_corners_3d, ground_plane_distance

# Corners closer than this along the forward axis project unreliably
NEAR_PLANE_X = 2.0

TRACK_ROW_FIELDS = (
    'class_id', 'track_id', 'x', 'y', 'z', 'length', 'width', 'height', 'yaw'
)


class ObjectClass(IntEnum):
    """Class ids emitted by the tracker"""
    CAR = 0
    TRUCK = 1  # also bus
    PEDESTRIAN = 2
    BICYCLE = 3  # also motorcycle


class TrackRowError(ValueError):
    """Raised for a malformed tracker row"""


class TrackRow(NamedTuple):
    """One tracked object as emitted by the tracker"""
    class_id: int
    track_id: int
    x: float
    y: float
    z: float
    length: float
    width: float
    height: float
    yaw: float

    @classmethod
    def parse(cls, raw: Sequence) -> "TrackRow":
        """Validate and convert a raw JSON row"""
        if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
            raise TrackRowError(f"Track row must be a sequence, got {type(raw).__name__}")
        if len(raw) != len(TRACK_ROW_FIELDS):
            raise TrackRowError(
                f"Track row must have {len(TRACK_ROW_FIELDS)} fields, got {len(raw)}: {raw!r}"
            )

        values = []
        for name, value in zip(TRACK_ROW_FIELDS, raw):
            if isinstance(value, bool) or not isinstance(value, Real):
                raise TrackRowError(f"Field '{name}' must be numeric, got {value!r}")
            if name in ('class_id', 'track_id'):
                if not isinstance(value, Integral) and not float(value).is_integer():
                    raise TrackRowError(f"Field '{name}' must be an integer, got {value!r}")
                values.append(int(value))
            else:
                value = float(value)
                if not math.isfinite(value):
                    raise TrackRowError(f"Field '{name}' must be finite, got {value!r}")
                values.append(value)

        row = cls(*values)
        if min(row.length, row.width, row.height) < 0:
            raise TrackRowError(f"Box extents must be non-negative: {row.extents}")
        return row

    @property
    def center(self):
        return (self.x, self.y, self.z)

    @property
    def extents(self):
        return (self.length, self.width, self.height)


def _readonly(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class ObjectInstance:
    """Oriented 3D box of one tracked object, projected into the camera"""
    class_id: int
    track_id: int
    center: np.ndarray  # [3] meters
    extents: np.ndarray  # [3] length, width, height
    yaw: float
    corners_3d: np.ndarray  # [3, 8] ego frame
    corners_2d: np.ndarray  # [2, 8] pixels
    distance: float  # min ground-plane norm over corners

    @classmethod
    def from_row(cls, row: TrackRow, calibration: CalibrationModel) -> "ObjectInstance":
        """Build corners, project them and compute the proximity metric"""
        corners_3d = box_corners_3d(row.center, row.extents, row.yaw)
        corners_2d = calibration.project(corners_3d)

        return cls(
            class_id=row.class_id,
            track_id=row.track_id,
            center=_readonly(np.array(row.center, dtype=np.float64)),
            extents=_readonly(np.array(row.extents, dtype=np.float64)),
            yaw=row.yaw,
            corners_3d=_readonly(corners_3d),
            corners_2d=_readonly(corners_2d),
            distance=ground_plane_distance(corners_3d),
        )

    def valid_corners(self, width: int, height: int, near_plane: float = NEAR_PLANE_X) -> np.ndarray:
        """[8] mask of corners strictly inside the image and beyond the near plane"""
        u, v = self.corners_2d
        x = self.corners_3d[0]
        # NaN coordinates from degenerate projections compare False
        with np.errstate(invalid='ignore'):
            return (u > 0) & (u < width) & (v > 0) & (v < height) & (x > near_plane)

    def is_visible(self, width: int, height: int, near_plane: float = NEAR_PLANE_X) -> bool:
        """True only when every corner is valid; no partial clipping"""
        return bool(self.valid_corners(width, height, near_plane).all())
