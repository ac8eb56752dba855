#!/usr/bin/env python3
"""
Geometry utilities for oriented 3D boxes and their image silhouettes
"""

import cv2
import numpy as np
from typing import Tuple, Sequence
from scipy.spatial.transform import Rotation

# Box corner table: index -> (sx, sy, sz) sign of the local half extent.
# sx varies slowest and sz fastest, so index = 4*(sx>0) + 2*(sy>0) + (sz>0).
# Edge lists below refer to corners by these indices.
CORNER_SIGNS: Tuple[Tuple[int, int, int], ...] = (
    (-1, -1, -1),  # 0 rear  right bottom
    (-1, -1, +1),  # 1 rear  right top
    (-1, +1, -1),  # 2 rear  left  bottom
    (-1, +1, +1),  # 3 rear  left  top
    (+1, -1, -1),  # 4 front right bottom
    (+1, -1, +1),  # 5 front right top
    (+1, +1, -1),  # 6 front left  bottom
    (+1, +1, +1),  # 7 front left  top
)


def corner_index(sx: int, sy: int, sz: int) -> int:
    """Index of the corner with the given sign pattern"""
    return 4 * int(sx > 0) + 2 * int(sy > 0) + int(sz > 0)


def _edges_from_table() -> Tuple[Tuple[int, int], ...]:
    edges = []
    for i, a in enumerate(CORNER_SIGNS):
        for j in range(i + 1, len(CORNER_SIGNS)):
            b = CORNER_SIGNS[j]
            if sum(sa != sb for sa, sb in zip(a, b)) == 1:
                edges.append((i, j))
    return tuple(edges)


# Corner pairs differing in exactly one axis
BOX_EDGES = _edges_from_table()

# Edges of the +x (front) face
FRONT_EDGES = tuple(
    (i, j) for i, j in BOX_EDGES
    if CORNER_SIGNS[i][0] > 0 and CORNER_SIGNS[j][0] > 0
)

UNIT_CORNERS = np.array(CORNER_SIGNS, dtype=np.float64).T  # [3, 8]


def yaw_rotation(yaw: float) -> np.ndarray:
    """Right-handed rotation about +z by `yaw` radians [3, 3]"""
    return Rotation.from_euler('z', yaw).as_matrix()


def box_corners_3d(
    center: Sequence[float],
    extents: Sequence[float],
    yaw: float
) -> np.ndarray:
    """
    Compute the 8 corners of an oriented box

    Args:
        center: [3] box center (x, y, z)
        extents: [3] box size (length, width, height)
        yaw: Heading about the vertical axis in radians

    Returns:
        corners: [3, 8] corners ordered as CORNER_SIGNS
    """
    center = np.asarray(center, dtype=np.float64).reshape(3, 1)
    half = 0.5 * np.asarray(extents, dtype=np.float64).reshape(3, 1)

    local = UNIT_CORNERS * half
    return yaw_rotation(yaw) @ local + center


def ground_plane_distance(corners: np.ndarray) -> float:
    """Smallest (x, y) norm over the columns of a [3, N] point set"""
    return float(np.linalg.norm(corners[:2], axis=0).min())


def round_half_up(points: np.ndarray) -> np.ndarray:
    """Round pixel coordinates to the nearest integer pixel"""
    return np.floor(points + 0.5).astype(np.int32)


def convex_hull_2d(points_2d: np.ndarray) -> np.ndarray:
    """
    Compute the convex hull of projected points

    Args:
        points_2d: [2, N] pixel coordinates

    Returns:
        hull: [M, 2] int32 hull vertices
    """
    pixels = round_half_up(points_2d.T).reshape(-1, 1, 2)
    hull = cv2.convexHull(pixels)
    return hull.reshape(-1, 2)
