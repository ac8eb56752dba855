"""
3D Box Overlay

Projects tracked 3D boxes into the front camera image:
- Oriented box corners from pose, size and heading
- Region of interest and visibility filtering
- Wireframe rendering and convex hull masks
"""

from .instances import ObjectClass, ObjectInstance, TrackRow, TrackRowError, NEAR_PLANE_X
from .renderer import BoxRenderer
from .frame_processor import (
    EXCLUDED_CLASS_IDS,
    FORWARD_RANGE,
    LATERAL_BOUND,
    FrameError,
    FrameProcessor,
    FrameResult,
    RoiFilter,
)

__all__ = [
    'ObjectClass',
    'ObjectInstance',
    'TrackRow',
    'TrackRowError',
    'NEAR_PLANE_X',
    'BoxRenderer',
    'EXCLUDED_CLASS_IDS',
    'FORWARD_RANGE',
    'LATERAL_BOUND',
    'FrameError',
    'FrameProcessor',
    'FrameResult',
    'RoiFilter',
]
