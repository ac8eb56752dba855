"""Utility modules for the 3D box overlay viewer"""

from .config_loader import ConfigLoader, load_config
from .logger import LOGGER_NAME, setup_logger, log_section, log_config, log_frame_summary
from .camera_utils import CalibrationModel, CalibrationError
from .geometry_utils import (
    CORNER_SIGNS,
    BOX_EDGES,
    FRONT_EDGES,
    corner_index,
    yaw_rotation,
    box_corners_3d,
    ground_plane_distance,
    convex_hull_2d,
)
from .io_utils import (
    FrameRecord,
    load_frames,
    parse_frames,
    load_image,
    load_json,
)

__all__ = [
    'ConfigLoader',
    'load_config',
    'LOGGER_NAME',
    'setup_logger',
    'log_section',
    'log_config',
    'log_frame_summary',
    'CalibrationModel',
    'CalibrationError',
    'CORNER_SIGNS',
    'BOX_EDGES',
    'FRONT_EDGES',
    'corner_index',
    'yaw_rotation',
    'box_corners_3d',
    'ground_plane_distance',
    'convex_hull_2d',
    'FrameRecord',
    'load_frames',
    'parse_frames',
    'load_image',
    'load_json',
]
