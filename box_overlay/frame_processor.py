#!/usr/bin/env python3
"""
Per-frame overlay pipeline

raw rows -> ROI filter -> instances -> sort by distance -> visibility
filter -> wireframes on the image and hull fills on the mask.
"""

import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from overlay_utils.camera_utils import CalibrationModel
from overlay_utils.logger import LOGGER_NAME
from .instances import NEAR_PLANE_X, ObjectClass, ObjectInstance, TrackRow
from .renderer import BoxRenderer

# Operational envelope applied before instances are built
EXCLUDED_CLASS_IDS: Tuple[int, ...] = (int(ObjectClass.PEDESTRIAN),)
FORWARD_RANGE: Tuple[float, float] = (4.0, 40.0)
LATERAL_BOUND = 10.0


class FrameError(RuntimeError):
    """Raised when a frame cannot be processed"""


@dataclass(frozen=True)
class RoiFilter:
    """
    Region of interest on raw track rows

    Attributes:
        excluded_class_ids: Rows of these classes are dropped regardless of position
        forward_range: Rows with center x outside [min, max] meters are dropped
        lateral_bound: Rows with |center y| above this many meters are dropped
    """
    excluded_class_ids: Tuple[int, ...] = EXCLUDED_CLASS_IDS
    forward_range: Tuple[float, float] = FORWARD_RANGE
    lateral_bound: float = LATERAL_BOUND

    @classmethod
    def from_dict(cls, data: Dict) -> "RoiFilter":
        """Build from the `roi` config block"""
        return cls(
            excluded_class_ids=tuple(int(c) for c in data.get('excluded_class_ids', EXCLUDED_CLASS_IDS)),
            forward_range=tuple(float(v) for v in data.get('forward_range', FORWARD_RANGE)),
            lateral_bound=float(data.get('lateral_bound', LATERAL_BOUND)),
        )

    def accepts(self, row: TrackRow) -> bool:
        if row.class_id in self.excluded_class_ids:
            return False
        x_min, x_max = self.forward_range
        if row.x < x_min or row.x > x_max:
            return False
        return abs(row.y) <= self.lateral_bound


@dataclass
class FrameResult:
    """Output of one processed frame"""
    image: np.ndarray
    mask: np.ndarray
    instances: List[ObjectInstance] = field(default_factory=list)
    num_rows: int = 0
    num_in_roi: int = 0

    @property
    def num_visible(self) -> int:
        return len(self.instances)


class FrameProcessor:
    """Run the overlay pipeline on one frame at a time"""

    def __init__(
        self,
        calibration: CalibrationModel,
        roi_filter: Optional[RoiFilter] = None,
        renderer: Optional[BoxRenderer] = None,
        near_plane: float = NEAR_PLANE_X,
        expected_size: Optional[Tuple[int, int]] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.calibration = calibration
        self.roi_filter = roi_filter or RoiFilter()
        self.renderer = renderer or BoxRenderer()
        self.near_plane = near_plane
        self.expected_size = expected_size
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def parse_rows(self, raw_rows: Iterable[Sequence]) -> List[TrackRow]:
        """Parse every row; one malformed row fails the whole frame"""
        return [TrackRow.parse(raw) for raw in raw_rows]

    def build_instances(self, rows: Iterable[TrackRow]) -> List[ObjectInstance]:
        """ROI-filter rows and build instances sorted near to far"""
        instances = []
        for row in rows:
            if not self.roi_filter.accepts(row):
                self.logger.debug(f"ROI drop: class {row.class_id} track {row.track_id} at ({row.x:.1f}, {row.y:.1f})")
                continue
            instances.append(ObjectInstance.from_row(row, self.calibration))

        # sorted() is stable, so equal distances keep row order
        return sorted(instances, key=lambda inst: inst.distance)

    def select_visible(
        self,
        instances: Iterable[ObjectInstance],
        width: int,
        height: int
    ) -> List[ObjectInstance]:
        """Keep instances whose corners are all inside the image, in order"""
        visible = []
        for inst in instances:
            if inst.is_visible(width, height, self.near_plane):
                visible.append(inst)
            else:
                self.logger.debug(f"Not visible: track {inst.track_id} (distance {inst.distance:.2f} m)")
        return visible

    def _check_image(self, image: Optional[np.ndarray]) -> Tuple[int, int]:
        if image is None:
            raise FrameError("Image canvas unavailable")
        if not isinstance(image, np.ndarray) or image.ndim != 3 or image.shape[2] != 3:
            shape = getattr(image, 'shape', None)
            raise FrameError(f"Image canvas must be [H, W, 3], got {shape}")

        height, width = image.shape[:2]
        if width == 0 or height == 0:
            raise FrameError("Image canvas is empty")
        if self.expected_size is not None and (width, height) != tuple(self.expected_size):
            raise FrameError(
                f"Image canvas is {width}x{height}, expected "
                f"{self.expected_size[0]}x{self.expected_size[1]}"
            )
        return width, height

    def process(self, raw_rows: Iterable[Sequence], image: Optional[np.ndarray]) -> FrameResult:
        """
        Overlay one frame

        Args:
            raw_rows: Tracker rows for this frame
            image: [H, W, 3] BGR canvas, drawn on in place

        Returns:
            FrameResult with the drawn image, a fresh float32 mask and the
            visible instances in near-to-far order
        """
        width, height = self._check_image(image)

        rows = self.parse_rows(raw_rows)
        instances = self.build_instances(rows)
        visible = self.select_visible(instances, width, height)

        for inst in visible:
            self.renderer.draw_wireframe(image, inst)

        mask = np.zeros((height, width), dtype=np.float32)
        # Same near-to-far order: farther silhouettes overwrite nearer ones
        for inst in visible:
            self.renderer.fill_mask(mask, inst)

        return FrameResult(
            image=image,
            mask=mask,
            instances=visible,
            num_rows=len(rows),
            num_in_roi=len(instances),
        )
