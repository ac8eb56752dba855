#!/usr/bin/env python3
"""
Wireframe rendering and silhouette masks for projected boxes
"""

import cv2
import numpy as np
from typing import Dict, Iterable, Optional, Sequence, Tuple

from overlay_utils.geometry_utils import BOX_EDGES, FRONT_EDGES, convex_hull_2d, round_half_up
from .instances import ObjectInstance

Color = Tuple[int, int, int]

# BGR
DEFAULT_BOX_COLOR: Color = (0, 0, 255)
DEFAULT_FRONT_COLOR: Color = (255, 0, 0)
DEFAULT_THICKNESS = 1
DEFAULT_MASK_VALUE = 1.0


class BoxRenderer:
    """Draw box wireframes on an image and box silhouettes on a mask"""

    def __init__(
        self,
        box_color: Sequence[int] = DEFAULT_BOX_COLOR,
        front_color: Sequence[int] = DEFAULT_FRONT_COLOR,
        thickness: int = DEFAULT_THICKNESS,
        mask_value: float = DEFAULT_MASK_VALUE
    ):
        self.box_color = tuple(int(c) for c in box_color)
        self.front_color = tuple(int(c) for c in front_color)
        self.thickness = int(thickness)
        self.mask_value = float(mask_value)

    @classmethod
    def from_dict(cls, data: Dict) -> "BoxRenderer":
        """Build from the `render` config block"""
        return cls(
            box_color=data.get('box_color', DEFAULT_BOX_COLOR),
            front_color=data.get('front_color', DEFAULT_FRONT_COLOR),
            thickness=data.get('thickness', DEFAULT_THICKNESS),
            mask_value=data.get('mask_value', DEFAULT_MASK_VALUE),
        )

    def _draw_edges(
        self,
        image: np.ndarray,
        pixels: np.ndarray,
        edges: Iterable[Tuple[int, int]],
        color: Color
    ):
        for i, j in edges:
            pt1 = (int(pixels[0, i]), int(pixels[1, i]))
            pt2 = (int(pixels[0, j]), int(pixels[1, j]))
            cv2.line(image, pt1, pt2, color, self.thickness)

    def draw_wireframe(self, image: np.ndarray, instance: ObjectInstance) -> np.ndarray:
        """
        Draw the 12 box edges, then the front face on top

        Args:
            image: [H, W, 3] BGR canvas, modified in place
            instance: Visible object instance

        Returns:
            The same image
        """
        pixels = round_half_up(instance.corners_2d)
        self._draw_edges(image, pixels, BOX_EDGES, self.box_color)
        self._draw_edges(image, pixels, FRONT_EDGES, self.front_color)
        return image

    def fill_mask(
        self,
        mask: np.ndarray,
        instance: ObjectInstance,
        value: Optional[float] = None
    ) -> np.ndarray:
        """
        Fill the convex hull of the projected corners

        Later fills overwrite earlier ones where silhouettes overlap.

        Args:
            mask: [H, W] float canvas, modified in place
            instance: Visible object instance
            value: Fill value, defaults to mask_value

        Returns:
            The same mask
        """
        fill = self.mask_value if value is None else float(value)
        hull = convex_hull_2d(instance.corners_2d)
        cv2.fillConvexPoly(mask, hull, fill)
        return mask
