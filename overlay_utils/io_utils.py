#!/usr/bin/env python3
"""
I/O utilities for loading tracking results and camera frames
"""

import cv2
import numpy as np
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

PathLike = Union[str, Path]


@dataclass
class FrameRecord:
    """One frame of tracker output: image file plus raw track rows"""
    img_file: str
    objs: List[list] = field(default_factory=list)

    def image_path(self, image_root: Optional[PathLike] = None) -> Path:
        """Resolve the image file against an optional root directory"""
        if image_root:
            return Path(image_root) / self.img_file
        return Path(self.img_file)


def load_json(filepath: PathLike):
    """Load JSON document from file"""
    with open(filepath, 'r') as f:
        return json.load(f)


def parse_frames(data) -> List[FrameRecord]:
    """
    Validate a decoded tracks document

    Args:
        data: List of {"img_file": str, "objs": [[...], ...]} entries

    Returns:
        List of FrameRecord in file order
    """
    if not isinstance(data, list):
        raise ValueError(f"Tracks document must be a list of frames, got {type(data).__name__}")

    frames = []
    for idx, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ValueError(f"Frame {idx}: expected an object, got {type(entry).__name__}")
        if 'img_file' not in entry or 'objs' not in entry:
            raise ValueError(f"Frame {idx}: 'img_file' and 'objs' are required")
        if not isinstance(entry['img_file'], str):
            raise ValueError(f"Frame {idx}: 'img_file' must be a string")
        if not isinstance(entry['objs'], list):
            raise ValueError(f"Frame {idx}: 'objs' must be a list")

        frames.append(FrameRecord(img_file=entry['img_file'], objs=entry['objs']))

    return frames


def load_frames(filepath: PathLike) -> List[FrameRecord]:
    """Load per-frame tracking results from a JSON file"""
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Tracks file not found: {filepath}")

    return parse_frames(load_json(filepath))


def load_image(filepath: PathLike) -> Optional[np.ndarray]:
    """Read a BGR image, None if it cannot be decoded"""
    return cv2.imread(str(filepath), cv2.IMREAD_COLOR)
