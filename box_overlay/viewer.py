#!/usr/bin/env python3
"""
Interactive viewer for tracked 3D boxes

Loads per-frame tracker output, overlays the boxes on the camera image and
shows image and mask side by side. Press any key for the next frame and the
quit key (default 'q') to stop. With display disabled, all frames are
processed headless and only logged.
"""

import sys
import cv2
import numpy as np
from pathlib import Path
from typing import Callable, Iterable, Optional
from tqdm import tqdm

from overlay_utils import (
    CalibrationModel,
    FrameRecord,
    load_config,
    load_frames,
    load_image,
    LOGGER_NAME,
    log_config,
    log_frame_summary,
    log_section,
    setup_logger,
)
from overlay_utils.config_loader import DEFAULT_CONFIG_PATH
from .frame_processor import FrameError, FrameProcessor, FrameResult, RoiFilter
from .instances import NEAR_PLANE_X, TrackRowError
from .renderer import BoxRenderer

# Returns True to continue with the next frame
Decision = Callable[[FrameResult], bool]


def interactive_decision(
    image_window: str = "img",
    mask_window: str = "mask",
    quit_key: str = "q"
) -> Decision:
    """Show each frame and block until a key is pressed"""

    def decide(result: FrameResult) -> bool:
        cv2.imshow(image_window, result.image)
        cv2.imshow(mask_window, result.mask)
        key = cv2.waitKey(0)
        return (key & 0xFF) != ord(quit_key)

    return decide


def always_continue(result: FrameResult) -> bool:
    """Headless decision: never stop early"""
    return True


class OverlaySession:
    """Owns the calibration and the frame processor for one run"""

    def __init__(self, config: dict, logger):
        self.config = config
        self.logger = logger

        self.image_root = config['data'].get('image_root') or None
        self.stop_on_error = bool(config.get('runtime', {}).get('stop_on_error', False))

        # Fails before any frame is processed
        self.calibration = CalibrationModel.from_dict(config['calibration'])
        self.logger.info(f"Camera center (ego frame): {np.round(self.calibration.camera_center(), 3).tolist()}")

        image_cfg = config.get('image', {}) or {}
        expected_size = None
        if image_cfg.get('expected_width') and image_cfg.get('expected_height'):
            expected_size = (int(image_cfg['expected_width']), int(image_cfg['expected_height']))

        self.processor = FrameProcessor(
            calibration=self.calibration,
            roi_filter=RoiFilter.from_dict(config['roi']),
            renderer=BoxRenderer.from_dict(config['render']),
            near_plane=float(config['visibility'].get('near_plane_x', NEAR_PLANE_X)),
            expected_size=expected_size,
            logger=self.logger,
        )

        self.frames_done = 0
        self.frames_failed = 0

    def step(self, record: FrameRecord) -> FrameResult:
        """Load the frame image and run the pipeline on it"""
        image_path = record.image_path(self.image_root)
        image = load_image(image_path)
        if image is None:
            raise FrameError(f"Failed to read image: {image_path}")

        result = self.processor.process(record.objs, image)
        log_frame_summary(
            self.logger,
            str(image_path),
            result.num_rows,
            result.num_in_roi,
            [inst.track_id for inst in result.instances],
        )
        return result

    def run(
        self,
        frames: Iterable[FrameRecord],
        decide: Decision,
        progress: bool = False
    ) -> int:
        """
        Process frames in order until they run out or `decide` says stop

        Returns:
            Number of frames processed successfully
        """
        if progress:
            frames = tqdm(frames, desc="Frames")

        for record in frames:
            try:
                result = self.step(record)
            except (TrackRowError, FrameError) as e:
                self.frames_failed += 1
                if self.stop_on_error:
                    raise
                self.logger.error(f"Skipping frame {record.img_file}: {e}")
                continue

            self.frames_done += 1
            if not decide(result):
                self.logger.info("Stop requested")
                break

        return self.frames_done


def main(config_path: Optional[str] = None) -> int:
    """Main viewer entry point"""
    if config_path is None:
        config_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH

    config = load_config(config_path)

    logger = setup_logger(
        name=LOGGER_NAME,
        log_dir=config['data'].get('log_dir', 'logs'),
        level=config['logging']['level'],
        save_to_file=config['logging']['save_logs']
    )

    log_section(logger, "3D Box Overlay")
    log_config(logger, config)

    session = OverlaySession(config, logger)
    frames = load_frames(Path(config['data']['tracks_file']))
    logger.info(f"Loaded {len(frames)} frames")

    display = config['display']
    if display['enabled']:
        decide = interactive_decision(
            image_window=display['image_window'],
            mask_window=display['mask_window'],
            quit_key=display['quit_key'],
        )
        try:
            session.run(frames, decide)
        finally:
            cv2.destroyAllWindows()
    else:
        session.run(frames, always_continue, progress=True)

    logger.info(f"Done: {session.frames_done} frames shown, {session.frames_failed} skipped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
