import json
import logging

import cv2
import numpy as np
import pytest
import yaml

from box_overlay import viewer
from box_overlay.frame_processor import FrameError
from box_overlay.instances import TrackRowError
from box_overlay.viewer import OverlaySession, always_continue, interactive_decision
from overlay_utils import CalibrationError, FrameRecord

GOOD_ROWS = [[0, 1, 6.0, 0.0, 0.0, 2.0, 2.0, 2.0, 0.0], [2, 3, 10.0, 0.0, 0.0, 1.0, 1.0, 1.0, 0.0]]

logger = logging.getLogger("test_viewer")


@pytest.fixture
def frame_files(tmp_path):
    for name in ("f0.png", "f1.png", "f2.png"):
        cv2.imwrite(str(tmp_path / name), np.zeros((480, 640, 3), dtype=np.uint8))
    return [
        FrameRecord("f0.png", GOOD_ROWS),
        FrameRecord("f1.png", [[0, 1, 2.0]]),
        FrameRecord("missing.png", GOOD_ROWS),
        FrameRecord("f2.png", []),
    ]


def test_step(overlay_config, frame_files):
    session = OverlaySession(overlay_config, logger)
    result = session.step(frame_files[0])
    assert result.num_rows == 2
    assert result.num_in_roi == 1
    assert result.num_visible == 1
    assert result.mask.any()


def test_run_skips_failed_frames(overlay_config, frame_files):
    session = OverlaySession(overlay_config, logger)
    seen = []

    def decide(result):
        seen.append(result.num_visible)
        return True

    assert session.run(frame_files, decide) == 2
    assert seen == [1, 0]
    assert session.frames_failed == 2


def test_run_stops_when_asked(overlay_config, frame_files):
    session = OverlaySession(overlay_config, logger)
    assert session.run(frame_files, lambda result: False) == 1
    assert session.frames_failed == 0


@pytest.mark.parametrize("frame, error", [(1, TrackRowError), (2, FrameError)])
def test_stop_on_error(overlay_config, frame_files, frame, error):
    overlay_config['runtime']['stop_on_error'] = True
    session = OverlaySession(overlay_config, logger)
    with pytest.raises(error):
        session.run([frame_files[frame]], always_continue)


def test_singular_calibration_fails_before_any_frame(overlay_config):
    overlay_config['calibration']['RT'] = np.zeros((4, 4)).tolist()
    with pytest.raises(CalibrationError):
        OverlaySession(overlay_config, logger)


def test_expected_image_size(overlay_config, frame_files):
    overlay_config['image'] = {'expected_width': 1280, 'expected_height': 480}
    session = OverlaySession(overlay_config, logger)
    with pytest.raises(FrameError):
        session.step(frame_files[0])


@pytest.mark.parametrize("key, keep_going", [(ord('q'), False), (ord(' '), True), (-1, True)])
def test_interactive_decision(monkeypatch, overlay_config, frame_files, key, keep_going):
    shown = []
    monkeypatch.setattr(cv2, "imshow", lambda name, image: shown.append(name))
    monkeypatch.setattr(cv2, "waitKey", lambda delay: key)

    result = OverlaySession(overlay_config, logger).step(frame_files[0])
    decide = interactive_decision("image", "mask", "q")
    assert decide(result) is keep_going
    assert shown == ["image", "mask"]


def test_main_headless(overlay_config, frame_files, tmp_path):
    tracks = [{"img_file": f.img_file, "objs": f.objs} for f in frame_files]
    (tmp_path / "tracks.json").write_text(json.dumps(tracks))
    config_path = tmp_path / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.safe_dump(overlay_config, f)

    assert viewer.main(str(config_path)) == 0


def test_main_interactive(monkeypatch, overlay_config, frame_files, tmp_path):
    tracks = [{"img_file": "f0.png", "objs": GOOD_ROWS}, {"img_file": "f2.png", "objs": []}]
    (tmp_path / "tracks.json").write_text(json.dumps(tracks))
    overlay_config['display']['enabled'] = True
    config_path = tmp_path / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.safe_dump(overlay_config, f)

    shown = []
    destroyed = []
    monkeypatch.setattr(cv2, "imshow", lambda name, image: shown.append(name))
    monkeypatch.setattr(cv2, "waitKey", lambda delay: ord('q'))
    monkeypatch.setattr(cv2, "destroyAllWindows", lambda: destroyed.append(True))

    assert viewer.main(str(config_path)) == 0
    assert shown == ["img", "mask"]
    assert destroyed == [True]
