import copy
from pathlib import Path

import numpy as np
import pytest

from overlay_utils import CalibrationModel, load_config

REPO_ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = REPO_ROOT / "config" / "overlay_config.yaml"

# Camera at the ego origin looking down +x: (x, y, z) -> camera (-y, -z, x)
FORWARD_K = [[100.0, 0.0, 320.0], [0.0, 100.0, 240.0], [0.0, 0.0, 1.0]]
FORWARD_RT = [
    [0.0, 0.0, 1.0, 0.0],
    [-1.0, 0.0, 0.0, 0.0],
    [0.0, -1.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 1.0],
]
WIDTH, HEIGHT = 640, 480


@pytest.fixture
def forward_calibration():
    return CalibrationModel(FORWARD_K, FORWARD_RT)


@pytest.fixture
def blank_image():
    return np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8)


@pytest.fixture(scope="session")
def shipped_config():
    return load_config(str(CONFIG_PATH))


@pytest.fixture
def overlay_config(shipped_config, tmp_path):
    config = copy.deepcopy(shipped_config)
    config['calibration'] = {'K': FORWARD_K, 'RT': FORWARD_RT}
    config['data']['image_root'] = str(tmp_path)
    config['data']['tracks_file'] = str(tmp_path / "tracks.json")
    config['data']['log_dir'] = str(tmp_path / "logs")
    config['display']['enabled'] = False
    return config
