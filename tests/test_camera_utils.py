import warnings

import numpy as np
import pytest

from overlay_utils.camera_utils import CalibrationError, CalibrationModel


def test_projection_is_k_times_inverse_rt(forward_calibration):
    expected = forward_calibration.K @ np.linalg.inv(forward_calibration.RT)[:3]
    np.testing.assert_allclose(forward_calibration.projection(), expected)


def test_projection_is_pure_function_of_calibration():
    a = CalibrationModel.default()
    b = CalibrationModel.from_dict(a.to_dict())
    np.testing.assert_array_equal(a.projection(), b.projection())


def test_projection_is_read_only(forward_calibration):
    with pytest.raises(ValueError):
        forward_calibration.projection()[0, 0] = 1.0


def test_project_points(forward_calibration):
    points = np.array([[10.0, 10.0], [0.0, 1.0], [0.0, 0.5]])
    pixels = forward_calibration.project(points)
    assert pixels.shape == (2, 2)
    np.testing.assert_allclose(pixels[:, 0], [320.0, 240.0])
    np.testing.assert_allclose(pixels[:, 1], [310.0, 235.0])


def test_project_does_not_reject_points_behind_camera(forward_calibration):
    points = np.array([[-5.0, 0.0], [1.0, 1.0], [0.0, 0.0]])
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        pixels = forward_calibration.project(points)
    # behind the camera the divide still runs and mirrors the point
    np.testing.assert_allclose(pixels[:, 0], [340.0, 240.0])
    assert not np.all(np.isfinite(pixels[:, 1]))


def test_project_rejects_wrong_shape(forward_calibration):
    with pytest.raises(ValueError):
        forward_calibration.project(np.zeros((8, 3)))


def test_default_calibration_sees_objects_ahead():
    calibration = CalibrationModel.default()
    u, v = calibration.project(np.array([[10.0], [0.0], [1.0]]))[:, 0]
    assert 0 < u < 1280
    assert 0 < v < 480
    np.testing.assert_allclose(calibration.camera_center(), [1.62415, 0.29666, 1.45715])


def test_singular_rt_is_rejected():
    RT = np.eye(4)
    RT[2, 2] = 0.0
    with pytest.raises(CalibrationError):
        CalibrationModel(np.eye(3), RT)


@pytest.mark.parametrize("K, RT", [
    (np.eye(4), np.eye(4)),
    (np.eye(3), np.eye(3)),
    (np.full((3, 3), np.nan), np.eye(4)),
])
def test_malformed_calibration_is_rejected(K, RT):
    with pytest.raises(CalibrationError):
        CalibrationModel(K, RT)


def test_from_dict_requires_both_matrices():
    with pytest.raises(CalibrationError):
        CalibrationModel.from_dict({'K': np.eye(3).tolist()})
