import math

import numpy as np
import pytest

from form_client.pose_utils import JointPosition, angle_between


def test_right_angle():
    assert angle_between((1, 0), (0, 0), (0, 1)) == pytest.approx(90.0)


def test_colinear_with_vertex_between_is_180():
    angle = angle_between((0.5, 0.2), (0.5, 0.5), (0.5, 0.8))
    assert angle == pytest.approx(180.0)


def test_same_direction_is_0():
    angle = angle_between((0.5, 0.3), (0.5, 0.5), (0.5, 0.1))
    assert angle == pytest.approx(0.0, abs=1e-6)


def test_symmetric_in_outer_points():
    p, v, d = (0.31, 0.22), (0.5, 0.5), (0.73, 0.41)
    assert angle_between(p, v, d) == angle_between(d, v, p)


def test_depth_is_ignored():
    flat = angle_between(JointPosition(1, 0, 0), JointPosition(0, 0, 0), JointPosition(0, 1, 0))
    deep = angle_between(JointPosition(1, 0, 5), JointPosition(0, 0, -3), JointPosition(0, 1, 2))
    assert flat == deep


@pytest.mark.parametrize("a, b, c", [
    ((0.5, 0.5), (0.5, 0.5), (0.2, 0.1)),
    ((0.2, 0.1), (0.5, 0.5), (0.5, 0.5)),
    ((0.5, 0.5), (0.5, 0.5), (0.5, 0.5)),
])
def test_degenerate_input_returns_nan(a, b, c):
    assert math.isnan(angle_between(a, b, c))


def test_ratio_overshoot_is_clipped():
    a = (0.9562433975657083, 0.7133103666149874)
    b = (0.6153851114812539, 0.38367755426188344)
    c = (0.29197029649463624, 0.07091374779750653)

    v1 = np.subtract(a, b)
    v2 = np.subtract(c, b)
    raw = np.dot(v1, v2) / (np.linalg.norm(v1) * np.linalg.norm(v2))
    assert raw < -1.0

    angle = angle_between(a, b, c)
    assert not math.isnan(angle)
    assert angle == 180.0
