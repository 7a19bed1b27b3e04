# form_client/pose_utils.py

from typing import NamedTuple, Sequence

import numpy as np

# ----------------- MediaPipe Pose landmark indices -----------------
# Fixed by the 33-point pose schema of the estimator; do not re-derive.
NUM_LANDMARKS = 33

NOSE = 0
LEFT_SHOULDER = 11
RIGHT_SHOULDER = 12
LEFT_ELBOW = 13
RIGHT_ELBOW = 14
LEFT_WRIST = 15
RIGHT_WRIST = 16
LEFT_HIP = 23
RIGHT_HIP = 24
LEFT_KNEE = 25
RIGHT_KNEE = 26
LEFT_ANKLE = 27
RIGHT_ANKLE = 28


class JointPosition(NamedTuple):
    """Normalized landmark position; x/y in [0, 1] of frame width/height."""
    x: float
    y: float
    z: float = 0.0


def angle_between(a: Sequence[float], b: Sequence[float], c: Sequence[float]) -> float:
    """
    Returns the angle (in degrees) at point b formed by points a-b-c.

    Only x and y are used; any depth component is ignored.
    If a or c coincides with b the angle is undefined and nan is returned.
    """
    a = np.array(a[:2], dtype=float)
    b = np.array(b[:2], dtype=float)
    c = np.array(c[:2], dtype=float)

    v1 = a - b
    v2 = c - b

    n1 = np.linalg.norm(v1)
    n2 = np.linalg.norm(v2)
    if n1 == 0.0 or n2 == 0.0:
        return float("nan")

    cosang = np.dot(v1, v2) / (n1 * n2)
    cosang = np.clip(cosang, -1.0, 1.0)
    angle = np.degrees(np.arccos(cosang))
    return float(angle)
