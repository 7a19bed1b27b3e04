import pytest

from form_client.pose_utils import NUM_LANDMARKS, JointPosition


def build_skeleton(points):
    """33-landmark skeleton at the origin with `points` ({index: (x, y)}) placed."""
    skeleton = [JointPosition(0.0, 0.0, 0.0) for _ in range(NUM_LANDMARKS)]
    for idx, (x, y) in points.items():
        skeleton[idx] = JointPosition(x, y, 0.0)
    return skeleton


@pytest.fixture
def make_skeleton():
    return build_skeleton
