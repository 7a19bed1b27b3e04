from types import SimpleNamespace

import pytest

pytest.importorskip("mediapipe")

from form_client.form_rules import evaluate_form
from form_client.pose_estimator import skeleton_from_landmarks
from form_client.pose_utils import NUM_LANDMARKS, RIGHT_ANKLE, RIGHT_HIP, RIGHT_KNEE, RIGHT_SHOULDER


def test_skeleton_from_landmarks_keeps_order_and_depth():
    raw = [SimpleNamespace(x=i / 100, y=1 - i / 100, z=-i / 10) for i in range(NUM_LANDMARKS)]
    skeleton = skeleton_from_landmarks(raw)

    assert len(skeleton) == NUM_LANDMARKS
    assert skeleton[RIGHT_KNEE].x == pytest.approx(0.26)
    assert skeleton[RIGHT_KNEE].y == pytest.approx(0.74)
    assert skeleton[RIGHT_KNEE].z == pytest.approx(-2.6)


def test_skeleton_feeds_rule_engine():
    raw = [SimpleNamespace(x=0.0, y=0.0, z=0.0) for _ in range(NUM_LANDMARKS)]
    raw[RIGHT_SHOULDER] = SimpleNamespace(x=0.5, y=0.2, z=0.3)
    raw[RIGHT_HIP] = SimpleNamespace(x=0.5, y=0.5, z=0.1)
    raw[RIGHT_KNEE] = SimpleNamespace(x=0.5, y=0.8, z=0.0)
    raw[RIGHT_ANKLE] = SimpleNamespace(x=0.5, y=1.0, z=-0.2)

    outcome = evaluate_form(skeleton_from_landmarks(raw), "squats")

    assert outcome.violating_joints == {26, 28}
    assert outcome.messages == ("Don't bend your knees too much.",)
