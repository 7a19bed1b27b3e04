# form_client/form_rules.py

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Sequence, Tuple

from form_client.pose_utils import (
    RIGHT_ANKLE,
    RIGHT_ELBOW,
    RIGHT_HIP,
    RIGHT_KNEE,
    RIGHT_SHOULDER,
    RIGHT_WRIST,
    angle_between,
)


class SkeletonSchemaError(LookupError):
    """Skeleton is missing a landmark index that a rule table refers to."""


@dataclass(frozen=True)
class AngleRule:
    name: str                          # measurement label, e.g. "knee_angle"
    joints: Tuple[int, int, int]       # (proximal, vertex, distal)
    flagged: Tuple[int, ...]
    message: str
    below: Optional[float] = None      # fires when angle < below
    above: Optional[float] = None      # fires when angle > above

    def fires(self, angle: float) -> bool:
        # nan (degenerate geometry) never produces feedback
        if math.isnan(angle):
            return False
        if self.below is not None and angle < self.below:
            return True
        if self.above is not None and angle > self.above:
            return True
        return False


@dataclass(frozen=True)
class EvaluationOutcome:
    violating_joints: FrozenSet[int] = frozenset()
    messages: Tuple[str, ...] = ()
    angles: Mapping[str, float] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # read-only view so the outcome cannot be edited after evaluation
        object.__setattr__(self, "angles", MappingProxyType(dict(self.angles)))

    @property
    def good_form(self) -> bool:
        return not self.messages

    @classmethod
    def empty(cls) -> "EvaluationOutcome":
        return cls()


# ----------------- Per-exercise rule tables -----------------
EXERCISE_RULES: Dict[str, Tuple[AngleRule, ...]] = {
    "squats": (
        AngleRule(
            name="back_angle",
            joints=(RIGHT_SHOULDER, RIGHT_HIP, RIGHT_KNEE),
            flagged=(RIGHT_SHOULDER, RIGHT_HIP),
            message="Keep your back straighter.",
            below=100.0,
        ),
        AngleRule(
            name="knee_angle",
            joints=(RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE),
            flagged=(RIGHT_KNEE, RIGHT_ANKLE),
            message="Don't bend your knees too much.",
            above=120.0,
        ),
        AngleRule(
            name="knee_angle",
            joints=(RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE),
            flagged=(RIGHT_KNEE, RIGHT_ANKLE),
            message="Try to bend knees more.",
            below=60.0,
        ),
    ),
    "pushups": (
        AngleRule(
            name="elbow_angle",
            joints=(RIGHT_SHOULDER, RIGHT_ELBOW, RIGHT_WRIST),
            flagged=(RIGHT_ELBOW, RIGHT_WRIST),
            message="Maintain proper elbow angle during push-ups.",
            below=70.0,
            above=160.0,
        ),
        AngleRule(
            name="hip_angle",
            joints=(RIGHT_HIP, RIGHT_KNEE, RIGHT_ANKLE),
            flagged=(RIGHT_HIP, RIGHT_KNEE),
            message="Keep your hips aligned with your torso.",
            below=160.0,
        ),
    ),
}


def get_exercise_rules(exercise_name: Optional[str]) -> Tuple[AngleRule, ...]:
    # Unknown or unselected exercise means no rules are active, not an error.
    if exercise_name and exercise_name in EXERCISE_RULES:
        return EXERCISE_RULES[exercise_name]
    return ()


def _joint(skeleton: Sequence, index: int, exercise_name: str):
    try:
        return skeleton[index]
    except IndexError:
        raise SkeletonSchemaError(
            f"{exercise_name!r} rules need landmark {index}, "
            f"skeleton has {len(skeleton)}"
        ) from None


def evaluate_form(skeleton: Sequence, exercise_name: Optional[str]) -> EvaluationOutcome:
    """
    Applies the rule table of `exercise_name` to a single frame's skeleton.

    Rules are checked in table order. Every rule that fires adds its flagged
    joints to the violating set and its message to the feedback list, so the
    same text can appear twice if two rules share it.
    """
    rules = get_exercise_rules(exercise_name)
    if not rules:
        return EvaluationOutcome.empty()

    violating = set()
    messages = []
    angles: Dict[str, float] = {}

    for rule in rules:
        proximal, vertex, distal = (
            _joint(skeleton, idx, exercise_name) for idx in rule.joints
        )
        angle = angle_between(proximal, vertex, distal)
        angles[rule.name] = angle

        if rule.fires(angle):
            violating.update(rule.flagged)
            messages.append(rule.message)

    return EvaluationOutcome(
        violating_joints=frozenset(violating),
        messages=tuple(messages),
        angles=angles,
    )
