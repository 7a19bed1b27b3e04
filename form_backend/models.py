# form_backend/models.py
from pydantic import BaseModel
from typing import Dict, List, Optional


class Landmark(BaseModel):
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


class EvaluateRequest(BaseModel):
    exercise: Optional[str] = None   # e.g. "squats"; null means nothing selected
    landmarks: List[Landmark]


class EvaluationResponse(BaseModel):
    exercise: Optional[str]
    violating_joints: List[int]
    messages: List[str]
    angles: Dict[str, Optional[float]]
    good_form: bool


class RuleInfo(BaseModel):
    name: str
    joints: List[int]
    flagged: List[int]
    message: str
    below: Optional[float] = None
    above: Optional[float] = None


class ExerciseInfo(BaseModel):
    exercise: str
    rules: List[RuleInfo]
