# form_backend/main.py
# Run with: uvicorn form_backend.main:app
import logging
import math
import os
from typing import List

import dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from form_backend.models import (
    EvaluateRequest,
    EvaluationResponse,
    ExerciseInfo,
    RuleInfo,
)
from form_client.form_rules import EXERCISE_RULES, SkeletonSchemaError, evaluate_form
from form_client.pose_utils import JointPosition

dotenv.load_dotenv()

CORS_ORIGINS = [o.strip() for o in os.getenv("FORM_CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("FORM_LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)

app = FastAPI(title="Exercise Form Evaluation Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def health_check():
    return {"status": "ok", "exercises": sorted(EXERCISE_RULES)}


@app.get("/exercises", response_model=List[ExerciseInfo])
def list_exercises():
    return [
        ExerciseInfo(
            exercise=name,
            rules=[
                RuleInfo(
                    name=rule.name,
                    joints=list(rule.joints),
                    flagged=list(rule.flagged),
                    message=rule.message,
                    below=rule.below,
                    above=rule.above,
                )
                for rule in rules
            ],
        )
        for name, rules in EXERCISE_RULES.items()
    ]


@app.post("/evaluate", response_model=EvaluationResponse)
def evaluate(req: EvaluateRequest):
    skeleton = [JointPosition(p.x, p.y, p.z) for p in req.landmarks]
    try:
        outcome = evaluate_form(skeleton, req.exercise)
    except SkeletonSchemaError as e:
        logger.warning("Rejected skeleton: %s", e)
        raise HTTPException(status_code=422, detail=str(e))

    return EvaluationResponse(
        exercise=req.exercise,
        violating_joints=sorted(outcome.violating_joints),
        messages=list(outcome.messages),
        # nan is not valid JSON
        angles={k: (v if math.isfinite(v) else None) for k, v in outcome.angles.items()},
        good_form=outcome.good_form,
    )


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL)
    uvicorn.run(app, host=os.getenv("FORM_HOST", "127.0.0.1"), port=int(os.getenv("FORM_PORT", "8000")))
