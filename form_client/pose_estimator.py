# form_client/pose_estimator.py

import os
os.environ['TF_CPP_MIN_LOG_LEVEL'] = '3'

import cv2
import mediapipe as mp
from typing import Iterable, List

from form_client.pose_utils import JointPosition


def skeleton_from_landmarks(landmarks: Iterable) -> List[JointPosition]:
    """Convert landmark objects (anything with .x/.y/.z) into a skeleton."""
    return [
        JointPosition(float(p.x), float(p.y), float(getattr(p, "z", 0.0)))
        for p in landmarks
    ]


class PoseEstimator:
    def __init__(self, min_detection_confidence=0.5, min_tracking_confidence=0.5):
        self.pose = mp.solutions.pose.Pose(
            static_image_mode=False,
            model_complexity=1,
            enable_segmentation=False,
            min_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )

    def process(self, frame_bgr):
        """
        Input: BGR frame from OpenCV.
        Output:
          - skeleton: list of JointPosition (normalized), or None if not detected
          - landmarks: pose_landmarks (for drawing), or None if not detected
        """
        rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.pose.process(rgb)

        if not results.pose_landmarks:
            return None, None

        skeleton = skeleton_from_landmarks(results.pose_landmarks.landmark)
        return skeleton, results.pose_landmarks

    def close(self):
        self.pose.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
