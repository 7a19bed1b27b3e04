# form_client/form_demo.py

import logging
import os
from queue import Queue
from threading import Thread
from typing import Iterable, Optional

import cv2
import dotenv
import mediapipe as mp
import pyttsx3

from form_client.form_rules import EvaluationOutcome, evaluate_form
from form_client.pose_estimator import PoseEstimator
from form_client.pose_utils import NUM_LANDMARKS

dotenv.load_dotenv()

logger = logging.getLogger(__name__)

CAMERA_INDEX = int(os.getenv("FORM_CAMERA_INDEX", "0"))
SPEAK_FEEDBACK = os.getenv("FORM_SPEAK_FEEDBACK", "1") != "0"
SPEECH_RATE = int(os.getenv("FORM_SPEECH_RATE", "165"))
LOG_LEVEL = os.getenv("FORM_LOG_LEVEL", "INFO")

WINDOW_NAME = "Real-Time Exercise Evaluator"

# ---------- Exercise options ----------
EXERCISE_OPTIONS = {
    "1": "squats",
    "2": "pushups",
    "0": None,
}

# Live switching while the camera loop runs
EXERCISE_KEYS = {
    "s": "squats",
    "p": "pushups",
    "n": None,
}

# BGR colours
COLOR_GOOD = (0, 255, 0)
COLOR_BAD = (0, 0, 255)
COLOR_CONNECTOR = (128, 128, 128)
COLOR_BANNER = (200, 255, 200)
COLOR_MESSAGE = (0, 200, 255)

ARROW_LENGTH = 40


def choose_exercise() -> Optional[str]:
    print("Select exercise to evaluate:")
    print("  1. Squats")
    print("  2. Push-Ups")
    print("  0. None (just show the skeleton)")
    choice = input("Enter 1, 2 or 0: ").strip()
    exercise = EXERCISE_OPTIONS.get(choice, "squats")
    print(f"\nYou selected: {exercise or 'none'}")
    print("Keys: s = squats, p = push-ups, n = none, q = quit\n")
    return exercise


# ---------- Drawing helpers ----------

def landmark_specs(violating: Iterable[int]):
    """Per-landmark drawing spec: red for violating joints, green otherwise."""
    mp_drawing = mp.solutions.drawing_utils
    violating = set(violating)
    good = mp_drawing.DrawingSpec(color=COLOR_GOOD, thickness=4, circle_radius=3)
    bad = mp_drawing.DrawingSpec(color=COLOR_BAD, thickness=4, circle_radius=5)
    return {idx: (bad if idx in violating else good) for idx in range(NUM_LANDMARKS)}


def draw_skeleton(frame, pose_landmarks, violating: Iterable[int]):
    mp_drawing = mp.solutions.drawing_utils
    mp_drawing.draw_landmarks(
        frame,
        pose_landmarks,
        mp.solutions.pose.POSE_CONNECTIONS,
        landmark_drawing_spec=landmark_specs(violating),
        connection_drawing_spec=mp_drawing.DrawingSpec(
            color=COLOR_CONNECTOR, thickness=2
        ),
    )


def draw_joint_arrows(frame, skeleton, violating: Iterable[int]):
    """Red arrow pointing down at each violating joint."""
    h, w = frame.shape[:2]
    for idx in sorted(violating):
        joint = skeleton[idx]
        x = int(joint[0] * w)
        y = int(joint[1] * h)
        cv2.arrowedLine(frame,
                        (x, y - ARROW_LENGTH),
                        (x, y),
                        COLOR_BAD,
                        3,
                        tipLength=0.3)


def draw_feedback(frame, exercise: Optional[str], outcome: Optional[EvaluationOutcome]):
    """
    Exercise banner at the top, feedback lines at the bottom.
    `outcome` is None when no pose was detected this frame.
    """
    cv2.putText(frame,
                f"Exercise: {exercise or 'none'}",
                (20, 30),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.7,
                COLOR_BANNER,
                2)

    if not exercise:
        return

    if outcome is None:
        lines, color = ["No pose detected"], COLOR_MESSAGE
    elif outcome.good_form:
        lines, color = ["Good form!"], COLOR_GOOD
    else:
        lines, color = list(outcome.messages), COLOR_BAD

    bottom = frame.shape[0] - 30
    for i, line in enumerate(reversed(lines)):
        cv2.putText(frame,
                    line,
                    (20, bottom - 30 * i),
                    cv2.FONT_HERSHEY_SIMPLEX,
                    0.7,
                    color,
                    2)


# ---------- Spoken feedback ----------

def speak_message(text: str, rate: int = SPEECH_RATE):
    """
    Create a fresh pyttsx3 engine for THIS message only.
    """
    engine = pyttsx3.init()
    engine.setProperty("rate", rate)
    engine.say(text)
    engine.runAndWait()
    engine.stop()


class FeedbackSpeaker:
    """
    Speaks feedback on a background thread so the camera loop never blocks.
    A message is queued only if it differs from the last one and nothing
    is waiting to be spoken.
    """

    def __init__(self, rate: int = SPEECH_RATE, speak=speak_message):
        self.rate = rate
        self._speak = speak
        self._queue: Queue = Queue()
        self._last_message = ""
        self._worker = Thread(target=self._run, daemon=True)
        self._worker.start()

    def say(self, text: str) -> bool:
        if not text or text == self._last_message or not self._queue.empty():
            return False
        self._last_message = text
        self._queue.put(text)
        return True

    def reset(self):
        """Forget the last message so a fault that comes back is spoken again."""
        self._last_message = ""

    def follow(self, outcome: EvaluationOutcome):
        """Speak the first fault of a frame; good form re-arms the last message."""
        if outcome.messages:
            return self.say(outcome.messages[0])
        self.reset()
        return False

    def wait(self):
        self._queue.join()

    def _run(self):
        while True:
            text = self._queue.get()
            try:
                self._speak(text, self.rate)
            except Exception:
                logger.exception("TTS error while speaking %r", text)
            finally:
                self._queue.task_done()


def main():
    logging.basicConfig(level=LOG_LEVEL,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # 1) Choose exercise; the loop owns it from here on
    current_exercise = choose_exercise()

    # 2) Start camera
    cap = cv2.VideoCapture(CAMERA_INDEX)
    if not cap.isOpened():
        logger.error("Could not open camera %d", CAMERA_INDEX)
        return

    speaker = FeedbackSpeaker() if SPEAK_FEEDBACK else None

    try:
        with PoseEstimator() as pose_estimator:
            while True:
                ret, frame = cap.read()
                if not ret:
                    break

                display_frame = frame.copy()
                skeleton, landmarks = pose_estimator.process(frame)

                outcome = None
                if skeleton is not None:
                    outcome = EvaluationOutcome.empty()
                    if current_exercise:
                        outcome = evaluate_form(skeleton, current_exercise)

                    draw_skeleton(display_frame, landmarks, outcome.violating_joints)
                    draw_joint_arrows(display_frame, skeleton, outcome.violating_joints)

                    if speaker and current_exercise:
                        speaker.follow(outcome)

                draw_feedback(display_frame, current_exercise, outcome)

                cv2.imshow(WINDOW_NAME, display_frame)
                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                if chr(key) in EXERCISE_KEYS:
                    current_exercise = EXERCISE_KEYS[chr(key)]
                    logger.info("Switched exercise to %s", current_exercise or "none")
    finally:
        cap.release()
        cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
