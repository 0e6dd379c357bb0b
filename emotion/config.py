# config.py  -- paths and tuning knobs; every value can be overridden from the environment
import os

import cv2

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


MODEL_PATH = os.environ.get("EMOTION_MODEL_PATH", os.path.join(BASE_DIR, "model", "emotion_model.h5"))
FACE_CASCADE_PATH = os.environ.get(
    "FACE_CASCADE_PATH", cv2.data.haarcascades + "haarcascade_frontalface_default.xml"
)

INPUT_SIZE = (48, 48)

# Live video
CAMERA_INDEX = int(os.environ.get("CAMERA_INDEX", "0"))
SAMPLE_INTERVAL = float(os.environ.get("SAMPLE_INTERVAL", "0.01"))  # seconds between ticks
CROP_TO_FACE = _flag("CROP_TO_FACE", False)

# Upload
ACCEPTED_MIME_PREFIX = "image/"

# Overlay
BOX_COLOR = (0, 0, 255)  # BGR red
BOX_THICKNESS = 5
