# models.py  -- loaders for the two pre-trained models
import logging
import os

import cv2
from tensorflow.keras.models import load_model

from emotion.classifier import EmotionClassifier
from emotion.config import FACE_CASCADE_PATH, MODEL_PATH
from emotion.detector import FaceLocator

logger = logging.getLogger(__name__)


def load_face_locator(path=FACE_CASCADE_PATH):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Face cascade not found at {path}.")
    cascade = cv2.CascadeClassifier(path)
    if cascade.empty():
        raise FileNotFoundError(f"{path} is not a usable cascade file.")
    logger.info("Face cascade loaded from %s", path)
    return FaceLocator(cascade)


def load_emotion_classifier(path=MODEL_PATH):
    if not os.path.exists(path):
        raise FileNotFoundError(f"{path} not found. Train model or place model/emotion_model.h5 before running.")
    model = load_model(path, compile=False)
    logger.info("Emotion model loaded from %s", path)
    return EmotionClassifier(model)
