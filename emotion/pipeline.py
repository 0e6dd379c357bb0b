# pipeline.py  -- one inference cycle: locate -> prepare -> classify
import logging
from dataclasses import dataclass
from typing import Optional

from emotion.detector import BoundingBox
from emotion.labels import NO_FACE, Emotion
from emotion.preprocess import VIDEO_INTERPOLATION, prepared

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prediction:
    emotion: Emotion
    box: Optional[BoundingBox] = None
    confidence: Optional[float] = None
    frame_size: Optional[tuple] = None  # (width, height)


def run_cycle(frame, locator, classifier, interpolation=VIDEO_INTERPOLATION, crop_to_face=False):
    h, w = frame.shape[:2]
    box = locator.locate(frame)
    if box is None:
        return Prediction(NO_FACE, frame_size=(w, h))
    with prepared(frame, interpolation, box=box if crop_to_face else None) as tensor:
        emotion, confidence = classifier.predict(tensor)
    logger.debug("Predicted %s (%.3f)", emotion.english, confidence)
    return Prediction(emotion, box, confidence, (w, h))
