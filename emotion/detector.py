# detector.py  -- thin adapter over the OpenCV face cascade
import logging
from dataclasses import dataclass

import cv2

from emotion.errors import ModelNotReady

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    top_left: tuple
    bottom_right: tuple

    @classmethod
    def from_xywh(cls, x, y, w, h):
        x, y, w, h = int(x), int(y), int(w), int(h)
        return cls((x, y), (x + w, y + h))

    @property
    def width(self):
        return self.bottom_right[0] - self.top_left[0]

    @property
    def height(self):
        return self.bottom_right[1] - self.top_left[1]

    def mirrored(self, frame_width):
        """Same box flipped horizontally, for drawing over a mirrored preview."""
        x = frame_width - self.top_left[0] - self.width
        return BoundingBox((x, self.top_left[1]), (x + self.width, self.bottom_right[1]))

    def as_dict(self):
        return {
            "x": self.top_left[0],
            "y": self.top_left[1],
            "width": self.width,
            "height": self.height,
        }


class FaceLocator:
    def __init__(self, cascade, scale_factor=1.1, min_neighbors=5):
        self.cascade = cascade
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors

    def locate(self, frame):
        """Return the first detected face, or None when there is none.

        Further detections are ignored; only one face is reported per frame.
        """
        if self.cascade is None:
            raise ModelNotReady("face detector is not loaded")
        gray = frame if frame.ndim == 2 else cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        faces = self.cascade.detectMultiScale(
            gray, scaleFactor=self.scale_factor, minNeighbors=self.min_neighbors
        )
        if len(faces) == 0:
            return None
        if len(faces) > 1:
            logger.debug("%d faces found, using the first", len(faces))
        (x, y, w, h) = faces[0]
        return BoundingBox.from_xywh(x, y, w, h)
