import numpy as np
import pytest

from emotion.detector import BoundingBox, FaceLocator
from emotion.errors import ModelNotReady
from fakes import gray_frame


class FakeCascade:
    def __init__(self, faces):
        self.faces = faces
        self.seen = None

    def detectMultiScale(self, gray, scaleFactor, minNeighbors):
        self.seen = gray
        return self.faces


def test_no_face_returns_none():
    assert FaceLocator(FakeCascade(())).locate(gray_frame()) is None


def test_first_detection_only():
    cascade = FakeCascade(np.array([[5, 6, 20, 30], [40, 10, 10, 10]]))
    box = FaceLocator(cascade).locate(gray_frame())
    assert box == BoundingBox((5, 6), (25, 36))
    assert cascade.seen.ndim == 2


def test_unloaded_cascade_is_not_ready():
    with pytest.raises(ModelNotReady):
        FaceLocator(None).locate(gray_frame())


def test_mirrored_box():
    box = BoundingBox((10, 20), (50, 70))
    m = box.mirrored(640)
    assert m.top_left == (590, 20)
    assert (m.width, m.height) == (box.width, box.height)
    assert m.as_dict() == {"x": 590, "y": 20, "width": 40, "height": 50}
