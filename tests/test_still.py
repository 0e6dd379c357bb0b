import base64
import threading

import cv2
import pytest

from emotion.errors import InvalidUpload, ModelNotReady
from emotion.labels import NO_FACE, Emotion
from emotion.registry import ModelRegistry
from emotion.still import CANCELED_MESSAGE, INVALID_MESSAGE, StillSession, Upload
from fakes import FakeLocator, FakeModel, gray_frame, ready_registry


def png_bytes(frame=None):
    ok, buf = cv2.imencode(".png", frame if frame is not None else gray_frame())
    assert ok
    return buf.tobytes()


def make_session(registry=None):
    warnings = []
    session = StillSession(registry or ready_registry(), warn=warnings.append)
    return session, warnings


def test_accepted_image_is_classified_once():
    model = FakeModel()
    session, warnings = make_session(ready_registry(model=model))
    result = session.submit(Upload("face.png", "image/png", png_bytes()))
    assert result.warning is None
    assert result.prediction.emotion is Emotion.NEUTRAL
    assert session.snapshot() == ("face.png", result.prediction)
    assert model.calls == 1
    assert warnings == []


def test_no_face_in_upload():
    model = FakeModel()
    session, _ = make_session(ready_registry(FakeLocator(box=None), model))
    result = session.submit(Upload("wall.jpg", "image/jpeg", png_bytes()))
    assert result.prediction.emotion is NO_FACE
    assert model.calls == 0


def test_wrong_type_clears_previous_and_warns_once():
    session, warnings = make_session()
    session.submit(Upload("face.png", "image/png", png_bytes()))
    result = session.submit(Upload("notes.txt", "text/plain", b"hello"))
    assert result.prediction is None
    assert result.warning == INVALID_MESSAGE
    assert session.snapshot() == (None, None)
    assert warnings == [INVALID_MESSAGE]


def test_canceled_selection():
    session, warnings = make_session()
    session.submit(Upload("face.png", "image/png", png_bytes()))
    assert session.submit(None).warning == CANCELED_MESSAGE
    assert session.submit(Upload("", "", b"")).warning == CANCELED_MESSAGE
    assert session.snapshot() == (None, None)
    assert warnings == [CANCELED_MESSAGE, CANCELED_MESSAGE]


def test_undecodable_image_is_rejected():
    session, warnings = make_session()
    assert session.submit(Upload("broken.png", "image/png", b"not a png")).warning == INVALID_MESSAGE
    assert warnings == [INVALID_MESSAGE]


def test_type_checked_before_models_are_ready():
    registry = ModelRegistry(FakeLocator, FakeModel)
    session, warnings = make_session(registry)
    assert session.submit(Upload("notes.txt", "text/plain", b"hello")).warning == INVALID_MESSAGE
    with pytest.raises(ModelNotReady):
        session.submit(Upload("face.png", "image/png", png_bytes()))
    assert warnings == [INVALID_MESSAGE]


def test_slow_prediction_does_not_replace_later_rejection():
    gate = threading.Event()
    model = FakeModel(gate=gate)
    session, _ = make_session(ready_registry(model=model))
    results = []
    worker = threading.Thread(
        target=lambda: results.append(session.submit(Upload("face.png", "image/png", png_bytes())))
    )
    worker.start()
    assert model.entered.wait(2)
    rejected = session.submit(Upload("notes.txt", "text/plain", b"hello"))
    gate.set()
    worker.join(2)
    assert rejected.warning == INVALID_MESSAGE
    assert results[0].prediction.emotion is Emotion.NEUTRAL
    assert session.snapshot() == (None, None)


def test_clear():
    session, _ = make_session()
    session.submit(Upload("face.png", "image/png", png_bytes()))
    session.clear()
    assert session.snapshot() == (None, None)


def test_from_data_url():
    data = png_bytes()
    url = "data:image/png;base64," + base64.b64encode(data).decode()
    upload = Upload.from_data_url(url)
    assert upload.mimetype == "image/png"
    assert upload.data == data


def test_from_bad_data_url():
    with pytest.raises(InvalidUpload):
        Upload.from_data_url("no comma here")
