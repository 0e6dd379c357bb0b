import threading
import time

import numpy as np

from emotion.classifier import EmotionClassifier
from emotion.detector import BoundingBox
from emotion.registry import ModelRegistry

MIDDLE_HIGH = [0.1, 0.05, 0.2, 0.15, 0.3, 0.1, 0.1]  # index 4 is the highest


class FakeLocator:
    def __init__(self, box=BoundingBox((10, 20), (50, 70))):
        self.box = box
        self.calls = 0

    def locate(self, frame):
        self.calls += 1
        return self.box


class FakeModel:
    """Stands in for a Keras model; ``gate`` holds predict() until it is set."""

    def __init__(self, scores=MIDDLE_HIGH, gate=None):
        self.scores = scores
        self.gate = gate
        self.calls = 0
        self.shapes = []
        self.entered = threading.Event()

    def predict(self, x, verbose=0):
        self.calls += 1
        self.shapes.append(x.shape)
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(5)
        return np.array([self.scores], dtype="float32")


class FakeSource:
    def __init__(self, frame=None):
        self.frame = frame if frame is not None else gray_frame()
        self.reads = 0
        self.released = False

    def read(self):
        self.reads += 1
        return self.frame.copy()

    def release(self):
        self.released = True


def gray_frame(width=64, height=48, value=128):
    return np.full((height, width, 3), value, dtype=np.uint8)


def ready_registry(locator=None, model=None):
    locator = locator if locator is not None else FakeLocator()
    classifier = EmotionClassifier(model if model is not None else FakeModel())
    registry = ModelRegistry(lambda: locator, lambda: classifier)
    registry.load()
    assert registry.wait_ready(2)
    return registry


def wait_until(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()
