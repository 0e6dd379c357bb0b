# classifier.py  -- thin adapter over the Keras emotion model
import numpy as np

from emotion.errors import ModelNotReady
from emotion.labels import EMOTIONS, Emotion


class EmotionClassifier:
    def __init__(self, model, labels=EMOTIONS):
        self.model = model
        self.labels = tuple(labels)

    def scores(self, tensor):
        if self.model is None:
            raise ModelNotReady("emotion model is not loaded")
        probs = np.asarray(self.model.predict(tensor, verbose=0)[0]).reshape(-1)
        if probs.shape[0] != len(self.labels):
            raise ValueError(
                f"model returned {probs.shape[0]} scores, expected {len(self.labels)}"
            )
        return probs

    def classify(self, tensor):
        # np.argmax keeps the lowest index on ties
        return int(np.argmax(self.scores(tensor)))

    def predict(self, tensor):
        """Return ``(Emotion, confidence)`` from a single forward pass."""
        probs = self.scores(tensor)
        idx = int(np.argmax(probs))
        return Emotion.from_index(idx), float(probs[idx])
