# labels.py  -- the fixed emotion label set shared by every classifier the app loads
from enum import Enum


class Emotion(Enum):
    """Emotion classes in the order the classifier emits them.

    Each member carries ``(index, english, arabic)``. ``NO_FACE`` is the
    sentinel published when no face is found; it is never a classifier output.
    """

    ANGRY = (0, "Angry", "غاضب")
    DISGUST = (1, "Disgust", "اشمئزاز")
    FEAR = (2, "Fear", "خوف")
    HAPPY = (3, "Happy", "سعيد")
    NEUTRAL = (4, "Neutral", "محايد")
    SAD = (5, "Sad", "حزين")
    SURPRISE = (6, "Surprise", "مفاجأة")
    NO_FACE = (-1, "No face detected", "لم يتم العثور على وجه")

    def __init__(self, index, english, arabic):
        self.index = index
        self.english = english
        self.arabic = arabic

    @property
    def is_face(self):
        return self is not Emotion.NO_FACE

    @classmethod
    def from_index(cls, index):
        index = int(index)
        if not 0 <= index < len(EMOTIONS):
            raise ValueError(f"emotion index {index} outside [0, {len(EMOTIONS)})")
        return EMOTIONS[index]


EMOTIONS = tuple(e for e in Emotion if e is not Emotion.NO_FACE)
NO_FACE = Emotion.NO_FACE
