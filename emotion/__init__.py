# emotion  -- face emotion inference helpers (still uploads and live video)
from emotion.labels import Emotion, EMOTIONS, NO_FACE

__all__ = ["Emotion", "EMOTIONS", "NO_FACE"]
