class EmotionError(Exception):
    pass


class ModelNotReady(EmotionError):
    """A model was used before it finished loading."""


class InvalidUpload(EmotionError):
    pass
