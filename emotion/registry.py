# registry.py  -- loads the face and emotion models side by side, once
import logging
import threading

from emotion.errors import ModelNotReady

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Holds the face locator and emotion classifier once both have loaded.

    ``load()`` starts one background thread per loader. Nothing should call
    the models until ``ready`` is true; use ``wait_ready`` to block for it.
    """

    def __init__(self, face_loader, emotion_loader):
        self._loaders = {"face": face_loader, "emotion": emotion_loader}
        self._models = {}
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._failed = threading.Event()
        self._threads = []
        self.error = None

    def load(self):
        with self._lock:
            if self._threads:
                return
            for name, loader in self._loaders.items():
                t = threading.Thread(target=self._load_one, args=(name, loader),
                                     name=f"load-{name}-model", daemon=True)
                self._threads.append(t)
        for t in self._threads:
            t.start()

    def _load_one(self, name, loader):
        try:
            model = loader()
        except Exception as e:
            logger.exception("Loading the %s model failed", name)
            with self._lock:
                if self.error is None:
                    self.error = e
            self._failed.set()
            return
        with self._lock:
            self._models[name] = model
            done = len(self._models) == len(self._loaders)
        if done:
            logger.info("All models loaded")
            self._ready.set()

    @property
    def ready(self):
        return self._ready.is_set()

    @property
    def failed(self):
        return self._failed.is_set()

    def wait_ready(self, timeout=None):
        return self._ready.wait(timeout)

    def state(self):
        if self.ready:
            return "ready"
        if self.failed:
            return "failed"
        return "loading" if self._threads else "idle"

    def _get(self, name):
        if not self.ready:
            raise ModelNotReady(f"{name} model is not loaded yet")
        return self._models[name]

    @property
    def locator(self):
        return self._get("face")

    @property
    def classifier(self):
        return self._get("emotion")
