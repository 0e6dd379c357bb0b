# sampler.py  -- live video: sample the camera on a fixed cadence and publish the latest emotion
import logging
import threading
from enum import Enum

from emotion.config import CROP_TO_FACE, SAMPLE_INTERVAL
from emotion.pipeline import run_cycle
from emotion.preprocess import VIDEO_INTERPOLATION

logger = logging.getLogger(__name__)

# How often a LOADING sampler re-checks the registry and its cancel token
LOAD_POLL = 0.1


class PipelineState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    RUNNING = "running"
    STOPPED = "stopped"


class SamplingTask:
    """Handle on one run of the sampling loop: its worker thread and cancel token."""

    def __init__(self, generation):
        self.generation = generation
        self.cancelled = threading.Event()
        self.thread = None

    def cancel(self):
        self.cancelled.set()

    def join(self, timeout=None):
        if self.thread is not None and self.thread is not threading.current_thread():
            self.thread.join(timeout)


class VideoSampler:
    """Owns the live pipeline state and the one worker that runs cycles.

    Cycles run one after another on a single worker thread, so a tick never
    starts while the previous cycle is still waiting on a model. ``stop()``
    does not interrupt a running cycle; whatever it produces afterwards is
    dropped because its task generation is no longer current.
    """

    def __init__(self, registry, source_factory, interval=SAMPLE_INTERVAL, crop_to_face=CROP_TO_FACE):
        self._registry = registry
        self._source_factory = source_factory
        self._interval = interval
        self._crop_to_face = crop_to_face
        self._lock = threading.Lock()
        self._state = PipelineState.IDLE
        self._prediction = None
        self._frame = None
        self._generation = 0
        self._task = None

    @property
    def state(self):
        with self._lock:
            return self._state

    @property
    def prediction(self):
        with self._lock:
            return self._prediction

    def snapshot(self):
        """Return ``(state, prediction, frame)`` as one consistent read."""
        with self._lock:
            return self._state, self._prediction, self._frame

    def start(self):
        with self._lock:
            if self._state in (PipelineState.LOADING, PipelineState.RUNNING):
                return False
            previous = self._task
            self._generation += 1
            task = SamplingTask(self._generation)
            task.thread = threading.Thread(
                target=self._run, args=(task, previous), name="video-sampler", daemon=True
            )
            self._task = task
            self._state = PipelineState.LOADING
        logger.info("Video sampling requested")
        task.thread.start()
        return True

    def stop(self):
        with self._lock:
            if self._state not in (PipelineState.LOADING, PipelineState.RUNNING):
                return False
            self._generation += 1
            self._state = PipelineState.STOPPED
            self._prediction = None
            self._frame = None
            task = self._task
        task.cancel()
        logger.info("Video sampling stopped")
        return True

    def close(self, timeout=None):
        self.stop()
        with self._lock:
            task = self._task
        if task is not None:
            task.join(timeout)

    def _is_current(self, task):
        # caller holds self._lock
        return task.generation == self._generation and not task.cancelled.is_set()

    def _wait_for_models(self, task):
        while not self._registry.wait_ready(LOAD_POLL):
            if task.cancelled.is_set():
                return False
            if self._registry.failed:
                logger.error("Models failed to load, video sampling cannot start: %s",
                             self._registry.error)
                return False
        return not task.cancelled.is_set()

    def _run(self, task, previous):
        if previous is not None:
            previous.join()
        if not self._wait_for_models(task):
            with self._lock:
                if self._is_current(task):
                    self._state = PipelineState.STOPPED
            return
        with self._lock:
            if not self._is_current(task):
                return
            self._state = PipelineState.RUNNING
        logger.info("Video sampling running every %.3fs", self._interval)

        locator = self._registry.locator
        classifier = self._registry.classifier
        try:
            source = self._source_factory()
        except Exception:
            logger.exception("Could not open the frame source")
            with self._lock:
                if self._is_current(task):
                    self._state = PipelineState.STOPPED
            return
        try:
            while not task.cancelled.is_set():
                self._tick(task, source, locator, classifier)
                task.cancelled.wait(self._interval)
        finally:
            source.release()

    def _tick(self, task, source, locator, classifier):
        frame = source.read()
        if frame is None:
            return
        try:
            prediction = run_cycle(frame, locator, classifier, VIDEO_INTERPOLATION, self._crop_to_face)
        except Exception:
            logger.exception("Inference cycle failed")
            return
        self._publish(task, frame, prediction)

    def _publish(self, task, frame, prediction):
        with self._lock:
            if not self._is_current(task) or self._state is not PipelineState.RUNNING:
                logger.debug("Discarding result of a cancelled cycle")
                return False
            self._prediction = prediction
            self._frame = frame
            return True
