# preprocess.py  -- frame -> (1, 48, 48, 1) float32 classifier input
import logging
from contextlib import contextmanager

import cv2
import numpy as np

from emotion.config import INPUT_SIZE

logger = logging.getLogger(__name__)

VIDEO_INTERPOLATION = cv2.INTER_LINEAR
UPLOAD_INTERPOLATION = cv2.INTER_NEAREST


def prepare(frame, interpolation=VIDEO_INTERPOLATION, box=None, target_size=INPUT_SIZE):
    """Resize, average the colour channels and add batch/channel axes.

    The whole frame is resized unless ``box`` is given, in which case the
    face region is cropped first. Pixel values keep their 0-255 range.
    """
    region = frame
    if box is not None:
        (x0, y0), (x1, y1) = box.top_left, box.bottom_right
        h, w = frame.shape[:2]
        x0, y0 = max(0, x0), max(0, y0)
        x1, y1 = min(w, x1), min(h, y1)
        if x1 > x0 and y1 > y0:
            region = frame[y0:y1, x0:x1]
    resized = cv2.resize(region, target_size, interpolation=interpolation)
    if resized.ndim == 3:
        gray = resized.mean(axis=-1)
    else:
        gray = resized
    arr = gray.astype("float32")
    arr = np.expand_dims(arr, axis=-1)   # (h,w,1)
    arr = np.expand_dims(arr, axis=0)    # (1,h,w,1)
    return arr


class TensorLease:
    """Owns one prepared tensor for a single classification call.

    The tensor is a plain NumPy array, so dropping the reference is all the
    release it needs and the pipeline passes no hook. ``on_release`` is for
    callers whose input holds a native buffer that must be freed; it runs
    once when the lease ends, with the tensor as its only argument. A failing hook is logged and never
    propagates.
    """

    def __init__(self, tensor, on_release=None):
        self.tensor = tensor
        self.on_release = on_release
        self.released = False

    def release(self):
        if self.released:
            return
        tensor, self.tensor = self.tensor, None
        self.released = True
        if self.on_release is None:
            return
        try:
            self.on_release(tensor)
        except Exception:
            logger.warning("Failed to release input tensor", exc_info=True)


@contextmanager
def prepared(frame, interpolation=VIDEO_INTERPOLATION, box=None, on_release=None):
    lease = TensorLease(prepare(frame, interpolation, box=box), on_release=on_release)
    try:
        yield lease.tensor
    finally:
        lease.release()
