# still.py  -- one-shot prediction for an uploaded photo
import base64
import binascii
import logging
import threading
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from emotion.config import ACCEPTED_MIME_PREFIX, CROP_TO_FACE
from emotion.errors import InvalidUpload, ModelNotReady
from emotion.pipeline import Prediction, run_cycle
from emotion.preprocess import UPLOAD_INTERPOLATION

logger = logging.getLogger(__name__)

CANCELED_MESSAGE = "File upload canceled"
INVALID_MESSAGE = "Invalid file type. Please choose an image file."


@dataclass(frozen=True)
class Upload:
    filename: str
    mimetype: str
    data: bytes

    @classmethod
    def from_data_url(cls, data_url, filename="snapshot"):
        try:
            header, encoded = data_url.split(",", 1)
            data = base64.b64decode(encoded)
        except (ValueError, binascii.Error) as e:
            raise InvalidUpload(INVALID_MESSAGE) from e
        # data:image/png;base64
        mimetype = header[len("data:"):].split(";", 1)[0] if header.startswith("data:") else ""
        return cls(filename, mimetype, data)

    @property
    def is_empty(self):
        return not self.filename and not self.data


def decode_image(data):
    arr = np.frombuffer(data, np.uint8)
    img = cv2.imdecode(arr, cv2.IMREAD_COLOR)
    if img is None:
        raise InvalidUpload("Cannot decode image")
    return img


def _log_warning(message):
    logger.warning(message)


@dataclass(frozen=True)
class StillResult:
    prediction: Optional[Prediction] = None
    warning: Optional[str] = None


class StillSession:
    """What the upload view shows: the last accepted upload and its prediction.

    Every submission or clear takes a ticket, and only the holder of the
    latest ticket may change what is shown. A slow prediction therefore never
    replaces a rejection or clear that came after it.
    """

    def __init__(self, registry, warn=_log_warning, accepted_prefix=ACCEPTED_MIME_PREFIX,
                 crop_to_face=CROP_TO_FACE):
        self.registry = registry
        self.warn = warn
        self.accepted_prefix = accepted_prefix
        self.crop_to_face = crop_to_face
        self._lock = threading.Lock()
        self._ticket = 0
        self._filename = None
        self._prediction = None

    def _take_ticket(self):
        with self._lock:
            self._ticket += 1
            return self._ticket

    def _show(self, ticket, filename, prediction):
        with self._lock:
            if ticket != self._ticket:
                return False
            self._filename = filename
            self._prediction = prediction
            return True

    def snapshot(self):
        """Return ``(filename, prediction)`` currently on display."""
        with self._lock:
            return self._filename, self._prediction

    def clear(self):
        self._show(self._take_ticket(), None, None)

    def reject(self, message):
        self.clear()
        self.warn(message)
        return StillResult(warning=message)

    def accepts(self, upload):
        return bool(upload.mimetype) and upload.mimetype.startswith(self.accepted_prefix)

    def validate(self, upload):
        """Return the warning for an unusable upload, or None."""
        if upload is None or upload.is_empty:
            return CANCELED_MESSAGE
        if not self.accepts(upload):
            return INVALID_MESSAGE
        return None

    def submit(self, upload):
        """Run one prediction for ``upload``.

        A canceled or non-image upload clears the view, emits a single
        warning and comes back as a ``StillResult`` carrying that warning.
        """
        warning = self.validate(upload)
        if warning is not None:
            return self.reject(warning)
        if not self.registry.ready:
            raise ModelNotReady("models are still loading")
        ticket = self._take_ticket()
        try:
            img = decode_image(upload.data)
        except InvalidUpload:
            return self.reject(INVALID_MESSAGE)

        prediction = run_cycle(
            img, self.registry.locator, self.registry.classifier,
            UPLOAD_INTERPOLATION, self.crop_to_face,
        )
        filename = upload.filename or "upload"
        if not self._show(ticket, filename, prediction):
            logger.debug("%s finished after a newer upload, not displayed", filename)
        logger.info("%s: %s", filename, prediction.emotion.english)
        return StillResult(prediction)
