# sources.py  -- where live frames come from
import logging

import cv2

from emotion.config import CAMERA_INDEX

logger = logging.getLogger(__name__)


class CameraSource:
    def __init__(self, index=CAMERA_INDEX):
        self.index = index
        self.cap = cv2.VideoCapture(index)
        if not self.cap.isOpened():
            self.cap.release()
            raise RuntimeError(f"Cannot open camera {index}")
        logger.info("Camera %s opened", index)

    def read(self):
        success, frame = self.cap.read()
        if not success:
            return None
        return frame

    def release(self):
        self.cap.release()
        logger.info("Camera %s released", self.index)
