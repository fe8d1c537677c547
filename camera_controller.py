# camera_controller.py
# Webcam lifecycle: open, read, release.

import logging
from typing import Callable, Optional

import cv2
import numpy as np

from config import CAMERA_HEIGHT, CAMERA_INDEX, CAMERA_WIDTH

logger = logging.getLogger(__name__)


class CameraError(Exception):
    pass


class CameraController:
    def __init__(
        self,
        camera_index: int = CAMERA_INDEX,
        width: int = CAMERA_WIDTH,
        height: int = CAMERA_HEIGHT,
        capture_factory: Callable = cv2.VideoCapture,
    ):
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self._capture_factory = capture_factory
        self.cap = None

    @property
    def is_open(self) -> bool:
        return self.cap is not None

    def start(self):
        # Never hold two handles at once
        self.stop()

        cap = self._capture_factory(self.camera_index)
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)

        if not cap.isOpened():
            cap.release()
            raise CameraError(
                f"Cannot access camera: could not open camera index {self.camera_index}."
            )

        self.cap = cap
        logger.info(f"Camera {self.camera_index} started")

    def stop(self):
        if self.cap is None:
            return
        self.cap.release()
        self.cap = None
        logger.info(f"Camera {self.camera_index} stopped")

    def read(self) -> np.ndarray:
        """Return the next BGR frame."""
        if self.cap is None:
            raise CameraError("Camera is not running.")
        success, frame = self.cap.read()
        if not success or frame is None:
            raise CameraError(f"Could not read a frame from camera {self.camera_index}.")
        return frame

    def snapshot(self) -> Optional[np.ndarray]:
        """Copy of the next frame, or None when the camera is off."""
        if self.cap is None:
            return None
        return self.read().copy()
