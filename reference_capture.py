# reference_capture.py
# Build the reference descriptor from an uploaded file or the live camera.

import logging
from dataclasses import dataclass

import cv2
import face_recognition
import numpy as np
from PIL import Image, UnidentifiedImageError

from camera_controller import CameraController, CameraError
from detection import FaceDetection, FaceDetector
from quality import blur_score, crop_face

logger = logging.getLogger(__name__)


class NoFaceDetectedError(Exception):
    pass


class ImageDecodeError(Exception):
    def __init__(self, message: str = "Error processing image. Please try another photo."):
        super().__init__(message)


class CaptureFailedError(Exception):
    def __init__(self, message: str = "Error capturing photo. Please try again."):
        super().__init__(message)


@dataclass
class ReferenceCapture:
    image: np.ndarray  # RGB
    descriptor: np.ndarray
    detection: FaceDetection
    quality: float


def _build(image_rgb: np.ndarray, detected_rgb: np.ndarray, detection: FaceDetection) -> ReferenceCapture:
    quality = blur_score(crop_face(detected_rgb, detection.box))
    return ReferenceCapture(
        image=image_rgb,
        descriptor=detection.descriptor,
        detection=detection,
        quality=quality,
    )


def capture_from_file(detector: FaceDetector, path: str) -> ReferenceCapture:
    try:
        image = face_recognition.load_image_file(path)
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        logger.warning(f"Could not decode {path}: {e}")
        raise ImageDecodeError() from e

    detection = detector.detect_single_face(image)
    if detection is None:
        logger.warning(f"No face detected in {path}")
        raise NoFaceDetectedError("No face detected in the uploaded image")
    return _build(image, image, detection)


def capture_from_camera(detector: FaceDetector, camera: CameraController) -> ReferenceCapture:
    """
    Snapshot the current frame for display, then detect on a fresh frame
    from the live camera rather than on the snapshot.
    """
    snapshot = camera.snapshot()
    if snapshot is None:
        raise CameraError("Camera not ready")
    snapshot_rgb = cv2.cvtColor(snapshot, cv2.COLOR_BGR2RGB)

    live_rgb = cv2.cvtColor(camera.read(), cv2.COLOR_BGR2RGB)
    detection = detector.detect_single_face(live_rgb)
    if detection is None:
        logger.warning("No face detected in the captured frame")
        raise NoFaceDetectedError("No face detected in the captured image")
    return _build(snapshot_rgb, live_rgb, detection)
