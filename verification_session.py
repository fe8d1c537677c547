# verification_session.py
# Top-level orchestration: owns the state and implements the user operations.

import logging
from typing import Callable, Optional

import cv2
import numpy as np

from camera_controller import CameraController, CameraError
from detection import FaceDetector
from face_models import FaceModels, ModelLoader, ModelLoadError, ModelsNotReadyError
from matching import match_faces
from overlay import draw_matches
from reference_capture import (
    CaptureFailedError,
    ImageDecodeError,
    NoFaceDetectedError,
    ReferenceCapture,
    capture_from_camera,
    capture_from_file,
)
from verification_state import VerificationState

logger = logging.getLogger(__name__)


class NoReferenceError(Exception):
    def __init__(self, message: str = "Set a reference photo first."):
        super().__init__(message)


class VerificationSession:
    def __init__(
        self,
        camera: CameraController,
        loader: ModelLoader,
        state: Optional[VerificationState] = None,
        detector_factory: Callable[[FaceModels], FaceDetector] = FaceDetector,
    ):
        self.camera = camera
        self.loader = loader
        self.state = state or VerificationState()
        self.detector: Optional[FaceDetector] = None
        self._detector_factory = detector_factory

    # ---------- Models ----------

    def load_models(self):
        self.state.models_loading = True
        self.loader.start()

    def poll_models(self) -> bool:
        """Move the loader result into the state. Returns True once loading has finished."""
        try:
            models = self.loader.poll()
        except ModelLoadError as e:
            self.state.models_loading = False
            self.state.models_ready = False
            self.state.model_error = str(e)
            return True

        if models is None:
            return False

        if self.detector is None:
            self.detector = self._detector_factory(models)
        self.state.models_loading = False
        self.state.models_ready = True
        self.state.model_error = None
        return True

    def _require_models(self):
        if not self.state.models_ready or self.detector is None:
            raise ModelsNotReadyError()

    # ---------- Reference ----------

    def _set_reference(self, capture: ReferenceCapture):
        self.state.set_reference(capture.image, capture.descriptor, capture.quality)
        logger.info(f"Reference set (blur score {capture.quality:.1f})")
        if self.state.reference_blurry:
            logger.warning("Reference face looks blurry, matching may be unreliable")

    def upload_reference(self, path: str) -> ReferenceCapture:
        self._require_models()
        try:
            capture = capture_from_file(self.detector, path)
        except (NoFaceDetectedError, ImageDecodeError):
            raise
        except Exception as e:
            logger.exception(f"Error processing image {path}")
            raise ImageDecodeError() from e
        self._set_reference(capture)
        return capture

    def capture_reference(self) -> ReferenceCapture:
        self._require_models()
        if not self.state.camera_on or not self.camera.is_open:
            raise CameraError("Camera not ready")
        try:
            capture = capture_from_camera(self.detector, self.camera)
        except (CameraError, NoFaceDetectedError):
            raise
        except Exception as e:
            logger.exception("Error capturing photo")
            raise CaptureFailedError() from e
        self._set_reference(capture)
        return capture

    # ---------- Camera ----------

    def start_camera(self):
        self._require_models()
        if not self.state.has_reference:
            raise NoReferenceError()
        if self.state.camera_on and self.camera.is_open:
            return

        self.state.camera_on = True
        try:
            self.camera.start()
        except CameraError:
            self.state.camera_on = False
            raise

    def stop_camera(self):
        self.camera.stop()
        self.state.camera_on = False

    def toggle_camera(self) -> bool:
        if self.state.camera_on:
            self.stop_camera()
        else:
            self.start_camera()
        return self.state.camera_on

    # ---------- Per-frame ----------

    def process_frame(self, frame: np.ndarray) -> np.ndarray:
        """
        Match every face in a BGR frame against the reference and return
        the annotated frame. Without an active match the frame is returned
        unchanged.
        """
        if not self.state.matching_active or self.detector is None:
            return frame

        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        detections = self.detector.detect_all_faces(frame_rgb)
        frame_match = match_faces(self.state.reference_descriptor, detections)
        self.state.set_match(frame_match.is_match, frame_match.similarity, len(frame_match.faces))
        logger.debug(
            f"{len(frame_match.faces)} face(s), best distance {frame_match.best_distance:.3f}"
        )
        return draw_matches(frame, frame_match)

    def close(self):
        self.stop_camera()
        self.loader.join(timeout=2)
