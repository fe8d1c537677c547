# face_models.py
# Background loading of the pretrained dlib networks.

import logging
import os
import queue
from dataclasses import dataclass
from threading import Thread
from typing import Any, Callable, Dict, List, Optional

import dlib
import face_recognition_models

from config import DETECTOR_MODEL, MODEL_FILES
from ResourcePath import resource_path

logger = logging.getLogger(__name__)


class ModelLoadError(Exception):
    pass


class ModelsNotReadyError(Exception):
    def __init__(self, message: str = "Models are still loading. Please wait."):
        super().__init__(message)


@dataclass
class DetectedFace:
    """Same shape as dlib's mmod_rectangle."""
    rect: Any
    confidence: float


class HogDetector:
    """dlib's HOG frontal face detector behind the CNN detector's call signature."""

    def __init__(self):
        self._detector = dlib.get_frontal_face_detector()

    def __call__(self, rgb_img, upsample: int = 0) -> List[DetectedFace]:
        rects, scores, _ = self._detector.run(rgb_img, upsample)
        return [DetectedFace(rect=r, confidence=float(s)) for r, s in zip(rects, scores)]


@dataclass
class FaceModels:
    detector: Any
    shape_predictor: Any
    encoder: Any


def default_model_dir() -> str:
    """Directory holding the models shipped with face_recognition_models."""
    return os.path.dirname(face_recognition_models.face_recognition_model_location())


def resolve_model_paths(model_dir: str, detector_model: str = DETECTOR_MODEL) -> Dict[str, str]:
    """
    Map each model role to its file, raising if any file is missing.
    The HOG detector is built into dlib, so it has no "detector" entry.
    """
    if detector_model not in ("cnn", "hog"):
        raise ModelLoadError(f"Unknown detector model: {detector_model}")
    base = resource_path(model_dir)
    paths = {
        role: os.path.join(base, name)
        for role, name in MODEL_FILES.items()
        if not (role == "detector" and detector_model == "hog")
    }
    missing = [p for p in paths.values() if not os.path.isfile(p)]
    if missing:
        raise ModelLoadError(f"Missing model files: {', '.join(missing)}")
    return paths


def load_dlib_models(paths: Dict[str, str]) -> FaceModels:
    return FaceModels(
        detector=(
            dlib.cnn_face_detection_model_v1(paths["detector"])
            if "detector" in paths
            else HogDetector()
        ),
        shape_predictor=dlib.shape_predictor(paths["landmarks"]),
        encoder=dlib.face_recognition_model_v1(paths["recognition"]),
    )


class ModelLoader:
    """
    Loads the networks on a daemon thread: detector, landmarks and
    recognition, or only the last two with the built-in HOG detector.

    The UI thread calls poll() until it returns the models or raises
    ModelLoadError. A failed load is not retried.
    """

    def __init__(
        self,
        model_dir: Optional[str] = None,
        detector_model: str = DETECTOR_MODEL,
        load_fn: Callable[[Dict[str, str]], FaceModels] = load_dlib_models,
    ):
        self.model_dir = model_dir or default_model_dir()
        self.detector_model = detector_model
        self._load_fn = load_fn
        self._results: queue.Queue = queue.Queue(maxsize=1)
        self._thread: Optional[Thread] = None
        self._models: Optional[FaceModels] = None
        self._error: Optional[ModelLoadError] = None

    @property
    def ready(self) -> bool:
        return self._models is not None

    def start(self):
        if self._thread is not None:
            return
        self._thread = Thread(target=self._run, daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def _run(self):
        try:
            paths = resolve_model_paths(self.model_dir, self.detector_model)
            models = self._load_fn(paths)
        except Exception as e:
            logger.exception(f"Failed to load models from {self.model_dir}")
            if not isinstance(e, ModelLoadError):
                e = ModelLoadError(f"Failed to load models: {e}")
            self._results.put(e)
            return
        logger.info(f"Models loaded from {self.model_dir}")
        self._results.put(models)

    def poll(self) -> Optional[FaceModels]:
        """Return the models once loaded, None while pending."""
        if self._models is not None:
            return self._models
        if self._error is not None:
            raise self._error
        try:
            result = self._results.get_nowait()
        except queue.Empty:
            return None
        if isinstance(result, ModelLoadError):
            self._error = result
            raise result
        self._models = result
        return result
