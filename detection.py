# detection.py
# Face detection, landmarks and descriptor extraction over the loaded networks.

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import cv2
import numpy as np

from config import DETECT_SCALE, DETECT_UPSAMPLE
from face_models import FaceModels

logger = logging.getLogger(__name__)


@dataclass
class FaceDetection:
    box: Tuple[int, int, int, int]  # (top, right, bottom, left)
    descriptor: np.ndarray
    landmarks: List[Tuple[int, int]] = field(default_factory=list)
    confidence: float = 0.0

    def scaled(self, factor: float) -> "FaceDetection":
        top, right, bottom, left = self.box
        return FaceDetection(
            box=(int(top * factor), int(right * factor), int(bottom * factor), int(left * factor)),
            descriptor=self.descriptor,
            landmarks=[(int(x * factor), int(y * factor)) for x, y in self.landmarks],
            confidence=self.confidence,
        )


def _rect_to_box(rect, shape) -> Tuple[int, int, int, int]:
    height, width = shape[:2]
    return (
        max(rect.top(), 0),
        min(rect.right(), width),
        min(rect.bottom(), height),
        max(rect.left(), 0),
    )


class FaceDetector:
    def __init__(self, models: FaceModels, upsample: int = DETECT_UPSAMPLE, scale: float = DETECT_SCALE):
        self._models = models
        self.upsample = upsample
        self.scale = scale

    def _describe(self, rgb_img: np.ndarray, mmod_rect) -> FaceDetection:
        rect = mmod_rect.rect
        shape = self._models.shape_predictor(rgb_img, rect)
        descriptor = self._models.encoder.compute_face_descriptor(rgb_img, shape, 1)
        return FaceDetection(
            box=_rect_to_box(rect, rgb_img.shape),
            descriptor=np.array(descriptor, dtype="float32"),
            landmarks=[(p.x, p.y) for p in shape.parts()],
            confidence=float(mmod_rect.confidence),
        )

    def detect_single_face(self, rgb_img: np.ndarray) -> Optional[FaceDetection]:
        """Highest-confidence face in a full resolution RGB image, or None."""
        found = self._models.detector(rgb_img, self.upsample)
        if len(found) == 0:
            return None
        best = max(found, key=lambda r: r.confidence)
        return self._describe(rgb_img, best)

    def detect_all_faces(self, rgb_img: np.ndarray) -> List[FaceDetection]:
        """
        Every face in the image. Detection runs on a copy downscaled by
        `scale` and the boxes are mapped back to the input size.
        """
        if self.scale != 1.0:
            small = cv2.resize(rgb_img, (0, 0), fx=self.scale, fy=self.scale)
        else:
            small = rgb_img
        found = self._models.detector(small, self.upsample)
        detections = [self._describe(small, r) for r in found]
        if self.scale != 1.0:
            detections = [d.scaled(1 / self.scale) for d in detections]
        logger.debug(f"Detected {len(detections)} face(s)")
        return detections
