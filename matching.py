# matching.py
# Face matching utilities

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Sequence

import face_recognition
import numpy as np

from config import MATCH_DISTANCE, STRONG_MATCH_DISTANCE
from detection import FaceDetection


class MatchLevel(str, Enum):
    STRONG = "strong"
    BORDERLINE = "borderline"
    NO_MATCH = "no-match"


def classify_distance(distance: float) -> MatchLevel:
    if distance < STRONG_MATCH_DISTANCE:
        return MatchLevel.STRONG
    if distance < MATCH_DISTANCE:
        return MatchLevel.BORDERLINE
    return MatchLevel.NO_MATCH


def is_match(distance: float) -> bool:
    return distance < MATCH_DISTANCE


def similarity_from_distance(distance: float) -> float:
    """Similarity percentage, 100 - 100 * distance clamped to [0, 100]."""
    if math.isinf(distance):
        return 0.0
    return max(0.0, min(100.0, 100.0 - distance * 100.0))


@dataclass
class FaceMatch:
    detection: FaceDetection
    distance: float

    @property
    def level(self) -> MatchLevel:
        return classify_distance(self.distance)


@dataclass
class FrameMatch:
    faces: List[FaceMatch] = field(default_factory=list)
    best_distance: float = math.inf

    @property
    def is_match(self) -> bool:
        return is_match(self.best_distance)

    @property
    def similarity(self) -> float:
        return similarity_from_distance(self.best_distance)


def match_faces(reference: np.ndarray, detections: Sequence[FaceDetection]) -> FrameMatch:
    """Distance from every detection to the reference, tracking the minimum."""
    if not detections:
        return FrameMatch()
    dists = face_recognition.face_distance(
        np.asarray([d.descriptor for d in detections]), reference
    )
    faces = [FaceMatch(detection=d, distance=float(dist)) for d, dist in zip(detections, dists)]
    return FrameMatch(faces=faces, best_distance=float(np.min(dists)))
