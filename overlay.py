# overlay.py
# Draw labelled face boxes onto a frame.

import cv2
import numpy as np

from config import COLOR_BORDERLINE, COLOR_NO_MATCH, COLOR_STRONG_MATCH
from matching import FaceMatch, FrameMatch, MatchLevel

LEVEL_COLORS = {
    MatchLevel.STRONG: COLOR_STRONG_MATCH,
    MatchLevel.BORDERLINE: COLOR_BORDERLINE,
    MatchLevel.NO_MATCH: COLOR_NO_MATCH,
}


def box_color(face: FaceMatch):
    return LEVEL_COLORS[face.level]


def box_label(face: FaceMatch) -> str:
    return f"Distance: {face.distance:.2f}"


def draw_matches(frame: np.ndarray, frame_match: FrameMatch) -> np.ndarray:
    """Return a copy of the BGR frame with one box per face."""
    canvas = frame.copy()
    for face in frame_match.faces:
        top, right, bottom, left = face.detection.box
        color = box_color(face)

        cv2.rectangle(canvas, (left, top), (right, bottom), color, 2)
        cv2.rectangle(canvas, (left, bottom - 25), (right, bottom), color, cv2.FILLED)
        cv2.putText(
            canvas,
            box_label(face),
            (left + 6, bottom - 7),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            (255, 255, 255),
            1,
        )
    return canvas
