# quality.py

import cv2
import numpy as np

from config import BLUR_THRESHOLD


def blur_score(rgb_img: np.ndarray) -> float:
    if rgb_img is None or rgb_img.size == 0:
        return 0.0
    gray = cv2.cvtColor(rgb_img, cv2.COLOR_RGB2GRAY)
    return float(cv2.Laplacian(gray, cv2.CV_64F).var())


def crop_face(rgb_img: np.ndarray, box) -> np.ndarray:
    """Crop a (top, right, bottom, left) box, clamped to the image bounds."""
    top, right, bottom, left = box
    height, width = rgb_img.shape[:2]
    return rgb_img[max(0, top):min(height, bottom), max(0, left):min(width, right)]


def is_blurry(score: float, threshold: float = BLUR_THRESHOLD) -> bool:
    return score < threshold
