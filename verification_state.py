# verification_state.py
# Centralized mutable state for the verification session.

from dataclasses import dataclass
from typing import Optional

import numpy as np

from quality import is_blurry


@dataclass
class VerificationState:
    """
    Single container for everything the view renders.

    Only VerificationSession writes to it, always from the UI thread.
    """

    models_loading: bool = False
    models_ready: bool = False
    model_error: Optional[str] = None

    reference_image: Optional[np.ndarray] = None
    reference_descriptor: Optional[np.ndarray] = None
    reference_quality: Optional[float] = None

    camera_on: bool = False

    match: Optional[bool] = None
    similarity: float = 0.0
    faces_in_frame: int = 0

    def set_reference(self, image: np.ndarray, descriptor: np.ndarray, quality: Optional[float] = None):
        self.reference_image = image
        self.reference_descriptor = descriptor
        self.reference_quality = quality

    def set_match(self, match: bool, similarity: float, faces_in_frame: int):
        self.match = match
        self.similarity = similarity
        self.faces_in_frame = faces_in_frame

    def result_text(self) -> str:
        """Match line for the view, empty until a frame has been processed."""
        if self.match is None:
            return ""
        faces = f"{self.faces_in_frame} face" + ("" if self.faces_in_frame == 1 else "s")
        if self.match:
            return f"✅ Match found! Similarity: {self.similarity:.1f}% ({faces} in view)"
        return f"❌ No match found. Similarity: {self.similarity:.1f}% ({faces} in view)"

    @property
    def has_reference(self) -> bool:
        return self.reference_descriptor is not None

    @property
    def reference_blurry(self) -> bool:
        return self.reference_quality is not None and is_blurry(self.reference_quality)

    @property
    def can_upload(self) -> bool:
        return self.models_ready and not self.models_loading

    @property
    def can_capture(self) -> bool:
        return self.models_ready and self.camera_on

    @property
    def can_toggle_camera(self) -> bool:
        return self.models_ready and self.has_reference

    @property
    def matching_active(self) -> bool:
        return self.camera_on and self.has_reference and self.models_ready
