# live_match_loop.py
# Per-frame tick, re-armed through the host scheduler while the camera is on.

import logging
from typing import Callable

import numpy as np

from config import FRAME_INTERVAL_MS
from verification_session import VerificationSession

logger = logging.getLogger(__name__)


class LiveMatchLoop:
    def __init__(
        self,
        session: VerificationSession,
        schedule: Callable[[int, Callable[[], None]], object],
        render: Callable[[np.ndarray], None],
        interval_ms: int = FRAME_INTERVAL_MS,
    ):
        self._session = session
        self._schedule = schedule
        self._render = render
        self.interval_ms = interval_ms
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def start(self):
        # At most one tick armed at a time
        if self._pending:
            return
        self._pending = True
        self._schedule(self.interval_ms, self.tick)

    def tick(self):
        self._pending = False
        state = self._session.state
        if not state.camera_on:
            return

        try:
            frame = self._session.camera.read()
            annotated = self._session.process_frame(frame)
            self._render(annotated)
        except Exception:
            logger.exception("Error processing video frame")

        if state.camera_on:
            self.start()
