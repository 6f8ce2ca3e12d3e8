"""Blocking on-screen display of fitted landmarks."""
from __future__ import annotations

from enum import Enum

import cv2
import numpy as np

from ..core.config import Configuration
from .overlay import draw_shape

ESCAPE_KEY = 27


class ViewerResult(Enum):
    CONTINUE = "continue"
    CANCELLED = "cancelled"


class InteractiveViewer:
    def __init__(self, config: Configuration) -> None:
        self.config = config
        self._window_open = False

    def wait_milliseconds(self) -> int:
        # waitKey(0) blocks, so a positive wait must never round down to zero.
        if self.config.wait_time == 0:
            return 0
        return max(1, int(round(self.config.wait_time * 1000)))

    def show(self, image: np.ndarray, shape: np.ndarray) -> ViewerResult:
        cv2.imshow(self.config.window_title, draw_shape(image, shape, self.config.marker))
        self._window_open = True

        delay = self.wait_milliseconds()
        if delay == 0:
            print("Press any key to continue.")
        key = cv2.waitKey(delay)
        if key != -1 and key & 0xFF == ESCAPE_KEY:
            return ViewerResult.CANCELLED
        return ViewerResult.CONTINUE

    def close(self) -> None:
        if self._window_open:
            cv2.destroyWindow(self.config.window_title)
            self._window_open = False
