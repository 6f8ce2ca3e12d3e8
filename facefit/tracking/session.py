"""Per-run tracking session with confidence gating."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

import numpy as np

from .base import LandmarkTracker, as_shape, empty_shape

logger = logging.getLogger(__name__)


class Discipline(Enum):
    FRESH = "fresh"
    CONTINUITY = "continuity"


class TrackingSession:
    """Own one tracker and one parameter set for the lifetime of a run.

    ``process`` returns the fitted shape when the tracker's score reaches the
    threshold. Below the threshold the tracker is reset, so a later
    continuity call starts cold, and an empty shape is returned.
    """

    def __init__(
        self,
        tracker: LandmarkTracker,
        params: Any,
        threshold: int,
        discipline: Discipline = Discipline.FRESH,
    ) -> None:
        self._tracker: Optional[LandmarkTracker] = tracker
        self._params = params
        self.threshold = threshold
        self.discipline = discipline
        self.accepted = 0
        self.rejected = 0

    @property
    def closed(self) -> bool:
        return self._tracker is None

    def process(self, gray: np.ndarray) -> np.ndarray:
        tracker = self._tracker
        if tracker is None:
            raise RuntimeError("Tracking session has already been closed")

        if self.discipline is Discipline.CONTINUITY:
            score = tracker.track(gray, self._params)
        else:
            score = tracker.new_frame(gray, self._params)

        if score >= self.threshold:
            self.accepted += 1
            return as_shape(tracker.get_shape())

        logger.info("Fit score %s below threshold %d; resetting tracker", score, self.threshold)
        tracker.reset()
        self.rejected += 1
        return empty_shape()

    def close(self) -> None:
        tracker, self._tracker = self._tracker, None
        self._params = None
        if tracker is not None and hasattr(tracker, "close"):
            tracker.close()

    def __enter__(self) -> "TrackingSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
