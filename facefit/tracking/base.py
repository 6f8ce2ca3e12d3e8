"""Interface the fitting pipeline expects from a landmark tracker."""
from __future__ import annotations

from typing import Any, Protocol

import numpy as np


class LandmarkTracker(Protocol):
    def new_frame(self, gray: np.ndarray, params: Any) -> float:
        """Detect from scratch on ``gray`` and return the fit confidence."""

    def track(self, gray: np.ndarray, params: Any) -> float:
        """Follow the previous fit into ``gray`` and return the fit confidence."""

    def get_shape(self) -> np.ndarray:
        """Points of the last fit as an ``(N, 2)`` array."""

    def reset(self) -> None:
        """Drop any state carried over from previous frames."""


def empty_shape() -> np.ndarray:
    return np.empty((0, 2), dtype=np.float64)


def as_shape(points: Any) -> np.ndarray:
    shape = np.asarray(points, dtype=np.float64)
    if shape.size == 0:
        return empty_shape()
    return shape.reshape(-1, 2)
