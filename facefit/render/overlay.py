"""Rendering helpers for landmark visualization."""
from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from ..core.config import MarkerStyle

GRAY_COLOUR: Tuple[int, ...] = (255,)
BGR_COLOUR: Tuple[int, ...] = (0, 0, 255)


def marker_colour(image: np.ndarray) -> Tuple[int, ...]:
    if image.ndim == 3 and image.shape[2] == 3:
        return BGR_COLOUR
    return GRAY_COLOUR


def draw_shape(frame: np.ndarray, shape: np.ndarray, style: MarkerStyle) -> np.ndarray:
    """Return a copy of ``frame`` with a circle at every landmark."""
    canvas = frame.copy()
    colour = marker_colour(canvas)
    scale = 1 << style.shift
    for x, y in np.asarray(shape, dtype=np.float64).reshape(-1, 2):
        center = (int(round(x * scale)), int(round(y * scale)))
        cv2.circle(canvas, center, style.radius * scale, colour, style.thickness, style.line_type, style.shift)
    return canvas
