"""Image decoding, grayscale conversion and list files."""
from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import cv2
import numpy as np

from ..errors import ResourceError


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return the single-channel form of a ``uint8`` BGR or grayscale image.

    Single-channel input is returned without copying. Any other layout raises
    :class:`ResourceError`; unknown pixel formats are never guessed.
    """
    if image is not None and image.dtype == np.uint8:
        if image.ndim == 2:
            return image
        if image.ndim == 3 and image.shape[2] == 1:
            return image[:, :, 0]
        if image.ndim == 3 and image.shape[2] == 3:
            return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    layout = "none" if image is None else f"{image.dtype}{tuple(image.shape)}"
    raise ResourceError(f"Do not know how to convert image with layout {layout} to a grayscale image.")


def load_image(path: Path | str) -> np.ndarray:
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise ResourceError(f"Unable to load image '{path}'")
    return image


def load_grayscale_image(path: Path | str) -> Tuple[np.ndarray, np.ndarray]:
    """Decode ``path`` and return ``(image, gray)``."""
    image = load_image(path)
    return image, to_grayscale(image)


def read_list(path: Path | str) -> List[str]:
    """Read a newline-delimited list of pathnames, skipping blank lines."""
    list_path = Path(path)
    try:
        text = list_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ResourceError(f"Unable to read list file '{list_path}': {exc}") from exc
    return [line.strip() for line in text.splitlines() if line.strip()]
