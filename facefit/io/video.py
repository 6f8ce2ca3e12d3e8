"""Video IO helpers."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Tuple

import cv2
import numpy as np

from ..errors import ResourceError


@dataclass
class VideoMetadata:
    path: Path
    fps: float
    frame_count: int
    frame_size: Tuple[int, int]


def open_video(path: Path | str) -> cv2.VideoCapture:
    capture = cv2.VideoCapture(str(path))
    if not capture.isOpened():
        capture.release()
        raise ResourceError(f"Unable to open video file '{path}'")
    return capture


def probe_capture(capture: cv2.VideoCapture, path: Path | str) -> VideoMetadata:
    fps = capture.get(cv2.CAP_PROP_FPS) or 0.0
    frame_count = int(capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
    width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
    height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
    return VideoMetadata(path=Path(path), fps=fps, frame_count=frame_count, frame_size=(width, height))


def iter_frames(capture: cv2.VideoCapture) -> Iterator[np.ndarray]:
    """Yield frames until decoding fails or the stream ends, then release."""
    try:
        while True:
            has_frame, frame = capture.read()
            if not has_frame or frame is None or frame.size == 0:
                break
            yield frame
    finally:
        capture.release()
