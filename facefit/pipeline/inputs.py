"""Lazy per-mode sources of frames and their output targets."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

import numpy as np

from ..core.config import Mode
from ..errors import ConfigurationError, ResourceError
from ..io.images import load_grayscale_image, read_list, to_grayscale
from ..io.video import VideoMetadata, iter_frames, open_video, probe_capture

logger = logging.getLogger(__name__)

_CONVERSION = re.compile(r"%[-+ #0]*\d*(?:\.\d+)?[hlLqjzt]*([a-zA-Z%])")
_INTEGER_TYPES = set("diuoxX")


@dataclass
class FrameItem:
    index: int
    image: np.ndarray
    gray: np.ndarray
    target: Optional[Path]
    source: str


class InputSource:
    """Base class for the mode specific enumerators."""

    mode: Mode

    def __iter__(self) -> Iterator[FrameItem]:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> "InputSource":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ImageInput(InputSource):
    mode = Mode.IMAGE

    def __init__(self, image_path: str, output_path: Optional[str] = None) -> None:
        self.image_path = image_path
        self.output_path = Path(output_path) if output_path else None

    def __len__(self) -> int:
        return 1

    def __iter__(self) -> Iterator[FrameItem]:
        image, gray = load_grayscale_image(self.image_path)
        yield FrameItem(1, image, gray, self.output_path, self.image_path)


class ListInput(InputSource):
    """Images named in a list file, optionally paired with an output list.

    Both lists are read up front so a length mismatch fails before any
    image is decoded.
    """

    mode = Mode.LISTS

    def __init__(self, list_path: str, output_list_path: Optional[str] = None) -> None:
        self.image_paths: List[str] = read_list(list_path)
        self.output_paths: Optional[List[str]] = None
        if output_list_path:
            self.output_paths = read_list(output_list_path)
            if len(self.output_paths) != len(self.image_paths):
                raise ResourceError(
                    f"Number of pathnames in list '{list_path}' does not match "
                    f"the number in '{output_list_path}'"
                )
        logger.info("Read %d image pathnames from %s", len(self.image_paths), list_path)

    def __len__(self) -> int:
        return len(self.image_paths)

    def __iter__(self) -> Iterator[FrameItem]:
        for index, image_path in enumerate(self.image_paths, start=1):
            image, gray = load_grayscale_image(image_path)
            target = Path(self.output_paths[index - 1]) if self.output_paths is not None else None
            yield FrameItem(index, image, gray, target, image_path)


def validate_frame_template(template: str) -> str:
    """Check that ``template`` takes exactly one integer, e.g. ``out/%05d.pts``."""
    conversions = [kind for kind in _CONVERSION.findall(template) if kind != "%"]
    if len(conversions) != 1 or conversions[0] not in _INTEGER_TYPES:
        raise ConfigurationError(
            f"Output template '{template}' must contain exactly one unsigned integer conversion"
        )
    try:
        template % 1
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid output template '{template}': {exc}") from exc
    return template


def render_frame_target(template: str, frame_number: int) -> Path:
    return Path(template % frame_number)


class VideoInput(InputSource):
    mode = Mode.VIDEO

    def __init__(self, video_path: str, output_template: Optional[str] = None) -> None:
        self.video_path = video_path
        self.output_template = validate_frame_template(output_template) if output_template else None
        self._capture = open_video(video_path)
        self.metadata: VideoMetadata = probe_capture(self._capture, video_path)
        self._frames: Optional[Iterator[np.ndarray]] = None

    def __iter__(self) -> Iterator[FrameItem]:
        if self._capture is None:
            raise RuntimeError(f"Video '{self.video_path}' has already been consumed")
        self._frames = iter_frames(self._capture)
        self._capture = None
        for frame_number, frame in enumerate(self._frames, start=1):
            target = (
                render_frame_target(self.output_template, frame_number)
                if self.output_template
                else None
            )
            yield FrameItem(frame_number, frame, to_grayscale(frame), target, self.video_path)

    def close(self) -> None:
        if self._frames is not None:
            self._frames.close()
            self._frames = None
        if self._capture is not None:
            self._capture.release()
            self._capture = None


def open_input(mode: Mode, image_argument: str, landmarks_argument: Optional[str] = None) -> InputSource:
    if mode is Mode.LISTS:
        return ListInput(image_argument, landmarks_argument)
    if mode is Mode.VIDEO:
        return VideoInput(image_argument, landmarks_argument)
    return ImageInput(image_argument, landmarks_argument)
