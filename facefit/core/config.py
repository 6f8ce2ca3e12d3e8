"""Run configuration resolved once before any frame is processed."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..errors import ConfigurationError
from ..utils.config import load_config
from ..utils.paths import default_model_pathname, default_params_pathname

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_TITLE = "CSIRO Face Fit"
DEFAULT_THRESHOLD = 5
THRESHOLD_RANGE = (0, 10)
STREAM_WAIT_TIME = 1.0 / 30


class Mode(Enum):
    IMAGE = "image"
    LISTS = "lists"
    VIDEO = "video"

    @property
    def default_wait_time(self) -> float:
        # Single images block until a key press; batches and streams flip through.
        return 0.0 if self is Mode.IMAGE else STREAM_WAIT_TIME


@dataclass(frozen=True)
class MarkerStyle:
    """Arguments forwarded to ``cv2.circle`` for every landmark."""

    radius: int = 2
    thickness: int = 1
    line_type: int = 8
    shift: int = 0


@dataclass(frozen=True)
class Configuration:
    wait_time: float = 0.0
    model_pathname: Path = field(default_factory=default_model_pathname)
    params_pathname: Path = field(default_factory=default_params_pathname)
    threshold: int = DEFAULT_THRESHOLD
    window_title: str = DEFAULT_WINDOW_TITLE
    verbose: bool = False
    marker: MarkerStyle = field(default_factory=MarkerStyle)

    def __post_init__(self) -> None:
        if not math.isfinite(self.wait_time) or self.wait_time < 0:
            raise ConfigurationError(f"Wait time must be a finite, non-negative number, got {self.wait_time}")
        low, high = THRESHOLD_RANGE
        if not low <= self.threshold <= high:
            logger.warning(
                "Threshold %d is outside the documented range %d-%d", self.threshold, low, high
            )

    def for_mode(self, mode: Mode, wait_time: Optional[float] = None) -> "Configuration":
        """Return a copy with the wait time resolved for ``mode``."""
        resolved = mode.default_wait_time if wait_time is None else float(wait_time)
        return replace(self, wait_time=resolved)


def load_display_settings(path: Path | str | None) -> Dict[str, Any]:
    """Read the ``display`` section of a YAML config, or nothing when absent."""
    if path is None:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        return {}
    display = load_config(config_path).get("display") or {}
    if not isinstance(display, Mapping):
        raise ConfigurationError(f"'display' section of {config_path} must be a mapping")
    return dict(display)


def marker_from_settings(settings: Mapping[str, Any]) -> MarkerStyle:
    defaults = MarkerStyle()
    try:
        return MarkerStyle(
            radius=int(settings.get("radius", defaults.radius)),
            thickness=int(settings.get("thickness", defaults.thickness)),
            line_type=int(settings.get("line_type", defaults.line_type)),
            shift=int(settings.get("shift", defaults.shift)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid marker setting: {exc}") from exc
