"""Landmark tracker backed by an Ultralytics YOLO pose model."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import cv2
import numpy as np
from ultralytics import YOLO

from ..errors import ResourceError
from ..utils.config import load_config
from .base import as_shape, empty_shape

logger = logging.getLogger(__name__)

SCORE_SCALE = 10


@dataclass(frozen=True)
class PoseTrackerParams:
    conf: float = 0.25
    iou: float = 0.45
    imgsz: int = 640
    device: str = "cpu"
    max_det: int = 10
    tracker: str = "bytetrack.yaml"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "PoseTrackerParams":
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(config) - known)
        if unknown:
            logger.warning("Ignoring unknown tracker parameters: %s", ", ".join(unknown))
        defaults = cls()
        try:
            return cls(
                conf=float(config.get("conf", defaults.conf)),
                iou=float(config.get("iou", defaults.iou)),
                imgsz=int(config.get("imgsz", defaults.imgsz)),
                device=str(config.get("device", defaults.device)),
                max_det=int(config.get("max_det", defaults.max_det)),
                tracker=str(config.get("tracker", defaults.tracker)),
            )
        except (TypeError, ValueError) as exc:
            raise ResourceError(f"Invalid tracker parameter: {exc}") from exc

    def predict_args(self) -> Dict[str, object]:
        return {
            "conf": self.conf,
            "iou": self.iou,
            "imgsz": self.imgsz,
            "device": self.device,
            "max_det": self.max_det,
            "verbose": False,
        }


def _to_numpy(value) -> Optional[np.ndarray]:
    if value is None:
        return None
    if hasattr(value, "cpu"):
        value = value.cpu().numpy()
    return np.asarray(value)


class PoseTracker:
    """Thin wrapper exposing a YOLO pose model as a landmark tracker.

    The score of a fit is the mean keypoint confidence of the chosen
    detection on a 0-10 scale, so it can be compared with the integer
    thresholds used on the command line.
    """

    def __init__(self, weights: Path | str) -> None:
        self.model = YOLO(str(weights))
        self._shape = empty_shape()
        self._persist = False
        self._track_id: Optional[int] = None

    def new_frame(self, gray: np.ndarray, params: PoseTrackerParams) -> int:
        results = self.model.predict(source=self._prepare(gray), **params.predict_args())
        return self._update(results[0] if results else None, follow=False)

    def track(self, gray: np.ndarray, params: PoseTrackerParams) -> int:
        results = self.model.track(
            source=self._prepare(gray),
            persist=self._persist,
            tracker=params.tracker,
            **params.predict_args(),
        )
        self._persist = True
        return self._update(results[0] if results else None, follow=True)

    def get_shape(self) -> np.ndarray:
        return self._shape.copy()

    def reset(self) -> None:
        # ``persist=False`` on the next track call rebuilds the tracker state.
        self._persist = False
        self._track_id = None
        self._shape = empty_shape()

    def close(self) -> None:
        self.model = None

    @staticmethod
    def _prepare(gray: np.ndarray) -> np.ndarray:
        # YOLO expects three channels.
        return cv2.cvtColor(gray, cv2.COLOR_GRAY2BGR)

    def _update(self, result, follow: bool) -> int:
        self._shape = empty_shape()
        keypoints = getattr(result, "keypoints", None) if result is not None else None
        points = _to_numpy(getattr(keypoints, "xy", None))
        if points is None or points.ndim != 3 or len(points) == 0:
            return 0

        boxes = getattr(result, "boxes", None)
        box_conf = _to_numpy(getattr(boxes, "conf", None))
        kpt_conf = _to_numpy(getattr(keypoints, "conf", None))
        if kpt_conf is not None:
            scores = kpt_conf.reshape(len(points), -1).mean(axis=1)
        elif box_conf is not None:
            scores = box_conf.reshape(-1)
        else:
            scores = np.ones(len(points))

        index = int(np.argmax(scores))
        ids = _to_numpy(getattr(boxes, "id", None)) if follow else None
        if ids is not None:
            ids = ids.reshape(-1).astype(int)
            if self._track_id is not None and self._track_id in ids:
                index = int(np.flatnonzero(ids == self._track_id)[0])
            self._track_id = int(ids[index])

        self._shape = as_shape(points[index])
        return int(round(float(scores[index]) * SCORE_SCALE))


def load_tracker(model_pathname: Path | str) -> PoseTracker:
    try:
        tracker = PoseTracker(model_pathname)
    except Exception as exc:  # ultralytics raises a variety of types on bad weights
        raise ResourceError(f"Unable to load tracker model '{model_pathname}': {exc}") from exc
    logger.info("Loaded tracker model %s", model_pathname)
    return tracker


def load_tracker_params(params_pathname: Path | str) -> PoseTrackerParams:
    params = PoseTrackerParams.from_config(load_config(params_pathname))
    logger.info("Loaded tracker parameters %s", params_pathname)
    return params
