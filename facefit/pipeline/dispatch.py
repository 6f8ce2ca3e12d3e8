"""Decide and carry out what happens to each fitted shape."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from ..io.pts import save_points
from .inputs import FrameItem

logger = logging.getLogger(__name__)

PointsWriter = Callable[[Path, np.ndarray], object]


@dataclass(frozen=True)
class OutputAction:
    persist_path: Optional[Path] = None
    display: bool = False


def plan_output(target: Optional[Path], shape: np.ndarray, verbose: bool) -> OutputAction:
    """Apply the routing table shared by every mode.

    Without a target the result is always shown. With a target a non-empty
    shape is written (and shown when verbose); an empty shape is never
    written and is only shown when verbose.
    """
    if target is None:
        return OutputAction(display=True)
    if len(shape) > 0:
        return OutputAction(persist_path=Path(target), display=verbose)
    return OutputAction(display=verbose)


class OutputDispatcher:
    def __init__(self, writer: PointsWriter = save_points, verbose: bool = False) -> None:
        self.writer = writer
        self.verbose = verbose
        self.persisted = 0

    def dispatch(self, item: FrameItem, shape: np.ndarray) -> OutputAction:
        action = plan_output(item.target, shape, self.verbose)
        if action.persist_path is not None:
            action.persist_path.parent.mkdir(parents=True, exist_ok=True)
            self.writer(action.persist_path, shape)
            self.persisted += 1
            logger.info("Saved %d points to %s", len(shape), action.persist_path)
        elif item.target is not None:
            logger.info("No landmarks for %s (item %d); nothing written", item.source, item.index)
        return action
