"""Single processing loop shared by the image, list and video modes."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from .core.config import Configuration, Mode
from .io.pts import save_points
from .pipeline.dispatch import OutputDispatcher, PointsWriter
from .pipeline.inputs import InputSource, VideoInput, open_input
from .render.viewer import InteractiveViewer, ViewerResult
from .tracking.base import LandmarkTracker
from .tracking.session import Discipline, TrackingSession

logger = logging.getLogger(__name__)

TrackerLoader = Callable[[Configuration], Tuple[LandmarkTracker, Any]]


class RunOutcome(Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class RunSummary:
    outcome: RunOutcome
    items: int = 0
    accepted: int = 0
    rejected: int = 0
    persisted: int = 0
    displayed: int = 0


def load_pose_tracker(config: Configuration) -> Tuple[LandmarkTracker, Any]:
    from .tracking.pose import load_tracker, load_tracker_params

    params = load_tracker_params(config.params_pathname)
    tracker = load_tracker(config.model_pathname)
    return tracker, params


def discipline_for(mode: Mode) -> Discipline:
    # Only consecutive video frames share a subject worth following.
    return Discipline.CONTINUITY if mode is Mode.VIDEO else Discipline.FRESH


def _report_progress(source: InputSource, index: int) -> None:
    if source.mode is Mode.VIDEO:
        print(f" Frame number {index}", end="\r", flush=True)
    elif source.mode is Mode.LISTS:
        print(f" Image {index}/{len(source)}", end="\r", flush=True)


def run(
    config: Configuration,
    mode: Mode,
    image_argument: str,
    landmarks_argument: Optional[str] = None,
    *,
    loader: TrackerLoader = load_pose_tracker,
    viewer: Optional[InteractiveViewer] = None,
    writer: PointsWriter = save_points,
) -> RunSummary:
    """Fit every frame produced for ``mode`` and route the results.

    The tracker, the input stream and the display window are released on
    every exit path, including operator cancellation and errors.
    """
    tracker, params = loader(config)
    viewer = viewer or InteractiveViewer(config)
    dispatcher = OutputDispatcher(writer=writer, verbose=config.verbose)
    summary = RunSummary(outcome=RunOutcome.COMPLETED)

    with TrackingSession(tracker, params, config.threshold, discipline_for(mode)) as session:
        try:
            with open_input(mode, image_argument, landmarks_argument) as source:
                if isinstance(source, VideoInput):
                    meta = source.metadata
                    logger.info(
                        "Video: %s | FPS: %.2f | Frames: %d | Size: %s",
                        meta.path.name,
                        meta.fps,
                        meta.frame_count,
                        meta.frame_size,
                    )
                for item in source:
                    if config.verbose:
                        _report_progress(source, item.index)
                    summary.items += 1

                    shape = session.process(item.gray)
                    action = dispatcher.dispatch(item, shape)
                    if not action.display:
                        continue
                    summary.displayed += 1
                    if viewer.show(item.image, shape) is ViewerResult.CANCELLED:
                        logger.info("Operator cancelled at item %d of %s", item.index, item.source)
                        summary.outcome = RunOutcome.CANCELLED
                        break
        finally:
            viewer.close()
            summary.accepted = session.accepted
            summary.rejected = session.rejected
            summary.persisted = dispatcher.persisted

    logger.info(
        "Run %s: %d items, %d accepted, %d rejected, %d written",
        summary.outcome.value,
        summary.items,
        summary.accepted,
        summary.rejected,
        summary.persisted,
    )
    return summary
