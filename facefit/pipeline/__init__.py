"""Input enumeration and output routing."""

from .dispatch import OutputAction, OutputDispatcher, plan_output
from .inputs import FrameItem, ImageInput, InputSource, ListInput, VideoInput, open_input

__all__ = [
    "FrameItem",
    "ImageInput",
    "InputSource",
    "ListInput",
    "OutputAction",
    "OutputDispatcher",
    "VideoInput",
    "open_input",
    "plan_output",
]
