"""Landmark trackers and the per-run tracking session."""

from .base import LandmarkTracker, as_shape, empty_shape
from .session import Discipline, TrackingSession

__all__ = ["Discipline", "LandmarkTracker", "TrackingSession", "as_shape", "empty_shape"]
