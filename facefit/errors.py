"""Exception types raised by the fitting pipeline."""
from __future__ import annotations


class FaceFitError(RuntimeError):
    """Base class for failures that abort a run."""


class ConfigurationError(FaceFitError):
    """Conflicting or invalid command line options and settings."""


class ResourceError(FaceFitError):
    """A model, image, list or video could not be used."""


__all__ = ["FaceFitError", "ConfigurationError", "ResourceError"]
