"""Landmark fitting over images, image lists and video streams."""

__version__ = "0.1.0"
