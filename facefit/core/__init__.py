"""Run configuration."""

from .config import Configuration, MarkerStyle, Mode

__all__ = ["Configuration", "MarkerStyle", "Mode"]
