"""Configuration helpers."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import ResourceError


def load_config(path: Path | str) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise ResourceError(f"Config file not found: {config_path}")
    text = config_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ResourceError(f"Unable to parse config file '{config_path}': {exc}") from exc
    if not isinstance(data, dict):
        raise ResourceError(f"Config file '{config_path}' must contain a mapping")
    return data

