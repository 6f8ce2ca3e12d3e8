"""Landmark ``.pts`` files.

The layout is the one used by the common facial landmark datasets::

    version: 1
    n_points: 68
    {
    123.5 210.25
    ...
    }
"""
from __future__ import annotations

from pathlib import Path

import numpy as np

from ..errors import ResourceError

PTS_VERSION = 1


def save_points(path: Path | str, shape: np.ndarray) -> Path:
    points = np.asarray(shape, dtype=np.float64).reshape(-1, 2)
    pts_path = Path(path)
    lines = [f"version: {PTS_VERSION}", f"n_points: {len(points)}", "{"]
    lines.extend(f"{x:.6f} {y:.6f}" for x, y in points)
    lines.append("}")
    try:
        pts_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ResourceError(f"Unable to write landmarks to '{pts_path}': {exc}") from exc
    return pts_path


def load_points(path: Path | str) -> np.ndarray:
    pts_path = Path(path)
    try:
        lines = [line.strip() for line in pts_path.read_text(encoding="utf-8").splitlines()]
    except OSError as exc:
        raise ResourceError(f"Unable to read landmarks from '{pts_path}': {exc}") from exc

    header = {}
    body_start = None
    for idx, line in enumerate(lines):
        if line == "{":
            body_start = idx + 1
            break
        if ":" in line:
            key, value = line.split(":", 1)
            header[key.strip()] = value.strip()
    if body_start is None or "n_points" not in header:
        raise ResourceError(f"Malformed landmarks file '{pts_path}'")

    try:
        count = int(header["n_points"])
        body = lines[body_start : body_start + count]
        points = [tuple(float(v) for v in line.split()[:2]) for line in body]
    except ValueError as exc:
        raise ResourceError(f"Malformed landmarks file '{pts_path}': {exc}") from exc
    if len(points) != count or any(len(p) != 2 for p in points):
        raise ResourceError(f"Landmarks file '{pts_path}' is truncated")
    return np.asarray(points, dtype=np.float64).reshape(-1, 2)
