import os
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
CONFIGS_DIR = ROOT / "configs"
WEIGHTS_DIR = ROOT / "weights"


def default_model_pathname() -> Path:
    return Path(os.environ.get("FACEFIT_MODEL") or WEIGHTS_DIR / "yolov8n-face.pt")


def default_params_pathname() -> Path:
    return Path(os.environ.get("FACEFIT_PARAMS") or CONFIGS_DIR / "params.yaml")


__all__ = ["ROOT", "CONFIGS_DIR", "WEIGHTS_DIR", "default_model_pathname", "default_params_pathname"]
