"""
Runtime configuration.

Values come from the environment, optionally seeded from a ``.env`` file.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """Monitor, camera and server settings."""

    sample_period_ms: int = 500
    window_size: int = 20
    suggestion_count: int = 2
    catalog_path: Optional[str] = None

    camera_index: int = 0
    classifier_backend: str = "deepface"
    detector_backend: str = "opencv"
    frame_width: int = 600

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @property
    def sample_period(self) -> float:
        """Tick period in seconds."""
        return self.sample_period_ms / 1000.0

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            dotenv: Load a ``.env`` file first (existing variables win)

        Raises:
            ValueError: if a numeric variable is malformed or out of range
        """
        if dotenv:
            load_dotenv()

        return cls(
            sample_period_ms=_int_env("MONITOR_SAMPLE_PERIOD_MS", cls.sample_period_ms, minimum=1),
            window_size=_int_env("MONITOR_WINDOW_SIZE", cls.window_size, minimum=1),
            suggestion_count=_int_env("MONITOR_SUGGESTION_COUNT", cls.suggestion_count, minimum=1),
            catalog_path=os.getenv("MONITOR_CATALOG_PATH") or None,
            camera_index=_int_env("CAMERA_INDEX", cls.camera_index),
            classifier_backend=os.getenv("CLASSIFIER_BACKEND", cls.classifier_backend),
            detector_backend=os.getenv("DEEPFACE_DETECTOR_BACKEND", cls.detector_backend),
            frame_width=_int_env("FRAME_WIDTH", cls.frame_width),
            host=os.getenv("HOST", cls.host),
            port=_int_env("PORT", cls.port, minimum=1),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
