"""Per-frame facial expression classification."""

import logging
from typing import Dict, Optional, Protocol

import numpy as np

from .config import Settings

logger = logging.getLogger(__name__)

# Emotion label -> confidence in [0, 1]
ExpressionScores = Dict[str, float]


class ExpressionClassifier(Protocol):
    """Scores the facial expression in a single frame."""

    async def classify(self, frame: np.ndarray) -> Optional[ExpressionScores]:
        """Return expression scores, or None when no face is visible."""
        ...

    def close(self) -> None:
        """Release worker threads and models."""
        ...


def create_classifier(settings: Settings) -> ExpressionClassifier:
    """
    Build the classifier backend named in the settings.

    Backends are imported lazily so the heavy model libraries only load
    when actually used.
    """
    name = settings.classifier_backend.lower()
    if name == "deepface":
        from .backends.deepface import DeepFaceClassifier
        return DeepFaceClassifier(
            detector_backend=settings.detector_backend,
            frame_width=settings.frame_width,
        )
    raise ValueError(f"Unknown classifier backend: {settings.classifier_backend}")
