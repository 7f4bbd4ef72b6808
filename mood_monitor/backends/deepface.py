"""DeepFace expression backend."""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

import imutils
import numpy as np
from deepface import DeepFace

from ..emotions import normalize_label

logger = logging.getLogger(__name__)


def scores_from_result(result: Dict[str, Any]) -> Dict[str, float]:
    """
    Convert one DeepFace face result into canonical scores in [0, 1].

    DeepFace reports percentages; values above 1 are rescaled.
    """
    scores: Dict[str, float] = {}
    raw = result.get("emotion") or {}
    scale = 100.0 if any(float(v) > 1.0 for v in raw.values()) else 1.0
    for name, value in raw.items():
        label = normalize_label(name)
        if label is not None:
            scores[label] = float(value) / scale
    return scores


class DeepFaceClassifier:
    """
    Runs ``DeepFace.analyze`` on a worker thread.

    Face detection is enforced so frames without a face report None instead
    of scoring the whole image.
    """

    def __init__(self, detector_backend: str = "opencv", frame_width: int = 600,
                 max_workers: int = 1):
        self.detector_backend = detector_backend
        self.frame_width = frame_width
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="emotion")

    def analyze(self, frame: np.ndarray) -> Optional[Dict[str, float]]:
        """Synchronous analysis of one BGR frame."""
        if self.frame_width and frame.shape[1] > self.frame_width:
            frame = imutils.resize(frame, width=self.frame_width)

        try:
            results = DeepFace.analyze(
                frame,
                actions=["emotion"],
                enforce_detection=True,
                detector_backend=self.detector_backend,
                silent=True,
            )
        except ValueError:
            # DeepFace signals "Face could not be detected" with ValueError
            return None

        results: List[Dict[str, Any]] = results if isinstance(results, list) else [results]
        if not results:
            return None

        # Single-face monitor: keep the most confident face
        best = max(results, key=lambda r: max((r.get("emotion") or {0: 0}).values()))
        scores = scores_from_result(best)
        return scores or None

    async def classify(self, frame: np.ndarray) -> Optional[Dict[str, float]]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.analyze, frame)

    def close(self) -> None:
        self._executor.shutdown(wait=False)
        logger.info("DeepFace classifier shut down")
