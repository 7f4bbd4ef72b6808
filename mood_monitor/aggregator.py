"""Windowed majority vote over per-sample emotion labels."""

from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence


def dominant_emotion(history: Sequence[str]) -> Optional[str]:
    """
    Return the most frequent label in ``history``.

    Among labels sharing the highest count, the one that first appeared
    earliest in ``history`` wins. An empty history has no dominant emotion.
    """
    if not history:
        return None

    counts = Counter(history)
    top = max(counts.values())
    for label in history:
        if counts[label] == top:
            return label
    return None


@dataclass(frozen=True)
class WindowResult:
    """Outcome of one completed window."""
    dominant: Optional[str]
    samples: int


class EmotionWindow:
    """
    Fixed-count sampling window.

    Every call to ``record`` counts as one tick of the window; a ``None``
    label (no face, failed classification) counts without being stored.
    After ``size`` ticks the window completes and resets itself.
    """

    def __init__(self, size: int = 20):
        if size < 1:
            raise ValueError(f"Window size must be positive, got {size}")
        self.size = size
        self.history: List[str] = []
        self.count = 0

    def record(self, label: Optional[str]) -> Optional[WindowResult]:
        """
        Count one tick and store its label if any.

        Args:
            label: Top emotion for the tick, or None when nothing was recognised

        Returns:
            WindowResult when this tick completes the window, None otherwise
        """
        if label is not None:
            self.history.append(label)
        self.count += 1

        if self.count < self.size:
            return None

        result = WindowResult(dominant=dominant_emotion(self.history), samples=len(self.history))
        self.reset()
        return result

    def reset(self):
        """Drop all samples and restart the count."""
        self.history = []
        self.count = 0
