"""Emotion labels and expression score helpers."""

from typing import Dict, Mapping, Optional, Tuple

# Order matters: it is the tie-break order when two scores are equal.
EMOTIONS: Tuple[str, ...] = (
    "neutral",
    "happy",
    "sad",
    "angry",
    "fearful",
    "disgusted",
    "surprised",
)

FALLBACK_EMOTION = "neutral"

# Label spellings used by common classifier libraries
_ALIASES: Dict[str, str] = {
    "happiness": "happy",
    "sadness": "sad",
    "anger": "angry",
    "fear": "fearful",
    "disgust": "disgusted",
    "surprise": "surprised",
}


def normalize_label(label: str) -> Optional[str]:
    """Map a classifier label onto the canonical emotion set.

    Returns None for labels outside the set.
    """
    key = label.strip().lower()
    key = _ALIASES.get(key, key)
    return key if key in EMOTIONS else None


def top_expression(scores: Mapping[str, float]) -> Tuple[str, float]:
    """Return the (label, confidence) pair with the highest score.

    Ties resolve to whichever label comes first in ``EMOTIONS``.

    Raises:
        ValueError: if ``scores`` holds no known emotion label.
    """
    best_label = None
    best_score = 0.0
    for label in EMOTIONS:
        if label not in scores:
            continue
        score = float(scores[label])
        if best_label is None or score > best_score:
            best_label = label
            best_score = score

    if best_label is None:
        raise ValueError(f"No known emotion in scores: {sorted(scores)}")
    return best_label, best_score
