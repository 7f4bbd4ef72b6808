"""
Emotion-tailored content suggestions.

The catalog maps each emotion to a list of links; the engine draws a small
random subset for the emotion that dominated the last window.
"""

import json
import logging
import random
from dataclasses import dataclass, asdict
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .emotions import FALLBACK_EMOTION, normalize_label
from .errors import CatalogError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Suggestion:
    """A single suggested link."""
    url: str
    description: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class SuggestionPayload:
    """Suggestions picked for one dominant emotion."""
    emotion: str
    items: Tuple[Suggestion, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emotion": self.emotion,
            "items": [item.to_dict() for item in self.items],
        }


SuggestionCatalog = Mapping[str, Tuple[Suggestion, ...]]


DEFAULT_CATALOG_ENTRIES: Dict[str, List[str]] = {
    "happy": [
        "https://relaxandgame.netlify.app/ - Play and relax",
        "https://www.reddit.com/r/MadeMeSmile - Heartwarming stories",
    ],
    "sad": [
        "https://manochikitsa.com - Online counselling",
        "https://asoftmurmur.com - Soothing sounds",
        "https://www.window-swap.com - Calming views",
        "https://buddyhelp.org - Free emotional support",
    ],
    "angry": [
        "https://www.calm.com - Meditation app",
        "https://asoftmurmur.com - Calming sounds",
        "https://bouncyballs.org - Stress relief interaction",
        "https://www.7cups.com - Talk to someone",
    ],
    "fearful": [
        "https://www.headspace.com - Anxiety meditations",
        "https://www.geoguessr.com - Geography game distraction",
        "https://www.7cups.com - Emotional support",
        "https://littlealchemy2.com - Creative game",
    ],
    "disgusted": [
        "https://www.window-swap.com - Beautiful views",
        "https://www.nationalgeographic.com - Nature content",
        "https://asoftmurmur.com - Clean ambient sounds",
        "https://www.ted.com - Educational talks",
    ],
    "surprised": [
        "https://www.ted.com - Surprising ideas",
        "https://www.theuselessweb.com - Random discoveries",
        "https://100000stars.com - Interactive galaxy",
        "https://www.sporcle.com - Fun quizzes",
    ],
    "neutral": [
        "https://www.coursera.org - Learn something new",
        "https://www.duolingo.com - Language learning",
        "https://www.reddit.com - Browse communities",
        "https://news.ycombinator.com - Tech discussions",
    ],
}


def parse_entry(entry: Any) -> Suggestion:
    """
    Build a Suggestion from either ``{"url": ..., "description": ...}`` or
    the compact ``"<url> - <description>"`` string form.

    Raises:
        CatalogError: if the entry has neither shape
    """
    if isinstance(entry, str):
        url, sep, description = entry.partition(" - ")
        if not sep or not url.strip() or not description.strip():
            raise CatalogError(f"Expected '<url> - <description>', got {entry!r}")
        return Suggestion(url=url.strip(), description=description.strip())

    if isinstance(entry, Mapping):
        url = entry.get("url")
        description = entry.get("description")
        if not isinstance(url, str) or not isinstance(description, str) or not url:
            raise CatalogError(f"Suggestion needs string 'url' and 'description': {entry!r}")
        return Suggestion(url=url, description=description)

    raise CatalogError(f"Unsupported suggestion entry: {entry!r}")


def catalog_from_mapping(raw: Mapping[str, Iterable[Any]]) -> SuggestionCatalog:
    """
    Build an immutable catalog.

    Args:
        raw: Emotion label -> list of entries accepted by ``parse_entry``

    Returns:
        Read-only mapping of canonical label -> tuple of suggestions

    Raises:
        CatalogError: on unknown labels, bad entries or a missing fallback list
    """
    catalog: Dict[str, Tuple[Suggestion, ...]] = {}
    for label, entries in raw.items():
        canonical = normalize_label(label)
        if canonical is None:
            raise CatalogError(f"Unknown emotion label in catalog: {label!r}")
        if isinstance(entries, (str, bytes)) or not isinstance(entries, Iterable):
            raise CatalogError(f"Entries for {label!r} must be a list")
        catalog[canonical] = tuple(parse_entry(entry) for entry in entries)

    if not catalog.get(FALLBACK_EMOTION):
        raise CatalogError(f"Catalog must define a non-empty '{FALLBACK_EMOTION}' list")

    return MappingProxyType(catalog)


def load_catalog(path: Optional[str] = None) -> SuggestionCatalog:
    """
    Load the suggestion catalog from a JSON file, or the built-in table
    when no path is given.
    """
    if path is None:
        return catalog_from_mapping(DEFAULT_CATALOG_ENTRIES)

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}")
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in catalog {path}: {e}")

    if not isinstance(raw, dict):
        raise CatalogError(f"Catalog {path} must be a JSON object")

    catalog = catalog_from_mapping(raw)
    logger.info(f"Loaded suggestion catalog from {path} ({len(catalog)} emotions)")
    return catalog


class SuggestionEngine:
    """
    Picks a few random suggestions for an emotion.

    Labels missing from the catalog fall back to the neutral list.
    """

    def __init__(self, catalog: Optional[SuggestionCatalog] = None,
                 count: int = 2, rng: Optional[random.Random] = None):
        """
        Args:
            catalog: Suggestion catalog (built-in table when None)
            count: Maximum number of suggestions per payload
            rng: Random source; pass a seeded instance for reproducible picks
        """
        self.catalog = catalog if catalog is not None else load_catalog()
        self.count = count
        self.rng = rng or random.Random()

    def entries_for(self, emotion: str) -> Tuple[Suggestion, ...]:
        """Return the catalog list used for ``emotion``."""
        if emotion in self.catalog:
            return self.catalog[emotion]
        return self.catalog[FALLBACK_EMOTION]

    def suggest(self, emotion: str) -> SuggestionPayload:
        """Shuffle the emotion's list and keep the first ``count`` entries."""
        entries = list(self.entries_for(emotion))
        self.rng.shuffle(entries)
        return SuggestionPayload(emotion=emotion, items=tuple(entries[:self.count]))
