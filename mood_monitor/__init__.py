"""
Mood Monitor Application Package

This package samples a webcam feed, classifies facial expressions, votes on
the dominant emotion over a rolling window and suggests content for it.
"""

__version__ = "1.0.0"

from .aggregator import EmotionWindow, WindowResult, dominant_emotion
from .emotions import EMOTIONS, top_expression
from .errors import CameraUnavailableError, CatalogError, MonitorError
from .monitor import EmotionMonitor
from .status import ErrorCode, StatusKind, StatusUpdate
from .suggestions import Suggestion, SuggestionEngine, SuggestionPayload, load_catalog

__all__ = [
    "EMOTIONS",
    "CameraUnavailableError",
    "CatalogError",
    "EmotionMonitor",
    "EmotionWindow",
    "ErrorCode",
    "MonitorError",
    "StatusKind",
    "StatusUpdate",
    "Suggestion",
    "SuggestionEngine",
    "SuggestionPayload",
    "WindowResult",
    "dominant_emotion",
    "load_catalog",
    "top_expression",
]
