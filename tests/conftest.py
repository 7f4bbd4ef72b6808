"""Shared fixtures for mood monitor tests.

No camera or model is needed: frames are plain tokens and the classifier
replays a scripted sequence of results.
"""

import random

import pytest

from mood_monitor.monitor import EmotionMonitor
from mood_monitor.suggestions import SuggestionEngine

from helpers import FakeCamera, Recorder, ScriptedClassifier


@pytest.fixture
def engine():
    return SuggestionEngine(rng=random.Random(7))


@pytest.fixture
def make_monitor(engine):
    """Factory building a fast monitor wired to a Recorder."""
    def _make(camera=None, classifier=None, window_size=4, sample_period=0.0, recorder=None):
        recorder = recorder or Recorder()
        monitor = EmotionMonitor(
            camera=camera or FakeCamera(),
            classifier=classifier or ScriptedClassifier(),
            engine=engine,
            status_sink=recorder.status,
            suggestion_sink=recorder.suggestions,
            sample_period=sample_period,
            window_size=window_size,
        )
        return monitor, recorder
    return _make
