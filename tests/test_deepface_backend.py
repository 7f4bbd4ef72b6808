"""Tests for the DeepFace backend's result handling (no model is run)."""

from unittest.mock import patch

import numpy as np
import pytest

pytest.importorskip("deepface")

from mood_monitor.backends import deepface as backend  # noqa: E402
from mood_monitor.classifier import create_classifier  # noqa: E402
from mood_monitor.config import Settings  # noqa: E402

DEEPFACE_RESULT = {
    "emotion": {
        "angry": 1.0, "disgust": 0.5, "fear": 2.5, "happy": 90.0,
        "sad": 1.0, "surprise": 3.0, "neutral": 2.0,
    },
    "dominant_emotion": "happy",
}


class TestScoresFromResult:
    def test_rescales_percentages_and_renames(self):
        scores = backend.scores_from_result(DEEPFACE_RESULT)
        assert scores["happy"] == pytest.approx(0.9)
        assert scores["fearful"] == pytest.approx(0.025)
        assert scores["disgusted"] == pytest.approx(0.005)
        assert set(scores) == {"neutral", "happy", "sad", "angry", "fearful", "disgusted", "surprised"}

    def test_keeps_fractions(self):
        scores = backend.scores_from_result({"emotion": {"happy": 0.6, "sad": 0.4}})
        assert scores == {"happy": 0.6, "sad": 0.4}


class TestDeepFaceClassifier:
    def test_no_face_returns_none(self):
        classifier = backend.DeepFaceClassifier()
        frame = np.zeros((48, 64, 3), dtype=np.uint8)
        with patch.object(backend.DeepFace, "analyze", side_effect=ValueError("Face could not be detected")):
            assert classifier.analyze(frame) is None
        classifier.close()

    def test_picks_most_confident_face(self):
        classifier = backend.DeepFaceClassifier()
        frame = np.zeros((48, 64, 3), dtype=np.uint8)
        weak = {"emotion": {"sad": 40.0, "neutral": 35.0}}
        with patch.object(backend.DeepFace, "analyze", return_value=[weak, DEEPFACE_RESULT]):
            scores = classifier.analyze(frame)
        assert max(scores, key=scores.get) == "happy"
        classifier.close()

    def test_factory(self):
        classifier = create_classifier(Settings(detector_backend="ssd"))
        assert isinstance(classifier, backend.DeepFaceClassifier)
        assert classifier.detector_backend == "ssd"
        classifier.close()
