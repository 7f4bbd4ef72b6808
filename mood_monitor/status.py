"""Status messages pushed to the UI."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class StatusKind(str, Enum):
    STARTING = "starting"
    ANALYZING = "analyzing"
    CURRENT = "current"
    NO_FACE = "no_face"
    DOMINANT = "dominant"
    STOPPED = "stopped"
    ERROR = "error"


class ErrorCode(str, Enum):
    CAMERA_UNAVAILABLE = "camera_unavailable"
    CLASSIFICATION_FAILED = "classification_failed"
    UNEXPECTED = "unexpected"


_TEXT = {
    StatusKind.STARTING: "Starting...",
    StatusKind.ANALYZING: "Analyzing emotions...",
    StatusKind.NO_FACE: "No face detected",
    StatusKind.STOPPED: "Emotion detection stopped",
}


@dataclass(frozen=True)
class StatusUpdate:
    """One status line; each update replaces the previous one."""

    kind: StatusKind
    label: Optional[str] = None
    confidence_pct: Optional[float] = None
    message: Optional[str] = None
    code: Optional[ErrorCode] = None

    @classmethod
    def starting(cls) -> "StatusUpdate":
        return cls(StatusKind.STARTING)

    @classmethod
    def analyzing(cls) -> "StatusUpdate":
        return cls(StatusKind.ANALYZING)

    @classmethod
    def current(cls, label: str, confidence: float) -> "StatusUpdate":
        return cls(StatusKind.CURRENT, label=label, confidence_pct=round(confidence * 100, 1))

    @classmethod
    def no_face(cls) -> "StatusUpdate":
        return cls(StatusKind.NO_FACE)

    @classmethod
    def dominant(cls, label: str) -> "StatusUpdate":
        return cls(StatusKind.DOMINANT, label=label)

    @classmethod
    def stopped(cls) -> "StatusUpdate":
        return cls(StatusKind.STOPPED)

    @classmethod
    def error(cls, message: str, code: ErrorCode = ErrorCode.UNEXPECTED) -> "StatusUpdate":
        return cls(StatusKind.ERROR, message=message, code=code)

    @property
    def text(self) -> str:
        """Human readable rendering of the status."""
        if self.kind == StatusKind.CURRENT:
            return f"Current: {self.label} ({self.confidence_pct:.1f}%)"
        if self.kind == StatusKind.DOMINANT:
            return f"Detected Emotion: {self.label}"
        if self.kind == StatusKind.ERROR:
            return f"Error: {self.message}"
        return _TEXT[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind.value, "text": self.text}
        if self.label is not None:
            data["label"] = self.label
        if self.confidence_pct is not None:
            data["confidence_pct"] = self.confidence_pct
        if self.message is not None:
            data["message"] = self.message
        if self.code is not None:
            data["code"] = self.code.value
        return data
