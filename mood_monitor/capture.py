"""Camera access through OpenCV."""

import logging
import threading
from typing import Optional, Protocol

import cv2
import numpy as np

from .errors import CameraUnavailableError

logger = logging.getLogger(__name__)


class FrameSource(Protocol):
    """An acquired video feed."""

    def read(self) -> Optional[np.ndarray]:
        """Return the current frame, or None if no frame is available yet."""
        ...

    def release(self) -> None:
        """Give the device back."""
        ...


class FrameSourceFactory(Protocol):
    """Something that can open a frame source."""

    def acquire(self) -> FrameSource:
        """Open the feed or raise CameraUnavailableError."""
        ...


class CameraFrameSource:
    """Frame source backed by an open ``cv2.VideoCapture``."""

    def __init__(self, capture: cv2.VideoCapture, device_index: int = 0):
        self._capture = capture
        self.device_index = device_index
        # VideoCapture is not safe to read and release from different threads
        self._lock = threading.Lock()

    def read(self) -> Optional[np.ndarray]:
        with self._lock:
            if self._capture is None:
                return None
            ok, frame = self._capture.read()
        # Frames come back empty until the device has negotiated a resolution
        if not ok or frame is None or frame.size == 0:
            return None
        height, width = frame.shape[:2]
        if not width or not height:
            return None
        return frame

    def release(self) -> None:
        with self._lock:
            capture, self._capture = self._capture, None
        if capture is not None:
            capture.release()
            logger.info(f"Released camera {self.device_index}")


class Camera:
    """Opens the local webcam on request."""

    def __init__(self, device_index: int = 0):
        self.device_index = device_index

    def acquire(self) -> CameraFrameSource:
        """
        Open the camera.

        Raises:
            CameraUnavailableError: if the device is missing, busy or not permitted
        """
        try:
            capture = cv2.VideoCapture(self.device_index)
        except cv2.error as e:
            raise CameraUnavailableError(f"Cannot open camera {self.device_index}: {e}")

        if not capture.isOpened():
            capture.release()
            raise CameraUnavailableError(f"Camera {self.device_index} is not available")

        logger.info(f"Opened camera {self.device_index}")
        return CameraFrameSource(capture, self.device_index)
