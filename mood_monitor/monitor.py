"""
Sampling loop that turns a camera feed into dominant-emotion events.

One EmotionMonitor owns at most one MonitorSession at a time. A session is
created by ``start()`` and invalidated by ``stop()`` (or by a new ``start()``);
results that arrive for an invalidated session are dropped.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from .aggregator import EmotionWindow, WindowResult
from .capture import FrameSource, FrameSourceFactory
from .classifier import ExpressionClassifier
from .emotions import top_expression
from .errors import CameraUnavailableError
from .status import ErrorCode, StatusUpdate
from .suggestions import SuggestionEngine, SuggestionPayload

logger = logging.getLogger(__name__)

StatusSink = Callable[[StatusUpdate], Awaitable[None]]
# Receives None to clear the displayed suggestions
SuggestionSink = Callable[[Optional[SuggestionPayload]], Awaitable[None]]


class MonitorSession:
    """State belonging to one start/stop cycle."""

    def __init__(self, generation: int, source: FrameSource, window_size: int):
        self.generation = generation
        self.source = source
        self.window = EmotionWindow(window_size)
        self.task: Optional[asyncio.Task] = None
        # Frame read running on the executor, if any
        self.pending_read: Optional[asyncio.Future] = None


class EmotionMonitor:
    """
    Samples the camera every ``sample_period`` seconds, classifies each frame
    and every ``window_size`` ticks reports the dominant emotion together with
    suggestions for it.
    """

    def __init__(self, camera: FrameSourceFactory, classifier: ExpressionClassifier,
                 engine: SuggestionEngine, status_sink: StatusSink = None,
                 suggestion_sink: SuggestionSink = None,
                 sample_period: float = 0.5, window_size: int = 20):
        """
        Initialize the monitor.

        Args:
            camera: Opens the frame source on start
            classifier: Scores facial expressions per frame
            engine: Picks suggestions for the dominant emotion
            status_sink: Awaited with every status update
            suggestion_sink: Awaited with every payload, or None to clear
            sample_period: Seconds between ticks
            window_size: Ticks per window
        """
        if window_size < 1:
            raise ValueError(f"Window size must be positive, got {window_size}")

        self.camera = camera
        self.classifier = classifier
        self.engine = engine
        self.status_sink = status_sink
        self.suggestion_sink = suggestion_sink
        self.sample_period = max(0.0, sample_period)
        self.window_size = window_size

        self.status: StatusUpdate = StatusUpdate.stopped()
        self.suggestions: Optional[SuggestionPayload] = None
        self.last_window: Optional[WindowResult] = None

        self._session: Optional[MonitorSession] = None
        self._generation = 0

    @property
    def is_running(self) -> bool:
        return self._session is not None

    @property
    def history(self) -> List[str]:
        """Labels collected so far in the current window."""
        if self._session is None:
            return []
        return list(self._session.window.history)

    @property
    def sample_count(self) -> int:
        if self._session is None:
            return 0
        return self._session.window.count

    async def start(self) -> bool:
        """
        Open the camera and begin sampling.

        A running session is torn down first, so at most one sampling task
        exists at any time.

        Returns:
            True if sampling started, False if the camera was unavailable or
            the attempt was superseded by stop() or another start()
        """
        if self._session is not None:
            logger.info("Monitor already running, restarting")
            await self._end_session()

        self._generation += 1
        generation = self._generation
        await self._emit_status(StatusUpdate.starting())

        loop = asyncio.get_running_loop()
        try:
            source = await loop.run_in_executor(None, self.camera.acquire)
        except CameraUnavailableError as e:
            logger.error(f"Camera error: {e}")
            if generation == self._generation:
                await self._emit_status(
                    StatusUpdate.error("Camera access denied or unavailable", ErrorCode.CAMERA_UNAVAILABLE)
                )
            return False

        if generation != self._generation:
            logger.info("Start superseded while opening the camera")
            self._release(source)
            return False

        session = MonitorSession(generation, source, self.window_size)
        self._session = session
        await self._emit_status(StatusUpdate.analyzing())
        if self._session is not session:
            return False

        session.task = asyncio.create_task(self._run(session))
        logger.info(
            f"Monitor started (session {generation}, period {self.sample_period:.3f}s, "
            f"window {self.window_size})"
        )
        return True

    async def stop(self):
        """Stop sampling, release the camera and clear all window state."""
        self._generation += 1
        if await self._end_session():
            logger.info("Monitor stopped")

        self.suggestions = None
        await self._emit_status(StatusUpdate.stopped())
        await self._emit_suggestions(None)

    async def _end_session(self) -> bool:
        session = self._session
        self._session = None
        if session is None:
            return False

        task = session.task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        session.window.reset()
        read = session.pending_read
        if read is not None and not read.done():
            # The device must not be released while another thread reads it
            read.add_done_callback(lambda _: self._release(session.source))
        else:
            self._release(session.source)
        return True

    def _release(self, source: FrameSource):
        try:
            source.release()
        except Exception as e:
            logger.error(f"Error releasing frame source: {e}")

    def _is_current(self, session: MonitorSession) -> bool:
        return self._session is session and session.generation == self._generation

    async def _run(self, session: MonitorSession):
        """Periodic driver; one tick at a time."""
        loop = asyncio.get_running_loop()
        while self._is_current(session):
            started = loop.time()
            # A cancelled driver lets the in-flight tick finish on its own
            await asyncio.shield(asyncio.ensure_future(self._safe_tick(session)))
            remaining = self.sample_period - (loop.time() - started)
            await asyncio.sleep(max(0.0, remaining))

    async def _safe_tick(self, session: MonitorSession):
        try:
            await self._tick(session)
        except Exception:
            logger.exception("Unexpected error during sampling")
            if self._is_current(session):
                await self._emit_status(
                    StatusUpdate.error("Error occurred - check logs", ErrorCode.UNEXPECTED)
                )

    async def _tick(self, session: MonitorSession):
        loop = asyncio.get_running_loop()
        session.pending_read = loop.run_in_executor(None, session.source.read)
        try:
            frame = await session.pending_read
        finally:
            session.pending_read = None
        if not self._is_current(session):
            return
        if frame is None:
            logger.debug("No frame available yet, skipping tick")
            return

        label = None
        try:
            scores = await self.classifier.classify(frame)
            top = top_expression(scores) if scores is not None else None
        except Exception as e:
            if not self._is_current(session):
                return
            logger.error(f"Detection error: {e}")
            await self._emit_status(
                StatusUpdate.error("Detection error - check logs", ErrorCode.CLASSIFICATION_FAILED)
            )
        else:
            if not self._is_current(session):
                logger.debug(f"Discarding late result for session {session.generation}")
                return
            if top is None:
                await self._emit_status(StatusUpdate.no_face())
            else:
                label, confidence = top
                logger.debug(f"Sample: {label} ({confidence:.2f})")
                await self._emit_status(StatusUpdate.current(label, confidence))

        if not self._is_current(session):
            return

        result = session.window.record(label)
        if result is not None:
            await self._complete_window(session, result)

    async def _complete_window(self, session: MonitorSession, result: WindowResult):
        self.last_window = result
        if result.dominant is None:
            logger.info("Window completed without any detected face")
            return

        logger.info(f"Dominant emotion over {result.samples} samples: {result.dominant}")
        await self._emit_status(StatusUpdate.dominant(result.dominant))
        if not self._is_current(session):
            return

        payload = self.engine.suggest(result.dominant)
        self.suggestions = payload
        await self._emit_suggestions(payload)

    async def _emit_status(self, status: StatusUpdate):
        self.status = status
        if self.status_sink is None:
            return
        try:
            await self.status_sink(status)
        except Exception as e:
            logger.error(f"Error publishing status {status.kind.value}: {e}")

    async def _emit_suggestions(self, payload: Optional[SuggestionPayload]):
        if self.suggestion_sink is None:
            return
        try:
            await self.suggestion_sink(payload)
        except Exception as e:
            logger.error(f"Error publishing suggestions: {e}")
