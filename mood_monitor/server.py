"""
Web front end for the mood monitor.

Serves the browser page, pushes status and suggestions over a WebSocket and
accepts start/stop commands over both the WebSocket and plain HTTP.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from . import __version__
from .capture import Camera
from .classifier import create_classifier
from .config import Settings
from .emotions import EMOTIONS
from .monitor import EmotionMonitor
from .status import ErrorCode, StatusUpdate
from .suggestions import SuggestionEngine, SuggestionPayload, load_catalog

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


class SuggestionModel(BaseModel):
    url: str
    description: str


class SuggestionsResponse(BaseModel):
    emotion: str
    items: List[SuggestionModel]


class ConnectionHub:
    """Tracks browser connections and the last message of each kind."""

    def __init__(self):
        self.connections: Set[WebSocket] = set()
        self.status: StatusUpdate = StatusUpdate.stopped()
        self.suggestions: Optional[SuggestionPayload] = None
        self.controls: Dict[str, bool] = {"start_enabled": True, "stop_enabled": False}

    async def connect(self, websocket: WebSocket):
        """Accept a client and bring it up to date."""
        await websocket.accept()
        self.connections.add(websocket)
        logger.info(f"Client connected ({len(self.connections)} total)")
        for message in self.snapshot():
            await websocket.send_json(message)

    def disconnect(self, websocket: WebSocket):
        self.connections.discard(websocket)
        logger.info(f"Client disconnected ({len(self.connections)} total)")

    def snapshot(self) -> List[Dict[str, Any]]:
        return [
            self._status_message(self.status),
            self._suggestions_message(self.suggestions),
            {"type": "controls", "data": dict(self.controls)},
        ]

    async def broadcast(self, message: Dict[str, Any]):
        """Send a message to every connected client."""
        for websocket in list(self.connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.error(f"Error sending {message.get('type')} update: {e}")
                self.connections.discard(websocket)

    async def publish_status(self, status: StatusUpdate):
        self.status = status
        await self.broadcast(self._status_message(status))

    async def publish_suggestions(self, payload: Optional[SuggestionPayload]):
        self.suggestions = payload
        await self.broadcast(self._suggestions_message(payload))

    async def publish_controls(self, start_enabled: bool, stop_enabled: bool):
        self.controls = {"start_enabled": start_enabled, "stop_enabled": stop_enabled}
        await self.broadcast({"type": "controls", "data": dict(self.controls)})

    async def send_error(self, websocket: WebSocket, message: str):
        await websocket.send_json(self._status_message(StatusUpdate.error(message)))

    @staticmethod
    def _status_message(status: StatusUpdate) -> Dict[str, Any]:
        return {"type": "status", "data": status.to_dict()}

    @staticmethod
    def _suggestions_message(payload: Optional[SuggestionPayload]) -> Dict[str, Any]:
        return {"type": "suggestions", "data": payload.to_dict() if payload else None}


def build_monitor(settings: Settings) -> EmotionMonitor:
    """Wire the camera, classifier and suggestion engine from settings."""
    engine = SuggestionEngine(
        catalog=load_catalog(settings.catalog_path),
        count=settings.suggestion_count,
    )
    return EmotionMonitor(
        camera=Camera(settings.camera_index),
        classifier=create_classifier(settings),
        engine=engine,
        sample_period=settings.sample_period,
        window_size=settings.window_size,
    )


async def start_monitor(monitor: EmotionMonitor, hub: ConnectionHub) -> bool:
    # Start stays disabled until the attempt resolves
    await hub.publish_controls(start_enabled=False, stop_enabled=False)
    started = await monitor.start()
    running = monitor.is_running
    await hub.publish_controls(start_enabled=not running, stop_enabled=running)
    return started


async def stop_monitor(monitor: EmotionMonitor, hub: ConnectionHub):
    await monitor.stop()
    await hub.publish_controls(start_enabled=True, stop_enabled=False)


def create_app(settings: Optional[Settings] = None,
               monitor: Optional[EmotionMonitor] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Runtime settings (read from the environment when None)
        monitor: Pre-built monitor; built from settings when None
    """
    settings = settings or Settings.from_env()
    hub = ConnectionHub()
    if monitor is None:
        monitor = build_monitor(settings)
    monitor.status_sink = hub.publish_status
    monitor.suggestion_sink = hub.publish_suggestions

    app = FastAPI(
        title="Mood Monitor",
        description="Real-time facial emotion monitoring with content suggestions",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.monitor = monitor
    app.state.hub = hub

    @app.on_event("startup")
    async def startup_event():
        loop = asyncio.get_running_loop()

        def handle_exception(loop, context):
            error = context.get("exception")
            logger.error(f"Global error: {context.get('message')}", exc_info=error)
            loop.create_task(hub.publish_status(
                StatusUpdate.error("Error occurred - check logs", ErrorCode.UNEXPECTED)
            ))

        loop.set_exception_handler(handle_exception)
        logger.info("Mood monitor server ready")

    @app.on_event("shutdown")
    async def shutdown_event():
        await monitor.stop()
        monitor.classifier.close()

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return HTMLResponse((STATIC_DIR / "index.html").read_text(encoding="utf-8"))

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "running": monitor.is_running,
            "supported_emotions": list(EMOTIONS),
        }

    @app.get("/emotions")
    async def get_supported_emotions():
        return {"emotions": list(EMOTIONS), "count": len(EMOTIONS)}

    @app.get("/status")
    async def get_status():
        return {
            "running": monitor.is_running,
            "status": monitor.status.to_dict(),
            "suggestions": monitor.suggestions.to_dict() if monitor.suggestions else None,
            "history": monitor.history,
            "sample_count": monitor.sample_count,
            "window_size": monitor.window_size,
        }

    @app.get("/suggestions/{emotion}", response_model=SuggestionsResponse)
    async def get_suggestions(emotion: str):
        return monitor.engine.suggest(emotion.lower()).to_dict()

    @app.post("/start")
    async def start():
        if not await start_monitor(monitor, hub):
            status = monitor.status
            if status.code == ErrorCode.CAMERA_UNAVAILABLE:
                raise HTTPException(status_code=503, detail="Camera unavailable")
            raise HTTPException(status_code=409, detail="Start was interrupted")
        return {"status": "started"}

    @app.post("/stop")
    async def stop():
        await stop_monitor(monitor, hub)
        return {"status": "stopped"}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await hub.connect(websocket)
        try:
            while True:
                message = await websocket.receive_text()
                try:
                    data = json.loads(message)
                except json.JSONDecodeError:
                    logger.error("Invalid JSON received")
                    await hub.send_error(websocket, "Invalid JSON")
                    continue

                message_type = data.get("type") if isinstance(data, dict) else None
                if message_type == "start":
                    await start_monitor(monitor, hub)
                elif message_type == "stop":
                    await stop_monitor(monitor, hub)
                else:
                    logger.warning(f"Unknown message type: {message_type}")
                    await hub.send_error(websocket, f"Unknown message type: {message_type}")
        except WebSocketDisconnect:
            logger.info("WebSocket connection closed")
        finally:
            hub.disconnect(websocket)

    return app
