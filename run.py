#!/usr/bin/env python3
"""
Mood Monitor Runner

This script starts the web server that hosts the emotion monitor.
"""

import logging

import uvicorn

from mood_monitor.config import Settings
from mood_monitor.server import create_app


def main():
    """Main function to run the mood monitor server."""
    settings = Settings.from_env()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    logger.info("Starting Mood Monitor...")
    logger.info(f"Camera: {settings.camera_index}, classifier: {settings.classifier_backend}")
    logger.info(f"Sampling every {settings.sample_period_ms}ms, window of {settings.window_size} samples")
    logger.info(f"HTTP: {settings.host}:{settings.port}")

    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
