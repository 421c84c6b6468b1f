"""
Pause Tracker -- Application Entry Point.

Starts the FastAPI server via uvicorn.

Usage:
    python main.py              # Development (reload enabled with PAUSE_DEV_MODE=1)
    uvicorn main:app --host 0.0.0.0 --port 8000  # Production
"""

from __future__ import annotations

import uvicorn

from src.api import create_app
from src.config.settings import load_settings
from src.lib.logging import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)

settings = load_settings()
app = create_app(settings)
logger.info(
    "app_configured",
    environment=settings.environment,
    timezone=str(settings.timezone) if settings.timezone else "local",
)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.dev_mode,
        log_level="info",
    )
