"""
FastAPI Dependencies for the Pause Tracker API.

Expose the resolved Settings and the calendar timezone to route handlers.
"""

import logging
from datetime import tzinfo

from fastapi import Depends, Request

from src.config.settings import Settings

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    """Settings resolved once by create_app() and stored on app.state."""
    return request.app.state.settings


def get_timezone(settings: Settings = Depends(get_settings)) -> tzinfo | None:
    """Calendar timezone for day and hour rules; None means server local time."""
    return settings.timezone
