"""
Lib package for Pause Tracker.

Contains shared utilities:
- clock.py: Injectable clock and epoch-millisecond helpers
- errors.py: Centralized error response builder with i18n
- exceptions.py: Exception hierarchy
- logging.py: structlog configuration
"""

from src.lib.clock import (
    Clock,
    FixedClock,
    SystemClock,
    from_epoch_ms,
    get_clock,
    resolve_now,
    set_clock,
    to_epoch_ms,
)
from src.lib.errors import (
    INTERNAL_ERROR,
    NOT_FOUND,
    VALIDATION_ERROR,
    build_error_response,
    get_error_message,
)
from src.lib.exceptions import (
    ConfigurationError,
    PauseTrackerException,
    SerializationError,
    ValidationError,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    "from_epoch_ms",
    "get_clock",
    "resolve_now",
    "set_clock",
    "to_epoch_ms",
    # Errors
    "INTERNAL_ERROR",
    "NOT_FOUND",
    "VALIDATION_ERROR",
    "build_error_response",
    "get_error_message",
    # Exceptions
    "ConfigurationError",
    "PauseTrackerException",
    "SerializationError",
    "ValidationError",
]
