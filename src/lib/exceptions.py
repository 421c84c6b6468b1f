"""
Custom exception hierarchy for Pause Tracker.

Provides structured exception types for the subsystems that can fail:
- Configuration (environment, timezone)
- Record validation at the data-access boundary
- Serialization of records to and from rows

All exceptions inherit from PauseTrackerException, enabling
catch-all for tracker-specific errors while keeping the
ability to catch specific error types.

The scoring, risk and insight functions never raise these for
well-formed input. They are total over their documented domains.
"""

from __future__ import annotations


class PauseTrackerException(Exception):
    """Base exception for all Pause Tracker errors."""


class ConfigurationError(PauseTrackerException):
    """Missing environment variables, invalid config values, or startup failures."""


class ValidationError(PauseTrackerException):
    """Input validation, parsing, or type conversion failures."""


class SerializationError(PauseTrackerException):
    """Row mapping or JSON encode/decode failures."""
