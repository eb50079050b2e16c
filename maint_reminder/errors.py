from __future__ import annotations

"""Error taxonomy for the maintenance reminder.

Every fatal condition raised during an evaluation run is one of these types and
is routed through ``ErrorReporter`` exactly once by the entry point.
"""

__all__ = [
    "ReminderError",
    "ConfigurationError",
    "SourceAccessError",
    "TransportError",
]


class ReminderError(Exception):
    """Base exception for reminder failures."""

    # error log の error_type 列に書き出す分類名 (UPPER_SNAKE)
    error_type = "REMINDER_ERROR"


class ConfigurationError(ReminderError):
    """Missing/placeholder recipient, missing required columns or source table."""

    error_type = "CONFIGURATION_ERROR"


class SourceAccessError(ReminderError):
    """Maintenance log unreachable or malformed."""

    error_type = "SOURCE_ACCESS_ERROR"


class TransportError(ReminderError):
    """Notification send failed. Never retried."""

    error_type = "TRANSPORT_ERROR"
