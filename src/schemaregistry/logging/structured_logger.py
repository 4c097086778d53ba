"""Structured logging for Schema Registry client operations."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "schemaregistry"


class LogLevel(str, Enum):
    """Log levels for structured logging."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    FATAL = "FATAL"


_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
}


@dataclass
class LogEvent:
    """Structured log event."""

    # Core fields
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    level: LogLevel = LogLevel.INFO
    message: str = ""
    event_type: str = "generic"

    # Context fields
    source_name: Optional[str] = None

    # Operational fields
    duration_ms: Optional[float] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    # Custom fields
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert log event to dictionary."""
        result = {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "message": self.message,
            "event_type": self.event_type,
        }

        for name in ["source_name", "duration_ms", "error_code", "error_message"]:
            value = getattr(self, name)
            if value is not None:
                result[name] = value

        if self.metadata:
            result["metadata"] = self.metadata

        return result

    def to_json(self) -> str:
        """Convert log event to JSON string."""
        return json.dumps(self.to_dict(), default=str)


class StructuredLogger:
    """Emit ``LogEvent`` records as JSON through the standard logging module.

    Handlers, formatting of the surrounding record and level filtering are left
    to the application; this class only decides the event shape. Instances are
    not mutated after construction and may be shared across threads.
    """

    _USED_KEYS = frozenset({"duration_ms", "error_code", "error_message", "metadata"})

    def __init__(self, source_name: str, logger: Optional[logging.Logger] = None):
        """Initialize structured logger.

        Args:
            source_name: Name of the component emitting events
            logger: Standard library logger to write to; defaults to
                ``schemaregistry.<source_name>``
        """
        self.source_name = source_name
        self.logger = logger or logging.getLogger(f"{ROOT_LOGGER_NAME}.{source_name}")

        # Groups events emitted by the same logger instance
        self.session_id = str(uuid.uuid4())

    def is_enabled_for(self, level: LogLevel) -> bool:
        return self.logger.isEnabledFor(_STDLIB_LEVELS[level])

    def log(
        self,
        level: LogLevel,
        message: str,
        event_type: str = "generic",
        **kwargs
    ) -> None:
        """Log structured event.

        Args:
            level: Log level
            message: Log message
            event_type: Event type
            **kwargs: Additional fields for the log event
        """
        if not self.is_enabled_for(level):
            return

        event = LogEvent(
            level=level,
            message=message,
            event_type=event_type,
            source_name=self.source_name,
            duration_ms=kwargs.get("duration_ms"),
            error_code=kwargs.get("error_code"),
            error_message=kwargs.get("error_message"),
            metadata=dict(kwargs.get("metadata", {}))
        )
        event.metadata.setdefault("session_id", self.session_id)

        for key, value in kwargs.items():
            if key in self._USED_KEYS or value is None:
                continue
            if isinstance(value, (str, int, float, bool)):
                event.metadata[key] = value
            else:
                event.metadata[key] = json.dumps(value, default=str)

        self._emit_event(event)

    def log_api_call(
        self,
        endpoint: str,
        method: str = "GET",
        status_code: Optional[int] = None,
        response_time_ms: Optional[float] = None,
        **kwargs
    ) -> None:
        """Log API call details.

        Args:
            endpoint: API endpoint called
            method: HTTP method used
            status_code: HTTP status code
            response_time_ms: Response time in milliseconds
            **kwargs: Additional fields
        """
        level = LogLevel.WARN if status_code and status_code >= 400 else LogLevel.DEBUG

        self.log(
            level,
            f"API call: {method} {endpoint}",
            event_type="api_call",
            endpoint=endpoint,
            method=method,
            status_code=status_code,
            duration_ms=response_time_ms,
            **kwargs
        )

    def log_error(
        self,
        error: BaseException,
        context: Optional[str] = None,
        **kwargs
    ) -> None:
        """Log an error with context.

        Args:
            error: Exception that occurred
            context: Optional context about where the error occurred
            **kwargs: Additional fields
        """
        error_message = f"{error.__class__.__name__}: {error}"
        if context:
            error_message = f"{context}: {error_message}"

        self.log(
            LogLevel.ERROR,
            error_message,
            event_type="error",
            error_code=error.__class__.__name__,
            error_message=str(error),
            **kwargs
        )

    def _emit_event(self, event: LogEvent) -> None:
        self.logger.log(_STDLIB_LEVELS[event.level], event.to_json())


def create_logger(source_name: str) -> StructuredLogger:
    """Create a structured logger under the ``schemaregistry`` logger hierarchy."""
    return StructuredLogger(source_name=source_name)
