"""Structured logging for Schema Registry client operations."""

from __future__ import annotations

from .structured_logger import LogEvent, LogLevel, StructuredLogger, create_logger

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "LogEvent",
    "create_logger",
]
