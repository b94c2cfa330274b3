# nodebot/core/__init__.py
"""Core infrastructure components for the NodeBot server."""

from .exceptions import (
    NodeBotError,
    ConfigLoadError,
    PortOpenError,
    DeviceIndexError,
    UnknownCommandError,
    FileOperationError,
)

__all__ = [
    "NodeBotError",
    "ConfigLoadError",
    "PortOpenError",
    "DeviceIndexError",
    "UnknownCommandError",
    "FileOperationError",
]
