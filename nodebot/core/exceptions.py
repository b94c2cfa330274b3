"""
Centralised exception definitions for the NodeBot server.
All custom exceptions should inherit from NodeBotError.
"""

class NodeBotError(Exception):
    """Base class for every custom exception thrown by this project."""

class ConfigLoadError(NodeBotError):
    """Raised when the port configuration file is missing, unreadable or malformed."""

class PortOpenError(NodeBotError):
    """Raised when a device's serial port cannot be opened."""

class DeviceIndexError(NodeBotError):
    """Raised when a wire message addresses a device outside the registry."""

    def __init__(self, device_id):
        super().__init__(f"Bad device ID: {device_id}")
        self.device_id = device_id

class UnknownCommandError(NodeBotError):
    """Raised when a wire message carries an unrecognised command token."""

    def __init__(self, message: str):
        super().__init__(f"Bad command: {message}")
        self.raw_message = message

class FileOperationError(NodeBotError):
    """Generic failure inside the file gateway (list, read, write)."""
