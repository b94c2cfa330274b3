"""Device transport implementations."""

from .serial_client import (
    SerialDeviceClient,
    ConnectionState,
)

__all__ = [
    'SerialDeviceClient',
    'ConnectionState',
]
