"""Data models and domain objects."""

from .device_models import (
    PortSettings,
    DeviceConfig,
)

__all__ = [
    'PortSettings',
    'DeviceConfig',
]
