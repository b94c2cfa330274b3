"""NodeBot Server - bridges one UI control session to serial MCU boards"""

__version__ = '1.0.0'

# Core - most fundamental
from .core import (
    NodeBotError,
    ConfigLoadError,
    PortOpenError,
    DeviceIndexError,
    UnknownCommandError,
    FileOperationError,
)

# Models - domain objects
from .models import DeviceConfig, PortSettings

# Device transport
from .protocols import SerialDeviceClient

# Start-up sequencing and wire commands
from .orchestration import PortInitializer, CommandFactory, decode

# Services
from .services import (
    DeviceRegistry,
    ConnectionManager,
    FileGateway,
    MessageRouter,
    NodeBotServer,
)

__all__ = [
    # Core
    'NodeBotError',
    'ConfigLoadError',
    'PortOpenError',
    'DeviceIndexError',
    'UnknownCommandError',
    'FileOperationError',

    # Models
    'DeviceConfig',
    'PortSettings',

    # Transport
    'SerialDeviceClient',

    # Orchestration
    'PortInitializer',
    'CommandFactory',
    'decode',

    # Services
    'DeviceRegistry',
    'ConnectionManager',
    'FileGateway',
    'MessageRouter',
    'NodeBotServer',
]
