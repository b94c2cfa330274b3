# nodebot/orchestration/__init__.py
"""Port start-up sequencing and wire command dispatch."""

from .port_initializer import PortInitializer
from .state_machine import PortInitStateMachine, PortInitState
from .commands import (
    WireMessage,
    WireCommand,
    DeviceWriteCommand,
    BroadcastCommand,
    GetFileListCommand,
    GetFileCommand,
    PutFileCommand,
    CommandFactory,
    decode,
)

__all__ = [
    'PortInitializer',
    'PortInitStateMachine',
    'PortInitState',
    'WireMessage',
    'WireCommand',
    'DeviceWriteCommand',
    'BroadcastCommand',
    'GetFileListCommand',
    'GetFileCommand',
    'PutFileCommand',
    'CommandFactory',
    'decode',
]
