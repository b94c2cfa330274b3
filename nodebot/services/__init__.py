"""Business services: registry, file gateway, session and routing."""

from .registry_service import DeviceRegistry
from .connection_manager import ConnectionManager
from .file_gateway import FileGateway
from .message_router import MessageRouter
from .server import NodeBotServer

__all__ = [
    'DeviceRegistry',
    'ConnectionManager',
    'FileGateway',
    'MessageRouter',
    'NodeBotServer',
]
