from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type
import logging

from nodebot.core.exceptions import DeviceIndexError, UnknownCommandError

FIELD_DELIMITER = "|"
LINE_TERMINATOR = "\n"
MIN_MESSAGE_LENGTH = 3


@dataclass(frozen=True)
class WireMessage:
    """One decoded ``"<token>|<payload...>"`` frame from the client."""
    raw: str
    token: str
    fields: List[str]

    def rest(self, index: int) -> str:
        """Everything from field ``index`` on, with embedded delimiters kept."""
        return FIELD_DELIMITER.join(self.fields[index:])

    @property
    def payload(self) -> str:
        return self.rest(1)

    @property
    def is_device_address(self) -> bool:
        return self.token.isascii() and self.token.isdigit()


def decode(text: str) -> Optional[WireMessage]:
    """Split a client frame into fields, or return None when it is ignored."""
    if len(text) < MIN_MESSAGE_LENGTH or FIELD_DELIMITER not in text:
        return None
    fields = text.split(FIELD_DELIMITER)
    return WireMessage(raw=text, token=fields[0], fields=fields)


class WireCommand(ABC):
    """Base class for commands decoded from client frames"""

    def __init__(self, message: WireMessage, context: Dict[str, Any]):
        self.message = message
        self.context = context
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def execute(self) -> None:
        """Carry out the command; report-worthy failures raise NodeBotError subclasses"""
        pass

class DeviceWriteCommand(WireCommand):
    """id|message: forward a firmware line to one device"""

    async def execute(self) -> None:
        registry = self.context["registry"]
        digits = self.message.token.lstrip("0") or "0"
        # longer than any valid index; int() also refuses very long digit strings
        if len(digits) > len(str(len(registry))):
            raise DeviceIndexError(self.message.token)
        device_id = int(digits)
        if not registry.contains_id(device_id):
            raise DeviceIndexError(device_id)

        device = registry[device_id]
        if device.connection is None:
            self.logger.debug(f"Device {device_id} has no connection yet, dropping write")
            return
        await device.connection.write(self.message.payload + LINE_TERMINATOR)

class BroadcastCommand(WireCommand):
    """Broadcast|message: send one firmware line to every configured device (e.g. E-STOP)"""

    async def execute(self) -> None:
        line = self.message.payload + LINE_TERMINATOR
        for device in self.context["registry"]:
            if device.connection is not None:
                await device.connection.write(line)

class GetFileListCommand(WireCommand):
    """GetFileList|path: list a directory under the asset root"""

    async def execute(self) -> None:
        reply = await self.context["gateway"].get_file_list(self.message.fields[1])
        await self.context["connections"].send_to_client(reply)

class GetFileCommand(WireCommand):
    """GetFile|path: send a file's contents"""

    async def execute(self) -> None:
        reply = await self.context["gateway"].get_file(self.message.fields[1])
        await self.context["connections"].send_to_client(reply)

class PutFileCommand(WireCommand):
    """PutFile|path|contents: write contents (lines joined by '|') to a file"""

    async def execute(self) -> None:
        await self.context["gateway"].put_file(self.message.fields[1], self.message.rest(2))


class CommandFactory:
    """Maps a frame's token to the command that handles it"""

    _command_registry: Dict[str, Type[WireCommand]] = {
        "Broadcast": BroadcastCommand,
        "GetFileList": GetFileListCommand,
        "GetFile": GetFileCommand,
        "PutFile": PutFileCommand,
    }

    @classmethod
    def create(cls, message: WireMessage, context: Dict[str, Any]) -> WireCommand:
        if message.is_device_address:
            return DeviceWriteCommand(message, context)

        command_class = cls._command_registry.get(message.token)
        if command_class is None:
            raise UnknownCommandError(message.raw)
        return command_class(message, context)
