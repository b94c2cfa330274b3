import logging

from nodebot.core.exceptions import NodeBotError
from nodebot.orchestration.commands import CommandFactory, FIELD_DELIMITER, decode


class MessageRouter:
    """
    Routes client frames to devices or the file gateway, and device lines
    back to the client.

    Every failure is reported as a plain text line through the connection
    manager; nothing raised while handling one frame reaches the caller.
    """

    def __init__(self, registry, connections, gateway):
        self.registry = registry
        self.connections = connections
        self.gateway = gateway
        self.context = {
            "registry": registry,
            "connections": connections,
            "gateway": gateway,
        }
        self.log = logging.getLogger(self.__class__.__name__)

    async def handle_client_message(self, text: str) -> None:
        self.log.debug(f"client: {text}")

        message = decode(text)
        if message is None:
            return

        try:
            command = CommandFactory.create(message, self.context)
            await command.execute()
        except NodeBotError as e:
            await self.connections.send_to_client(str(e))
        except Exception as e:
            self.log.error(f"Error handling client message {text!r}: {e}", exc_info=True)

    async def handle_device_line(self, device_id: int, line: str) -> None:
        """Tag a firmware line with its device ID and pass it to the client."""
        await self.connections.send_to_client(f"{device_id}{FIELD_DELIMITER}{line}")
