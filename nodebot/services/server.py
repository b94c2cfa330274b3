"""NodeBot server context: device registry, client session, start-up and shutdown."""
from __future__ import annotations
import asyncio, logging, signal
from typing import Any, Callable, Optional

import serial
from websockets.asyncio.server import serve, ServerConnection
from websockets.exceptions import ConnectionClosed

from config.app_config import settings
from nodebot.core.exceptions import ConfigLoadError
from nodebot.orchestration.port_initializer import PortInitializer
from nodebot.protocols.serial_client import SerialDeviceClient
from .asset_responder import AssetResponder
from .connection_manager import ConnectionManager
from .file_gateway import FileGateway
from .message_router import MessageRouter
from .registry_service import DeviceRegistry

BANNER = (
    "▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀",
    "      N O D E B O T   S E R V E R",
    "              Press [Ctrl-C] to exit",
    "▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄",
)


class NodeBotServer:
    """Owns every piece of process state; nothing lives in module globals."""

    def __init__(self,
                 *,
                 port_configs: str = settings.PORT_CONFIGS,
                 client_root: str = settings.CLIENT_ROOT,
                 host: str = settings.HOST,
                 port: int = settings.PORT,
                 open_delay: float = settings.OPEN_DELAY,
                 read_timeout: float = settings.READ_TIMEOUT,
                 serial_factory: Callable[[], Any] = serial.Serial):
        self.port_configs = port_configs
        self.client_root = client_root
        self.host = host
        self.port = port
        self.open_delay = open_delay
        self.read_timeout = read_timeout
        self.serial_factory = serial_factory

        self.registry = DeviceRegistry()
        self.connections = ConnectionManager()
        self.gateway = FileGateway(client_root)
        self.router: Optional[MessageRouter] = None
        self.initializer: Optional[PortInitializer] = None
        self._ws_server = None
        self._stop = asyncio.Event()
        self.log = logging.getLogger(self.__class__.__name__)

    # --------------------------------------------------------------------- #
    #  Start-up
    # --------------------------------------------------------------------- #
    def load_registry(self) -> DeviceRegistry:
        """Load port configs; a load failure leaves an empty registry."""
        try:
            self.registry = DeviceRegistry.load(self.port_configs)
        except ConfigLoadError as e:
            self.log.error(str(e))
            self.registry = DeviceRegistry()

        self.router = MessageRouter(self.registry, self.connections, self.gateway)
        self.initializer = PortInitializer(
            self.registry,
            self._make_client,
            open_delay=self.open_delay,
            on_complete=self.start_transport,
        )
        return self.registry

    def _make_client(self, device_id: int, device) -> SerialDeviceClient:
        return SerialDeviceClient(
            device_id,
            device,
            self.router.handle_device_line,
            read_timeout=self.read_timeout,
            serial_factory=self.serial_factory,
        )

    async def start_transport(self):
        self._ws_server = await serve(
            self.handle_session,
            self.host,
            self.port,
            process_request=AssetResponder(self.client_root),
        )
        self.log.info(
            f"NodeBot Server is listening on port [{self.port}] ... "
            f"use Browser address http://localhost:{self.port}"
        )

    # --------------------------------------------------------------------- #
    #  Client session
    # --------------------------------------------------------------------- #
    async def handle_session(self, websocket: ServerConnection):
        self.connections.attach(websocket)
        self.log.info(f"Client connected from {websocket.remote_address}")
        try:
            async for message in websocket:
                if isinstance(message, bytes):
                    message = message.decode("utf-8", errors="replace")
                await self.router.handle_client_message(message)
        except ConnectionClosed as e:
            self.log.debug(f"Client connection closed: {e}")
        finally:
            self.connections.detach(websocket)
            self.log.info("Client disconnected")

    # --------------------------------------------------------------------- #
    #  Lifecycle
    # --------------------------------------------------------------------- #
    async def run(self) -> int:
        for line in BANNER:
            self.log.info(line)

        self.load_registry()

        loop = asyncio.get_running_loop()
        handled = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_stop)
                handled.append(sig)
            except (NotImplementedError, RuntimeError):
                # Windows: Ctrl-C arrives as KeyboardInterrupt instead
                pass

        init_task = asyncio.create_task(self.initializer.run())
        stop_task = asyncio.create_task(self._stop.wait())
        try:
            done, _ = await asyncio.wait({init_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
            if init_task in done:
                init_task.result()
                await stop_task
        finally:
            for task in (init_task, stop_task):
                task.cancel()
            # let cancelled start-up unwind before ports are closed
            await asyncio.gather(init_task, stop_task, return_exceptions=True)
            for sig in handled:
                loop.remove_signal_handler(sig)
            await self.shutdown()
        return 0

    def request_stop(self):
        """Ask a running server to shut down; used by the signal handlers."""
        self._stop.set()

    async def shutdown(self):
        """Close open ports best-effort, then stop accepting clients."""
        self.log.info("Shutting down")
        if self.initializer:
            await self.initializer.shutdown()
        if self._ws_server is not None:
            self._ws_server.close()
            await self._ws_server.wait_closed()
            self._ws_server = None
