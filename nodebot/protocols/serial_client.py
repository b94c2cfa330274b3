"""
Serial Device Client
Wraps one pyserial port for an MCU board and exposes it to the event loop
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

import serial

from nodebot.core.exceptions import PortOpenError
from nodebot.models.device_models import DeviceConfig


class ConnectionState(Enum):
    """Connection state enumeration."""
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    FAILED = "failed"


PARITIES = {
    "none": serial.PARITY_NONE,
    "even": serial.PARITY_EVEN,
    "odd": serial.PARITY_ODD,
    "mark": serial.PARITY_MARK,
    "space": serial.PARITY_SPACE,
}

STOPBITS = {
    1: serial.STOPBITS_ONE,
    1.5: serial.STOPBITS_ONE_POINT_FIVE,
    2: serial.STOPBITS_TWO,
}

LINE_TERMINATOR = b"\n"


class SerialDeviceClient:
    """
    Serial connection to a single MCU board.

    Blocking pyserial calls run on the loop's default executor so the
    event loop never stalls on the OS. Every inbound ``'\\n'``-terminated
    line is handed to ``on_line(device_id, line)``, with the device ID
    bound when the client is built.
    """

    def __init__(self,
                 device_id: int,
                 device: DeviceConfig,
                 on_line: Optional[Callable[[int, str], Any]] = None,
                 *,
                 read_timeout: float = 0.1,
                 serial_factory: Callable[[], Any] = serial.Serial):
        self.device_id = device_id
        self.device = device
        self.on_line = on_line
        self.read_timeout = read_timeout
        self.serial_factory = serial_factory
        self.state = ConnectionState.CLOSED
        self.logger = logging.getLogger(f"{self.__class__.__name__}[{device_id}]")
        self._port: Optional[Any] = None
        self._read_task: Optional[asyncio.Task] = None

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #
    async def open(self):
        """Open the port; raises PortOpenError on failure."""
        if self.is_open:
            return
        self.state = ConnectionState.OPENING
        loop = asyncio.get_running_loop()
        pending = loop.run_in_executor(None, self._open_blocking)
        try:
            self._port = await asyncio.shield(pending)
        except asyncio.CancelledError:
            # the executor open keeps running; whatever it opens must not leak
            self.state = ConnectionState.CLOSED
            pending.add_done_callback(self._close_late_open)
            raise
        except (serial.SerialException, OSError, ValueError) as e:
            self.state = ConnectionState.FAILED
            self._port = None
            raise PortOpenError(
                f"Unable to open serial port {self.device.port_name} for {self.device.device_name}"
            ) from e

        self.state = ConnectionState.OPEN
        self._read_task = asyncio.create_task(self._read_loop())

    def _open_blocking(self):
        settings = self.device.port_settings
        port = self.serial_factory()
        port.port = self.device.port_name
        port.baudrate = settings.baud_rate
        port.bytesize = settings.data_bits
        port.stopbits = STOPBITS[settings.stop_bits]
        port.parity = PARITIES[settings.parity]
        port.timeout = self.read_timeout
        port.open()
        return port

    def _close_late_open(self, pending: asyncio.Future):
        if pending.cancelled() or pending.exception() is not None:
            return
        port = pending.result()
        # called from the loop while it may be shutting down its executor
        try:
            port.close()
            self.logger.info(f"{self.device.port_name} closed (opened after cancellation)")
        except (serial.SerialException, OSError) as e:
            self.logger.warning(f"Error closing {self.device.port_name}: {e}")

    async def close(self) -> bool:
        """Close the port if it is open. Returns True when a port was closed."""
        if not self.is_open:
            return False
        self.state = ConnectionState.CLOSED

        if self._read_task:
            self._read_task.cancel()
            try:
                await self._read_task
            except asyncio.CancelledError:
                pass
            self._read_task = None

        port, self._port = self._port, None
        try:
            await asyncio.get_running_loop().run_in_executor(None, port.close)
        except (serial.SerialException, OSError) as e:
            self.logger.warning(f"Error closing {self.device.port_name}: {e}")
        return True

    # ------------------------------------------------------------------ #
    #  I/O
    # ------------------------------------------------------------------ #
    async def write(self, text: str) -> bool:
        """Hand ``text`` to the port. Never raises; returns False when dropped."""
        if not self.is_open:
            self.logger.debug(f"Write to {self.device.port_name} dropped, port not open: {text!r}")
            return False
        try:
            data = text.encode("utf-8")
            await asyncio.get_running_loop().run_in_executor(None, self._port.write, data)
            return True
        except (serial.SerialException, OSError) as e:
            self.logger.warning(f"Write to {self.device.port_name} failed: {e}")
            return False

    async def _read_loop(self):
        loop = asyncio.get_running_loop()
        buffer = b""

        while self.is_open:
            try:
                chunk = await loop.run_in_executor(None, self._port.readline)
            except (serial.SerialException, OSError) as e:
                if self.is_open:
                    self.logger.error(f"Read error on {self.device.port_name}: {e}")
                    self.state = ConnectionState.FAILED
                break

            if not chunk:
                continue
            buffer += chunk
            # readline returns a partial line when the read timeout expires
            if not buffer.endswith(LINE_TERMINATOR):
                continue

            line = buffer.rstrip(b"\r\n").decode("utf-8", errors="replace")
            buffer = b""
            await self._safe_callback(line)

    async def _safe_callback(self, line: str):
        if not self.on_line:
            return
        try:
            result = self.on_line(self.device_id, line)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            self.logger.error(f"Error in line callback: {e}", exc_info=True)
