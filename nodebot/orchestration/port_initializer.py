from typing import Any, Awaitable, Callable, List, Optional
import asyncio
import logging

from nodebot.core.exceptions import PortOpenError
from nodebot.models.device_models import DeviceConfig
from .state_machine import PortInitStateMachine, PortInitState

ClientFactory = Callable[[int, DeviceConfig], Any]


class PortInitializer:
    """Opens every configured serial port one at a time, then starts the transport once"""

    def __init__(self,
                 registry,
                 client_factory: ClientFactory,
                 *,
                 open_delay: float = 0.1,
                 on_complete: Optional[Callable[[], Optional[Awaitable[None]]]] = None):
        self.registry = registry
        self.client_factory = client_factory
        self.open_delay = open_delay
        self.on_complete = on_complete
        self.state_machine = PortInitStateMachine()
        self.attempted: List[int] = []
        self.failed: List[int] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def state(self) -> PortInitState:
        return self.state_machine.current_state

    async def run(self) -> bool:
        """Attempt every device in registry order, then call on_complete exactly once"""
        if self.state is not PortInitState.IDLE:
            self.logger.warning(f"Port initialization already ran (state {self.state.name})")
            return False

        for index, device in enumerate(self.registry):
            if index:
                # opening OS serial handles back to back is unreliable
                await asyncio.sleep(self.open_delay)
            await self._open_device(index, device)

        self.state_machine.transition_to(PortInitState.ALL_ATTEMPTED)
        opened = len(self.attempted) - len(self.failed)
        self.logger.info(f"Port initialization complete: {opened}/{len(self.registry)} device(s) open")

        if self.on_complete:
            result = self.on_complete()
            if asyncio.iscoroutine(result):
                await result
        self.state_machine.transition_to(PortInitState.TRANSPORT_STARTED)
        return True

    async def _open_device(self, index: int, device: DeviceConfig):
        self.state_machine.transition_to(PortInitState.OPENING)
        client = self.client_factory(index, device)
        device.connection = client
        self.attempted.append(index)

        try:
            await client.open()
        except PortOpenError as e:
            # no retry: the device stays unusable for the life of the process
            self.failed.append(index)
            self.state_machine.transition_to(PortInitState.FAILED_OPEN)
            self.logger.warning(f"{e} ({e.__cause__})" if e.__cause__ else str(e))
        else:
            self.state_machine.transition_to(PortInitState.OPENED)
            self.logger.info(f"{device.port_name} opened for {device.device_name}")

    async def shutdown(self):
        """Close every open port, best-effort"""
        if self.state_machine.can_transition_to(PortInitState.SHUTDOWN):
            self.state_machine.transition_to(PortInitState.SHUTDOWN)
        for device in self.registry:
            client = device.connection
            if client is None:
                continue
            try:
                if await client.close():
                    self.logger.info(f"{device.port_name} closed")
            except Exception as e:
                self.logger.error(f"Error closing {device.port_name}: {e}")
