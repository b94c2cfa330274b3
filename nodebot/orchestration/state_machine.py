from enum import Enum, auto
import logging

class PortInitState(Enum):
    IDLE = auto()
    OPENING = auto()
    OPENED = auto()
    FAILED_OPEN = auto()
    ALL_ATTEMPTED = auto()
    TRANSPORT_STARTED = auto()
    SHUTDOWN = auto()

class PortInitStateMachine:
    """Tracks the sequential port-open walk from IDLE to TRANSPORT_STARTED"""

    def __init__(self):
        self.current_state = PortInitState.IDLE
        self.logger = logging.getLogger(self.__class__.__name__)
        self.valid_transitions = {
            PortInitState.IDLE: {PortInitState.OPENING, PortInitState.ALL_ATTEMPTED, PortInitState.SHUTDOWN},
            PortInitState.OPENING: {PortInitState.OPENED, PortInitState.FAILED_OPEN, PortInitState.SHUTDOWN},
            PortInitState.OPENED: {PortInitState.OPENING, PortInitState.ALL_ATTEMPTED, PortInitState.SHUTDOWN},
            PortInitState.FAILED_OPEN: {PortInitState.OPENING, PortInitState.ALL_ATTEMPTED, PortInitState.SHUTDOWN},
            PortInitState.ALL_ATTEMPTED: {PortInitState.TRANSPORT_STARTED, PortInitState.SHUTDOWN},
            PortInitState.TRANSPORT_STARTED: {PortInitState.SHUTDOWN},
            PortInitState.SHUTDOWN: set()
        }

    def can_transition_to(self, new_state: PortInitState) -> bool:
        return new_state in self.valid_transitions.get(self.current_state, set())

    def transition_to(self, new_state: PortInitState) -> bool:
        if self.can_transition_to(new_state):
            self.logger.debug(f"State transition: {self.current_state.name} -> {new_state.name}")
            self.current_state = new_state
            return True
        else:
            self.logger.error(f"Invalid state transition: {self.current_state.name} -> {new_state.name}")
            return False
