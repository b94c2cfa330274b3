import logging
from typing import Any, Optional

from websockets.exceptions import ConnectionClosed


class ConnectionManager:
    """
    Holds the one live control session.

    A new session replaces the previous reference without closing it;
    there is no fan-out to older sessions.
    """

    def __init__(self):
        self.session: Optional[Any] = None
        self.log = logging.getLogger(self.__class__.__name__)

    def attach(self, session: Any) -> None:
        if self.session is not None and self.session is not session:
            self.log.info("New client session replaces the current one")
        self.session = session

    def detach(self, session: Any) -> None:
        # a superseded session closing must not clear its replacement
        if self.session is session:
            self.session = None

    async def send_to_client(self, message: str) -> bool:
        """Log ``message`` and send it to the current session, if any."""
        self.log.info(message)
        session = self.session
        if session is None:
            return False
        try:
            await session.send(message)
            return True
        except ConnectionClosed as e:
            self.log.debug(f"Send on closed session dropped: {e}")
            return False
