"""Plain HTTP GET responder for the UI asset tree, hooked into the WebSocket server."""
from __future__ import annotations
import asyncio, logging, mimetypes, os
from http import HTTPStatus
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

from websockets.datastructures import Headers
from websockets.http11 import Request, Response

INDEX_FILE = "index.html"


class AssetResponder:
    """``process_request`` hook: WebSocket upgrades pass through, other GETs get files."""

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root).resolve()
        self.log = logging.getLogger(self.__class__.__name__)

    async def __call__(self, connection, request: Request) -> Optional[Response]:
        if request.headers.get("Upgrade", "").lower() == "websocket":
            return None

        target = self.locate(request.path)
        if target is None:
            self.log.debug(f"GET {request.path} -> 404")
            return connection.respond(HTTPStatus.NOT_FOUND, "Not Found\n")

        body = await asyncio.get_running_loop().run_in_executor(None, target.read_bytes)
        content_type = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
        self.log.debug(f"GET {request.path} -> {target}")
        headers = Headers([
            ("Content-Type", content_type),
            ("Content-Length", str(len(body))),
            ("Connection", "close"),
        ])
        return Response(HTTPStatus.OK.value, HTTPStatus.OK.phrase, headers, body)

    def locate(self, request_path: str) -> Optional[Path]:
        """Map a URL path to a file under root, or None."""
        relative = unquote(urlsplit(request_path).path).lstrip("/")
        target = (self.root / relative).resolve()
        if target.is_dir():
            target = target / INDEX_FILE
        try:
            target.relative_to(self.root)
        except ValueError:
            return None
        return target if target.is_file() else None
