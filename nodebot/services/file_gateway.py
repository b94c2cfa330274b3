"""File operations against the UI asset tree, answered as wire replies."""
from __future__ import annotations
import asyncio, logging, os
from pathlib import Path
from typing import List

from nodebot.core.exceptions import FileOperationError

FILE_LIST_PREFIX = "FileList|"
FILE_PREFIX = "File|"


class FileGateway:
    """
    List, read and write files below ``root``.

    Paths from the client are joined to ``root`` as given; parent-directory
    segments are not filtered. Blocking filesystem calls run on the loop's
    default executor.
    """

    def __init__(self, root: str | os.PathLike, *, encoding: str = "utf-8"):
        self.root = Path(root)
        self.encoding = encoding
        self.log = logging.getLogger(self.__class__.__name__)

    def resolve(self, path: str) -> Path:
        # keep "/x" under root
        return self.root / path.lstrip("/\\")

    # ---- Public API ----
    async def get_file_list(self, path: str) -> str:
        """Return ``"FileList|n1|n2|..."`` for the directory at ``path``."""
        target = self.resolve(path)
        try:
            names = await self._run(self._list_blocking, target)
        except OSError as e:
            raise FileOperationError(f"Unable to get file list: {e.strerror or e}") from e
        return FILE_LIST_PREFIX + "|".join(names)

    async def get_file(self, path: str) -> str:
        """Return ``"File|<contents>"`` for the file at ``path``."""
        target = self.resolve(path)
        try:
            contents = await self._run(self._read_blocking, target)
        except OSError as e:
            raise FileOperationError(f"Error reading file: {e.strerror or e}") from e
        return FILE_PREFIX + contents

    async def put_file(self, path: str, contents: str) -> None:
        """Write ``contents`` verbatim to ``path``, replacing any existing file."""
        target = self.resolve(path)
        try:
            await self._run(self._write_blocking, target, contents)
        except OSError as e:
            raise FileOperationError(f"Error writing file: {e.strerror or e}") from e
        self.log.debug(f"Wrote {len(contents)} chars to {target}")

    # ---- Blocking helpers ----
    @staticmethod
    async def _run(fn, *args):
        return await asyncio.get_running_loop().run_in_executor(None, fn, *args)

    @staticmethod
    def _list_blocking(target: Path) -> List[str]:
        return sorted(os.listdir(target))

    def _read_blocking(self, target: Path) -> str:
        # newline="" keeps line endings as stored; undecodable bytes become U+FFFD
        with open(target, "r", encoding=self.encoding, errors="replace", newline="") as fh:
            return fh.read()

    def _write_blocking(self, target: Path, contents: str) -> None:
        with open(target, "w", encoding=self.encoding, newline="") as fh:
            fh.write(contents)
