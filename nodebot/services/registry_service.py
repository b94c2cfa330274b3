# registry_service.py

import json
import logging
from pathlib import Path
from collections.abc import Sequence
from typing import Any, Iterator, Union

from nodebot.core.exceptions import ConfigLoadError
from nodebot.models.device_models import DeviceConfig


logger = logging.getLogger(__name__)


class DeviceRegistry(Sequence):
    """
    Fixed, ordered list of configured devices.

    A device's wire ID is its index here. The sequence itself is never
    resized after load; only each entry's ``connection`` changes.
    """

    def __init__(self, devices: Sequence[DeviceConfig] = ()):
        self._devices = tuple(devices)

    def __getitem__(self, index):
        return self._devices[index]

    def __len__(self) -> int:
        return len(self._devices)

    def __iter__(self) -> Iterator[DeviceConfig]:
        return iter(self._devices)

    def __repr__(self) -> str:
        return f"DeviceRegistry({list(self._devices)!r})"

    def contains_id(self, device_id: int) -> bool:
        return 0 <= device_id < len(self._devices)

    # ---- Loading ----
    @classmethod
    def from_rows(cls, rows: Any) -> "DeviceRegistry":
        if not isinstance(rows, list):
            raise ConfigLoadError(f"Port configs must be a JSON array, got {type(rows).__name__}")
        return cls([DeviceConfig.from_row(row) for row in rows])

    @classmethod
    def load(cls, source: Union[str, Path]) -> "DeviceRegistry":
        """Read and parse the port configuration file at ``source``."""
        path = Path(source)
        logger.info(f"Loading port configs from {path}")
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigLoadError(f"Unable to load port configs: check [{path}] ({exc.strerror or exc})") from exc
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigLoadError(f"Unable to parse port configs in [{path}]: {exc}") from exc
        registry = cls.from_rows(rows)
        logger.info(f"Loaded {len(registry)} device(s)")
        return registry
