from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from nodebot.core.exceptions import ConfigLoadError


###############################################################################
# 1. PORT SETTINGS ------------------------------------------------------------
###############################################################################

PARITY_NAMES = ("none", "even", "odd", "mark", "space")
STOP_BITS = {"1": 1, "1.5": 1.5, "2": 2}
DATA_BITS = (5, 6, 7, 8)

@dataclass(frozen=True, slots=True)
class PortSettings:
    """Line settings parsed from a ``"<baud>|<dataBits>|<stopBits>|<parity>"`` string."""
    baud_rate: int
    data_bits: int = 8
    stop_bits: float = 1
    parity: str = "none"

    # ---------- factory --------------------------------------------------- #
    @classmethod
    def parse(cls, text: str) -> "PortSettings":
        parts = [p.strip() for p in str(text).split("|")]
        if len(parts) != 4:
            raise ConfigLoadError(f"Port settings must be 'baud|dataBits|stopBits|parity', got {text!r}")
        baud, data_bits, stop_bits, parity = parts
        try:
            baud_rate = int(baud)
            bits = int(data_bits)
        except ValueError as exc:
            raise ConfigLoadError(f"Bad numeric port setting in {text!r}") from exc
        if baud_rate <= 0:
            raise ConfigLoadError(f"Baud rate must be positive, got {baud_rate}")
        if bits not in DATA_BITS:
            raise ConfigLoadError(f"Data bits must be one of {DATA_BITS}, got {bits}")
        if stop_bits not in STOP_BITS:
            raise ConfigLoadError(f"Stop bits must be one of {tuple(STOP_BITS)}, got {stop_bits!r}")
        if parity.lower() not in PARITY_NAMES:
            raise ConfigLoadError(f"Parity must be one of {PARITY_NAMES}, got {parity!r}")
        return cls(
            baud_rate = baud_rate,
            data_bits = bits,
            stop_bits = STOP_BITS[stop_bits],
            parity    = parity.lower(),
        )

    def __str__(self) -> str:
        return f"{self.baud_rate}|{self.data_bits}|{self.stop_bits:g}|{self.parity}"

###############################################################################
# 2. DEVICE CONFIG ------------------------------------------------------------
###############################################################################

@dataclass(slots=True)
class DeviceConfig:
    """One MCU board entry from ``portConfigs.json``.

    The entry's position in the registry is its wire device ID. ``connection``
    stays ``None`` until the port initializer attaches a serial client; the
    ``serialPort`` field of the input row is never trusted.
    """
    device_name: str
    port_name: str
    port_settings: PortSettings
    connection: Optional[Any] = field(default=None, repr=False, compare=False)

    # ---------- factory --------------------------------------------------- #
    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "DeviceConfig":
        if not isinstance(row, dict):
            raise ConfigLoadError(f"Device entry must be an object, got {type(row).__name__}")
        try:
            return cls(
                device_name   = str(row["deviceName"]),
                port_name     = str(row["portName"]),
                port_settings = PortSettings.parse(row["portSettings"]),
            )
        except KeyError as exc:
            raise ConfigLoadError(f"Device entry is missing {exc.args[0]!r}") from exc

    @property
    def is_open(self) -> bool:
        return self.connection is not None and self.connection.is_open
