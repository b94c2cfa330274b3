from __future__ import annotations

import json
from pathlib import Path

import pytest

from nodebot.models.device_models import DeviceConfig, PortSettings
from nodebot.services.registry_service import DeviceRegistry

from fakes import FakeSerial


def make_rows(count: int) -> list[dict]:
    return [
        {
            "deviceName": f"Robot Motor {i + 1}",
            "portName": f"COM{i + 5}",
            "portSettings": "57600|8|1|none",
            "serialPort": "undefined",
        }
        for i in range(count)
    ]


@pytest.fixture(autouse=True)
def _reset_fake_serial():
    FakeSerial.instances.clear()
    yield
    FakeSerial.instances.clear()


@pytest.fixture
def registry_of():
    """Build a registry of ``n`` devices."""

    def build(count: int) -> DeviceRegistry:
        return DeviceRegistry.from_rows(make_rows(count))

    return build


@pytest.fixture
def port_configs(tmp_path: Path):
    """Write ``n`` device rows to a portConfigs.json and return its path."""

    def write(count: int) -> Path:
        path = tmp_path / "portConfigs.json"
        path.write_text(json.dumps(make_rows(count)), encoding="utf-8")
        return path

    return write


@pytest.fixture
def device() -> DeviceConfig:
    return DeviceConfig("Robot Motor 1", "COM5", PortSettings.parse("57600|8|1|none"))
