"""Routing of client frames and firmware lines."""

from __future__ import annotations

import asyncio

import pytest

from nodebot.services.connection_manager import ConnectionManager
from nodebot.services.file_gateway import FileGateway
from nodebot.services.message_router import MessageRouter

from fakes import FakeClient, FakeSession


def build_router(registry, tmp_path, *, failing=(), session=True):
    for device_id, device in enumerate(registry):
        client = FakeClient(device_id, device, fail=device_id in failing)
        client.is_open = device_id not in failing
        device.connection = client
    connections = ConnectionManager()
    fake_session = FakeSession()
    if session:
        connections.attach(fake_session)
    router = MessageRouter(registry, connections, FileGateway(tmp_path))
    return router, fake_session


def writes(registry):
    return [device.connection.writes for device in registry]


def test_device_address_writes_payload_with_newline(registry_of, tmp_path):
    registry = registry_of(3)
    router, session = build_router(registry, tmp_path)

    asyncio.run(router.handle_client_message("2|RUN"))

    assert writes(registry) == [[], [], ["RUN\n"]]
    assert session.sent == []


def test_out_of_range_device_is_reported_without_writing(registry_of, tmp_path):
    registry = registry_of(3)
    router, session = build_router(registry, tmp_path)

    asyncio.run(router.handle_client_message("5|RUN"))

    assert writes(registry) == [[], [], []]
    assert session.sent == ["Bad device ID: 5"]


def test_device_payload_keeps_embedded_delimiters(registry_of, tmp_path):
    registry = registry_of(1)
    router, _ = build_router(registry, tmp_path)

    asyncio.run(router.handle_client_message("0|G1|X10|Y20"))

    assert writes(registry) == [["G1|X10|Y20\n"]]


def test_leading_zeros_address_the_same_device(registry_of, tmp_path):
    registry = registry_of(2)
    router, _ = build_router(registry, tmp_path)

    asyncio.run(router.handle_client_message("001|HOME"))

    assert writes(registry) == [[], ["HOME\n"]]


def test_broadcast_reaches_every_device_even_failed_ones(registry_of, tmp_path):
    registry = registry_of(4)
    router, session = build_router(registry, tmp_path, failing={1, 3})

    asyncio.run(router.handle_client_message("Broadcast|STOP"))

    assert writes(registry) == [["STOP\n"]] * 4
    assert session.sent == []


def test_unknown_command_is_reported(registry_of, tmp_path):
    registry = registry_of(1)
    router, session = build_router(registry, tmp_path)

    asyncio.run(router.handle_client_message("Dance|now"))

    assert session.sent == ["Bad command: Dance|now"]
    assert writes(registry) == [[]]


@pytest.mark.parametrize("text", ["ab", "0|", "RUN", ""])
def test_malformed_messages_are_silently_ignored(registry_of, tmp_path, text):
    registry = registry_of(2)
    router, session = build_router(registry, tmp_path)

    asyncio.run(router.handle_client_message(text))

    assert session.sent == []
    assert writes(registry) == [[], []]


def test_firmware_line_is_forwarded_and_logged(registry_of, tmp_path, caplog):
    registry = registry_of(2)
    router, session = build_router(registry, tmp_path)

    with caplog.at_level("INFO"):
        asyncio.run(router.handle_device_line(1, "OK"))

    assert session.sent == ["1|OK"]
    assert "1|OK" in caplog.messages


def test_firmware_line_without_session_is_only_logged(registry_of, tmp_path, caplog):
    registry = registry_of(2)
    router, session = build_router(registry, tmp_path, session=False)

    with caplog.at_level("INFO"):
        asyncio.run(router.handle_device_line(1, "OK"))

    assert session.sent == []
    assert "1|OK" in caplog.messages


def test_put_then_get_file_round_trips(registry_of, tmp_path):
    registry = registry_of(0)
    router, session = build_router(registry, tmp_path)

    async def scenario():
        await router.handle_client_message("PutFile|foo.txt|line1|line2")
        await router.handle_client_message("GetFile|foo.txt")

    asyncio.run(scenario())

    assert session.sent == ["File|line1|line2"]
    assert (tmp_path / "foo.txt").read_text(encoding="utf-8") == "line1|line2"


def test_get_file_list_replies_with_sorted_names(registry_of, tmp_path):
    (tmp_path / "scripts").mkdir()
    (tmp_path / "scripts" / "b.txt").write_text("")
    (tmp_path / "scripts" / "a.txt").write_text("")
    router, session = build_router(registry_of(0), tmp_path)

    asyncio.run(router.handle_client_message("GetFileList|scripts"))

    assert session.sent == ["FileList|a.txt|b.txt"]


def test_file_errors_are_reported_not_raised(registry_of, tmp_path):
    router, session = build_router(registry_of(0), tmp_path)

    async def scenario():
        await router.handle_client_message("GetFile|missing.txt")
        await router.handle_client_message("GetFileList|nowhere")
        await router.handle_client_message("PutFile|nowhere/x.txt|data")

    asyncio.run(scenario())

    assert [line.split(":")[0] for line in session.sent] == [
        "Error reading file",
        "Unable to get file list",
        "Error writing file",
    ]


def test_unexpected_errors_stop_at_the_message_boundary(registry_of, tmp_path, caplog):
    registry = registry_of(1)
    router, session = build_router(registry, tmp_path)

    async def explode(text):
        raise RuntimeError("serial driver fell over")

    registry[0].connection.write = explode

    asyncio.run(router.handle_client_message("0|RUN"))

    assert session.sent == []
    assert any("serial driver fell over" in message for message in caplog.messages)


def test_oversized_device_token_is_reported_as_bad_device(registry_of, tmp_path):
    registry = registry_of(3)
    router, session = build_router(registry, tmp_path)
    token = "9" * 5000

    asyncio.run(router.handle_client_message(f"{token}|RUN"))

    assert session.sent == [f"Bad device ID: {token}"]
    assert writes(registry) == [[], [], []]


def test_long_zero_padded_token_still_addresses_device(registry_of, tmp_path):
    registry = registry_of(3)
    router, session = build_router(registry, tmp_path)

    asyncio.run(router.handle_client_message("0" * 40 + "1|RUN"))

    assert writes(registry) == [[], ["RUN\n"], []]
    assert session.sent == []


def test_device_id_on_empty_registry_is_bad(registry_of, tmp_path):
    router, session = build_router(registry_of(0), tmp_path)

    asyncio.run(router.handle_client_message("0|RUN"))

    assert session.sent == ["Bad device ID: 0"]
