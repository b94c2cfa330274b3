from __future__ import annotations

import asyncio

from nodebot.services.connection_manager import ConnectionManager

from fakes import FakeSession


def test_send_without_session_is_a_logged_no_op(caplog):
    manager = ConnectionManager()

    with caplog.at_level("INFO"):
        delivered = asyncio.run(manager.send_to_client("hello"))

    assert delivered is False
    assert "hello" in caplog.messages


def test_new_session_replaces_old_without_fan_out():
    manager = ConnectionManager()
    first, second = FakeSession(), FakeSession()

    manager.attach(first)
    manager.attach(second)
    asyncio.run(manager.send_to_client("0|OK"))

    assert first.sent == []
    assert second.sent == ["0|OK"]
    assert first.closed is False


def test_superseded_session_closing_keeps_replacement():
    manager = ConnectionManager()
    first, second = FakeSession(), FakeSession()
    manager.attach(first)
    manager.attach(second)

    manager.detach(first)

    assert manager.session is second


def test_detach_current_session_makes_sends_inert():
    manager = ConnectionManager()
    session = FakeSession()
    manager.attach(session)

    manager.detach(session)
    delivered = asyncio.run(manager.send_to_client("0|OK"))

    assert delivered is False
    assert manager.session is None
    assert session.sent == []


def test_send_on_closed_session_does_not_raise():
    manager = ConnectionManager()
    manager.attach(FakeSession(closed=True))

    assert asyncio.run(manager.send_to_client("0|OK")) is False
