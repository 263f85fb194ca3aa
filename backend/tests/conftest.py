"""Shared fixtures: a Socket.IO server wired to a mocked Web PubSub service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import socketio

from sio_pubsub.realtime.adapter import WebPubSubManager


@pytest.fixture()
def service() -> MagicMock:
    service = MagicMock()
    service.add_connection_to_group = AsyncMock()
    service.remove_connection_from_group = AsyncMock()
    service.send_to_all = AsyncMock()
    service.close = AsyncMock()
    return service


@pytest.fixture()
def manager(service) -> WebPubSubManager:
    manager = WebPubSubManager(service)
    # AsyncServer binds itself to the manager; connect() needs it to generate sids.
    socketio.AsyncServer(async_mode="asgi", client_manager=manager)
    return manager


@pytest.fixture()
def server(manager) -> socketio.AsyncServer:
    return manager.server
