from __future__ import annotations

import logging
from typing import Sequence

import socketio
from fastapi import FastAPI

from sio_pubsub.core.config import Settings, settings
from sio_pubsub.realtime.adapter import WebPubSubManager
from sio_pubsub.realtime.service import GroupService, create_service_client

logger = logging.getLogger(__name__)


def _allowed_origins(settings: Settings) -> Sequence[str] | str:
    if not settings.cors_allow_origins:
        return []
    if "*" in settings.cors_allow_origins:
        return "*"
    return settings.cors_allow_origins


def create_client_manager(settings: Settings, service: GroupService | None = None) -> socketio.AsyncManager:
    """Build the client manager handed to ``socketio.AsyncServer``.

    Falls back to the in-memory manager when ``use_default_adapter`` is set or
    no Web PubSub connection string is configured.

    The Web PubSub manager assumes the Engine.IO transport is hosted by Web
    PubSub, so that every Engine.IO sid is also a service connection id. It
    does no local fan-out: behind a plain ``socketio.ASGIApp`` the group calls
    target ids the service does not know and broadcasts never reach clients
    connected to this process.
    """

    if settings.use_default_adapter:
        return socketio.AsyncManager()
    if service is None:
        if not settings.webpubsub_connection_string:
            logger.warning("WEBPUBSUB_CONNECTION_STRING is not set, rooms stay in process memory")
            return socketio.AsyncManager()
        service = create_service_client(settings)
    return WebPubSubManager(service, operation_timeout=settings.room_operation_timeout_seconds)


def create_socket_server(
    settings: Settings,
    client_manager: socketio.AsyncManager | None = None,
) -> socketio.AsyncServer:
    return socketio.AsyncServer(
        async_mode="asgi",
        client_manager=client_manager or create_client_manager(settings),
        cors_allowed_origins=_allowed_origins(settings),
        cors_credentials=settings.cors_allow_credentials,
        ping_interval=settings.websocket_ping_interval,
        ping_timeout=settings.websocket_ping_interval * 2,
        logger=settings.debug,
        engineio_logger=settings.debug,
    )


sio = create_socket_server(settings)


def create_socket_app(app: FastAPI, server: socketio.AsyncServer | None = None) -> socketio.ASGIApp:
    """Wrap the FastAPI application with the Socket.IO ASGI bridge."""

    return socketio.ASGIApp(
        server or sio,
        other_asgi_app=app,
        socketio_path=settings.socketio_path,
    )
