from __future__ import annotations

from typing import Any, Protocol

from azure.messaging.webpubsubservice.aio import WebPubSubServiceClient

from sio_pubsub.core.config import Settings


class GroupService(Protocol):
    """The slice of the Web PubSub service client the client manager relies on."""

    async def add_connection_to_group(self, group: str, connection_id: str, **kwargs: Any) -> None: ...

    async def remove_connection_from_group(self, group: str, connection_id: str, **kwargs: Any) -> None: ...

    async def send_to_all(self, message: Any, **kwargs: Any) -> None: ...

    async def close(self) -> None: ...


def create_service_client(settings: Settings) -> WebPubSubServiceClient:
    if not settings.webpubsub_connection_string:
        raise ValueError("WEBPUBSUB_CONNECTION_STRING is not configured")
    return WebPubSubServiceClient.from_connection_string(
        settings.webpubsub_connection_string,
        hub=settings.webpubsub_hub,
    )
