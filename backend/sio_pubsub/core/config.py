from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    debug: bool = Field(default=False)
    project_name: str = Field(default="Socket.IO Web PubSub Service")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_methods: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    websocket_ping_interval: int = Field(default=20)
    socketio_path: str = Field(default="/ws/socket.io")
    webpubsub_connection_string: str = Field(
        default="",
        validation_alias="WEBPUBSUB_CONNECTION_STRING",
    )
    webpubsub_hub: str = Field(default="socketio", validation_alias="WEBPUBSUB_HUB")
    use_default_adapter: bool = Field(default=False)
    room_operation_timeout_seconds: float | None = Field(default=None, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings: Annotated[Settings, "Application settings"] = get_settings()
