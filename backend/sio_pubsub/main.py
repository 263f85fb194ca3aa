from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sio_pubsub.core.config import settings
from sio_pubsub.core.logging import configure_logging
from sio_pubsub.realtime import WebPubSubManager, create_socket_app, sio
import sio_pubsub.realtime.events  # noqa: F401 - ensure handlers are registered

configure_logging(settings.debug)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if isinstance(sio.manager, WebPubSubManager):
        await sio.manager.close()


fastapi_app = FastAPI(title=settings.project_name, debug=settings.debug, lifespan=lifespan)

fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@fastapi_app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    manager = "webpubsub" if isinstance(sio.manager, WebPubSubManager) else "memory"
    return {"status": "ok", "clientManager": manager}


app = create_socket_app(fastapi_app)

# Re-export FastAPI application for tests if needed
api_app = fastapi_app
