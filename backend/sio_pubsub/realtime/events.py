from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import ValidationError

from sio_pubsub.realtime.server import sio
from sio_pubsub.schemas.room import RoomMessage, RoomRequest

logger = logging.getLogger(__name__)


def _validation_error(exc: ValidationError) -> dict[str, Any]:
    return {"error": "invalid_payload", "detail": exc.errors(include_url=False)}


def _room_list(sid: str) -> list[str]:
    # The private room named after the sid is an implementation detail of addressing.
    return sorted(room for room in sio.rooms(sid) if room != sid)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: dict[str, Any] | None) -> None:
    logger.debug("Socket connected: sid=%s", sid)


@sio.event
async def disconnect(sid: str, *args: Any) -> None:
    logger.debug("Socket disconnected: sid=%s", sid)


@sio.on("room:join")
async def handle_room_join(sid: str, data: Dict[str, Any]) -> dict[str, Any]:
    try:
        request = RoomRequest.model_validate(data or {})
    except ValidationError as exc:
        return _validation_error(exc)

    await sio.enter_room(sid, request.room)
    return {"rooms": _room_list(sid)}


@sio.on("room:leave")
async def handle_room_leave(sid: str, data: Dict[str, Any]) -> dict[str, Any]:
    try:
        request = RoomRequest.model_validate(data or {})
    except ValidationError as exc:
        return _validation_error(exc)

    await sio.leave_room(sid, request.room)
    return {"rooms": _room_list(sid)}


@sio.on("room:message")
async def handle_room_message(sid: str, data: Dict[str, Any]) -> dict[str, Any] | None:
    try:
        message = RoomMessage.model_validate(data or {})
    except ValidationError as exc:
        return _validation_error(exc)

    payload = {"room": message.room, "fromSid": sid, "content": message.content.strip()}
    await sio.emit("room:message", payload, room=message.room, skip_sid=sid)
    return None


@sio.on("room:list")
async def handle_room_list(sid: str, *args: Any) -> dict[str, Any]:
    return {"rooms": _room_list(sid)}
