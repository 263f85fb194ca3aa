"""Socket.IO client manager backed by Azure Web PubSub groups.

Room membership is mirrored into Web PubSub groups (one group per namespace
and room, see :mod:`naming`) and every broadcast is a single ``send_to_all``
call with an OData filter over those groups. The service is the only fan-out
path: once every instance uses this manager, local and remote subscribers are
indistinguishable.

The inherited in-memory tables of :class:`socketio.AsyncManager` are still
updated and answer local-only queries such as ``get_rooms``. They are only
authoritative for connections held by this instance.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional, TypeVar

import socketio
from azure.core.exceptions import AzureError
from socketio import packet

from .encoder import encode_single_payload
from .exceptions import FeatureNotImplementedError, NotSupportedError
from .filters import build_filter
from .locks import RoomOperationLocks
from .naming import group_name
from .options import BroadcastOptions
from .service import GroupService

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain"
_REMOTE_ERRORS = (AzureError, asyncio.TimeoutError, OSError)

T = TypeVar("T")


def _event_args(data: Any) -> list[Any]:
    if isinstance(data, tuple):
        return list(data)
    if data is None:
        return []
    return [data]


class WebPubSubManager(socketio.AsyncManager):
    def __init__(self, service: GroupService, operation_timeout: Optional[float] = None) -> None:
        super().__init__()
        self.service = service
        self.operation_timeout = operation_timeout
        self.room_locks = RoomOperationLocks()

    async def connect(self, eio_sid: str, namespace: str) -> Optional[str]:
        sid = await super().connect(eio_sid, namespace)
        if sid is not None:
            # Namespace-wide broadcasts and direct messages are filtered on these two groups.
            await self.add_all(sid, namespace, [None, sid])
        return sid

    async def disconnect(self, sid: str, namespace: str, **kwargs: Any) -> Any:
        await self.leave_all(sid, namespace)
        result = await super().disconnect(sid, namespace, **kwargs)
        self.room_locks.evict((namespace, sid))
        return result

    async def enter_room(self, sid: str, namespace: str, room: str, eio_sid: Optional[str] = None) -> None:
        await self.add_all(sid, namespace, [room])

    async def add_all(self, sid: str, namespace: str, rooms: Iterable[Optional[str]]) -> None:
        """Join ``sid`` to every room, one AddConnectionToGroup call per room.

        A failed call is logged and the next room is still attempted. The
        local tables record every attempted room either way, so local and
        remote membership can diverge until a later call succeeds.
        """

        rooms = list(rooms)
        logger.debug("add_all start: sid=%s namespace=%s rooms=%s", sid, namespace, rooms)
        async with self.room_locks.hold((namespace, sid)):
            eio_sid = self.eio_sid_from_sid(sid, namespace)
            if eio_sid is None:
                logger.warning("add_all skipped: sid=%s is not connected to %s", sid, namespace)
                self.room_locks.evict((namespace, sid))
                return
            for room in rooms:
                group = group_name(namespace, room)
                try:
                    await self._call_service(lambda: self.service.add_connection_to_group(group, eio_sid))
                except _REMOTE_ERRORS as exc:
                    logger.warning(
                        "AddConnectionToGroup failed: group=%s connection=%s sid=%s error=%r",
                        group,
                        eio_sid,
                        sid,
                        exc,
                    )
                    continue
                logger.debug("AddConnectionToGroup done: group=%s connection=%s", group, eio_sid)
            for room in rooms:
                self.basic_enter_room(sid, namespace, room, eio_sid=eio_sid)
        logger.debug("add_all finish: sid=%s rooms=%s", sid, self.get_rooms(sid, namespace))

    async def leave_room(self, sid: str, namespace: str, room: str) -> None:
        logger.debug("leave_room start: sid=%s namespace=%s room=%s", sid, namespace, room)
        async with self.room_locks.hold((namespace, sid)):
            eio_sid = self.eio_sid_from_sid(sid, namespace)
            group = group_name(namespace, room)
            if eio_sid is None:
                logger.warning("leave_room: sid=%s is not connected to %s", sid, namespace)
                self.room_locks.evict((namespace, sid))
            else:
                try:
                    await self._call_service(lambda: self.service.remove_connection_from_group(group, eio_sid))
                except _REMOTE_ERRORS as exc:
                    logger.warning(
                        "RemoveConnectionFromGroup failed: group=%s connection=%s sid=%s error=%r",
                        group,
                        eio_sid,
                        sid,
                        exc,
                    )
                else:
                    logger.debug("RemoveConnectionFromGroup done: group=%s connection=%s", group, eio_sid)
            self.basic_leave_room(sid, namespace, room)
        logger.debug("leave_room finish: sid=%s rooms=%s", sid, self.get_rooms(sid, namespace))

    async def leave_all(self, sid: str, namespace: str) -> None:
        """Tell the connection to disconnect and drop all of its rooms locally.

        The connection record itself (the ``None`` room) is kept, so the sid
        still resolves and ``is_connected`` stays true until ``disconnect``
        removes it. Call ``disconnect`` to reach the terminal state.
        """

        logger.debug("leave_all start: sid=%s namespace=%s", sid, namespace)
        async with self.room_locks.hold((namespace, sid)):
            disconnect_packet = self._make_packet(packet.DISCONNECT)
            try:
                await self.broadcast(disconnect_packet, namespace, BroadcastOptions(rooms=frozenset([sid])))
            except _REMOTE_ERRORS as exc:
                logger.warning("leave_all: disconnect broadcast failed for sid=%s error=%r", sid, exc)
            for room in self.get_rooms(sid, namespace):
                self.basic_leave_room(sid, namespace, room)
        logger.debug("leave_all finish: sid=%s", sid)

    async def emit(
        self,
        event: str,
        data: Any,
        namespace: str,
        room: Any = None,
        skip_sid: Any = None,
        callback: Optional[Callable[..., Any]] = None,
        to: Any = None,
        **kwargs: Any,
    ) -> None:
        options = BroadcastOptions.build(to=to, room=room, skip_sid=skip_sid)
        event_packet = self._make_packet(packet.EVENT, data=[event] + _event_args(data))
        if callback is not None:
            target = self._single_connection(namespace, options)
            if target is None:
                await self.broadcast_with_ack(event_packet, namespace, options, callback)
            # The ack comes back on this instance and resolves through trigger_callback.
            event_packet.id = self._generate_ack_id(target, callback)
        await self.broadcast(event_packet, namespace, options)

    async def broadcast(self, pkt: packet.Packet, namespace: str, options: BroadcastOptions) -> None:
        """Send ``pkt`` through one ``send_to_all`` call. Service errors propagate."""

        pkt.namespace = namespace
        payload = encode_single_payload(pkt)
        odata_filter = build_filter(namespace, options.rooms, options.except_rooms)
        logger.debug("broadcast: payload=%r filter=%s", payload, odata_filter)
        await self._call_service(
            lambda: self.service.send_to_all(payload, filter=odata_filter, content_type=CONTENT_TYPE)
        )

    async def disconnect_sockets(self, namespace: str, options: BroadcastOptions, close: bool) -> None:
        logger.debug("disconnect_sockets: namespace=%s options=%s close=%s", namespace, options, close)
        await self.broadcast(self._make_packet(packet.DISCONNECT, data={"close": close}), namespace, options)

    def socket_rooms(self, sid: str, namespace: str) -> set[str]:
        # Same trade-off as the Redis manager: only accurate for sids connected to this instance.
        return set(self.get_rooms(sid, namespace))

    async def fetch_sockets(self, namespace: str, options: BroadcastOptions) -> List[str]:
        if not options.local:
            raise NotSupportedError("fetch_sockets without the local flag")
        targets = options.rooms or frozenset([None])
        excluded = {sid for room in options.except_rooms for sid, _ in self.get_participants(namespace, room)}
        found: List[str] = []
        for room in targets:
            for sid, _ in self.get_participants(namespace, room):
                if sid not in excluded and sid not in found:
                    found.append(sid)
        return found

    async def sockets(self, namespace: str, rooms: Iterable[str]) -> set[str]:
        raise NotSupportedError("sockets")

    async def add_sockets(self, namespace: str, options: BroadcastOptions, rooms: Iterable[str]) -> None:
        raise FeatureNotImplementedError("add_sockets")

    async def del_sockets(self, namespace: str, options: BroadcastOptions, rooms: Iterable[str]) -> None:
        raise FeatureNotImplementedError("del_sockets")

    async def close_room(self, room: str, namespace: str) -> None:
        raise FeatureNotImplementedError("close_room")

    async def broadcast_with_ack(
        self,
        pkt: packet.Packet,
        namespace: str,
        options: BroadcastOptions,
        callback: Callable[..., Any],
    ) -> None:
        raise FeatureNotImplementedError("broadcast_with_ack")

    async def server_side_emit(self, *args: Any, **kwargs: Any) -> None:
        raise NotSupportedError("server_side_emit")

    def _single_connection(self, namespace: str, options: BroadcastOptions) -> Optional[str]:
        if len(options.rooms) != 1 or options.except_rooms:
            return None
        (target,) = options.rooms
        if not self.is_connected(target, namespace):
            return None
        return target

    async def close(self) -> None:
        await self.service.close()

    async def _call_service(self, call: Callable[[], Awaitable[T]]) -> T:
        if self.operation_timeout is None:
            return await call()
        return await asyncio.wait_for(call(), self.operation_timeout)

    def _make_packet(self, packet_type: int, data: Any = None) -> packet.Packet:
        packet_class = getattr(self.server, "packet_class", packet.Packet)
        return packet_class(packet_type, data=data)
