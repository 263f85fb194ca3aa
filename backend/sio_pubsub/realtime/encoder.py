from __future__ import annotations

from engineio import packet as eio_packet
from engineio import payload as eio_payload
from socketio import packet as sio_packet


def encode_single_payload(packet: sio_packet.Packet) -> str:
    """Encode a Socket.IO packet into one Engine.IO payload string.

    Binary attachments become extra MESSAGE packets in the same payload, so a
    single ``send_to_all`` call carries the whole packet.
    """

    encoded = packet.encode()
    parts = encoded if isinstance(encoded, list) else [encoded]
    packets = [eio_packet.Packet(eio_packet.MESSAGE, data=part) for part in parts]
    return eio_payload.Payload(packets=packets).encode()
