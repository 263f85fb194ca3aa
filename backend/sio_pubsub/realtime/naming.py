"""Mapping of Socket.IO (namespace, room) pairs onto flat Web PubSub group names.

Group names look like ``0~<namespace>`` for the namespace-wide group and
``0~<namespace>~<room>`` for a room, where both segments are url-safe base64
without padding. The leading ``0`` versions the scheme. The base64url
alphabet never contains ``~``, so the delimiter count tells the two forms
apart and an empty room (``0~<namespace>~``) never collides with "no room".
"""

from __future__ import annotations

import base64

SCHEME_VERSION = "0"
GROUP_DELIMITER = "~"


def _b64url(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")


def group_name(namespace: str, room: str | None = None) -> str:
    segments = [SCHEME_VERSION, _b64url(namespace)]
    if room is not None:
        segments.append(_b64url(room))
    return GROUP_DELIMITER.join(segments)
