from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

RoomSelector = Union[str, Iterable[str], None]


def _as_rooms(value: RoomSelector) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset([value])
    return frozenset(value)


@dataclass(frozen=True)
class BroadcastOptions:
    rooms: frozenset[str] = frozenset()
    except_rooms: frozenset[str] = frozenset()
    local: bool = False

    @classmethod
    def build(
        cls,
        to: RoomSelector = None,
        room: RoomSelector = None,
        skip_sid: RoomSelector = None,
        local: bool = False,
    ) -> "BroadcastOptions":
        # Every sid is also the name of its private room, so skipped sids become exclusions.
        target = to if to is not None else room
        return cls(rooms=_as_rooms(target), except_rooms=_as_rooms(skip_sid), local=local)
