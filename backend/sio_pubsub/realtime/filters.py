from __future__ import annotations

from typing import Iterable

from .naming import group_name


def _in_group(group: str) -> str:
    return f"'{group}' in groups"


def build_filter(namespace: str, rooms: Iterable[str] = (), except_rooms: Iterable[str] | None = None) -> str:
    """Build the OData filter selecting the recipients of one broadcast.

    Target rooms are OR'd together and excluded rooms are AND-NOT'd. An empty
    target set selects the namespace-wide group, so a broadcast never leaks
    into other namespaces sharing the hub.
    """

    allow = [_in_group(group_name(namespace, room)) for room in sorted(set(rooms))]
    if not allow:
        allow = [_in_group(group_name(namespace))]
    deny = [f"not ({_in_group(group_name(namespace, room))})" for room in sorted(set(except_rooms or ()))]

    allow_clause = " or ".join(allow)
    if not deny:
        return allow_clause
    return f"({allow_clause}) and ({' and '.join(deny)})"
