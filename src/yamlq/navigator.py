"""Depth-tracking scans over an ``EventStream``.

None of these helpers build a tree: structure is recovered by counting
container starts and ends while walking forward from a Location.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Literal, TypeAlias

from .errors import InvalidOperation, StructuralError
from .stream import (
    Alias,
    Event,
    EventStream,
    Location,
    MappingEnd,
    MappingStart,
    Scalar,
    SequenceEnd,
    SequenceStart,
)

Shape: TypeAlias = Literal["scalar", "sequence", "mapping"]


def classify_root(stream: EventStream) -> Shape:
    """Return the declared shape of the document root."""

    return classify(stream, stream.root_location)


def classify(stream: EventStream, at: Location) -> Shape:
    event = _event_at(stream, at)
    if isinstance(event, Scalar):
        return "scalar"
    if isinstance(event, SequenceStart):
        return "sequence"
    if isinstance(event, MappingStart):
        return "mapping"
    raise StructuralError(
        f"cannot classify node at location {at}: found {event.kind}"
    )


def find_key(
    stream: EventStream,
    key: str,
    at: Location | None = None,
) -> Location | None:
    """Find the Location of the value paired with ``key``.

    The scan starts at the mapping at ``at`` (the document root by default)
    and only considers its own entries: nested containers are stepped over
    by depth. Keys must match exactly, a key that merely shares a prefix
    with ``key`` does not match. Returns ``None`` when the key is absent or
    the node is not a mapping.
    """

    if at is None:
        at = stream.root_location
    if not isinstance(_event_at(stream, at), MappingStart):
        return None

    depth = 0
    expecting_key = True
    matched = False
    for index in range(at + 1, len(stream)):
        event = stream[index]
        if depth == 0:
            if isinstance(event, MappingEnd):
                if matched:
                    raise StructuralError(
                        f"key {key!r} at location {index - 1} has no value"
                    )
                return None
            if matched:
                return index
            if expecting_key and isinstance(event, Scalar) and event.value == key:
                matched = True
                continue
            expecting_key = not expecting_key

        if isinstance(event, (SequenceStart, MappingStart)):
            depth += 1
        elif isinstance(event, (SequenceEnd, MappingEnd)):
            depth -= 1

    raise StructuralError(f"mapping at location {at} is never closed")


def iter_children(stream: EventStream, at: Location | None = None) -> Iterator[Location]:
    """Yield the Location of every immediate child of the sequence at ``at``."""

    if at is None:
        at = stream.root_location
    event = _event_at(stream, at)
    if not isinstance(event, SequenceStart):
        raise InvalidOperation(
            f"cannot iterate elements of a {classify(stream, at)}; a sequence is required"
        )

    depth = 1
    for index in range(at + 1, len(stream)):
        event = stream[index]
        if depth == 1 and isinstance(
            event, (Scalar, Alias, SequenceStart, MappingStart)
        ):
            yield index
        if isinstance(event, (SequenceStart, MappingStart)):
            depth += 1
        elif isinstance(event, (SequenceEnd, MappingEnd)):
            depth -= 1
            if depth == 0:
                return

    raise StructuralError(f"sequence at location {at} is never closed")


def count_children(stream: EventStream, at: Location | None = None) -> int:
    """Count the immediate children of a sequence; nested elements are not counted."""

    return sum(1 for _ in iter_children(stream, at))


def find_index(
    stream: EventStream,
    index: int,
    at: Location | None = None,
) -> Location | None:
    """Locate element ``index`` of the sequence at ``at``.

    Negative indexes count from the end. Returns ``None`` when the index is
    out of range or the node is not a sequence.
    """

    if at is None:
        at = stream.root_location
    if not isinstance(_event_at(stream, at), SequenceStart):
        return None

    if index < 0:
        children = list(iter_children(stream, at))
        if -index > len(children):
            return None
        return children[index]

    for position, location in enumerate(iter_children(stream, at)):
        if position == index:
            return location
    return None


def _event_at(stream: EventStream, at: Location) -> Event:
    if not 0 <= at < len(stream):
        raise StructuralError(
            f"location {at} is outside the event stream ({len(stream)} events)"
        )
    return stream[at]


__all__ = [
    "Shape",
    "classify",
    "classify_root",
    "count_children",
    "find_index",
    "find_key",
    "iter_children",
]
