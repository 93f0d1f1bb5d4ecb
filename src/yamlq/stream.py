"""Flat event model for parsed YAML documents."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Annotated, Literal, TypeAlias, overload

from pydantic import BaseModel, ConfigDict, Field

from .errors import StructuralError

ScalarStyle: TypeAlias = Literal["", "'", '"', "|", ">"] | None


class _EventBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    line: int | None = None
    column: int | None = None


class StreamStart(_EventBase):
    kind: Literal["stream_start"] = "stream_start"


class StreamEnd(_EventBase):
    kind: Literal["stream_end"] = "stream_end"


class DocumentStart(_EventBase):
    kind: Literal["document_start"] = "document_start"
    explicit: bool = False
    version: tuple[int, int] | None = None
    tags: dict[str, str] | None = None


class DocumentEnd(_EventBase):
    kind: Literal["document_end"] = "document_end"
    explicit: bool = False


class SequenceStart(_EventBase):
    kind: Literal["sequence_start"] = "sequence_start"
    anchor: str | None = None
    tag: str | None = None
    implicit: bool = True
    flow_style: bool | None = None


class SequenceEnd(_EventBase):
    kind: Literal["sequence_end"] = "sequence_end"


class MappingStart(_EventBase):
    kind: Literal["mapping_start"] = "mapping_start"
    anchor: str | None = None
    tag: str | None = None
    implicit: bool = True
    flow_style: bool | None = None


class MappingEnd(_EventBase):
    kind: Literal["mapping_end"] = "mapping_end"


class Scalar(_EventBase):
    kind: Literal["scalar"] = "scalar"
    value: str
    anchor: str | None = None
    tag: str | None = None
    implicit: tuple[bool, bool] = (True, False)
    style: ScalarStyle = None

    @property
    def length(self) -> int:
        return len(self.value)


class Alias(_EventBase):
    kind: Literal["alias"] = "alias"
    anchor: str


Event: TypeAlias = Annotated[
    StreamStart
    | StreamEnd
    | DocumentStart
    | DocumentEnd
    | SequenceStart
    | SequenceEnd
    | MappingStart
    | MappingEnd
    | Scalar
    | Alias,
    Field(discriminator="kind"),
]

Location: TypeAlias = int

_MATCHING_END: dict[type, type] = {SequenceStart: SequenceEnd, MappingStart: MappingEnd}


class EventStream(Sequence[Event]):
    """Immutable, indexable record of every event of one parsed input.

    Events are stored in document order in a single tuple; a ``Location``
    is a plain index into it. Construction checks that the stream opens with
    ``StreamStart`` (followed by ``DocumentStart`` when the input holds a
    document), that every container end closes a container of the same
    kind, and that the stream is terminated by ``StreamEnd``.
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[Event]) -> None:
        self._events: tuple[Event, ...] = tuple(events)
        _check_nesting(self._events)

    @overload
    def __getitem__(self, index: int) -> Event: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Event, ...]: ...

    def __getitem__(self, index: int | slice) -> Event | tuple[Event, ...]:
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __repr__(self) -> str:
        return f"EventStream({len(self._events)} events)"

    @property
    def has_document(self) -> bool:
        return len(self._events) > 1 and isinstance(self._events[1], DocumentStart)

    @property
    def root_location(self) -> Location:
        """Location of the root node, right after ``DocumentStart``."""

        if not self.has_document:
            raise StructuralError("event stream holds no document")
        return 2

    def depth_at(self, index: Location) -> int:
        """Number of containers open just before the event at ``index``."""

        if not 0 <= index < len(self._events):
            raise StructuralError(
                f"location {index} is outside the event stream ({len(self._events)} events)"
            )
        depth = 0
        for event in self._events[:index]:
            if isinstance(event, (SequenceStart, MappingStart)):
                depth += 1
            elif isinstance(event, (SequenceEnd, MappingEnd)):
                depth -= 1
        return depth


def _check_nesting(events: Sequence[Event]) -> None:
    if not events or not isinstance(events[0], StreamStart):
        raise StructuralError("event stream must begin with stream_start")
    if not isinstance(events[-1], StreamEnd):
        raise StructuralError("event stream must end with stream_end")

    open_kinds: list[type] = []
    in_document = False
    root_seen = False
    for index, event in enumerate(events[1:-1], start=1):
        if isinstance(event, (StreamStart, StreamEnd)):
            raise StructuralError(f"unexpected {event.kind} at location {index}")
        if isinstance(event, DocumentStart):
            if in_document or index != 1:
                raise StructuralError(f"unexpected document_start at location {index}")
            in_document = True
            continue
        if not in_document:
            raise StructuralError(
                f"{event.kind} at location {index} is outside of a document"
            )
        if isinstance(event, DocumentEnd):
            if open_kinds:
                raise StructuralError(
                    f"document_end at location {index} leaves "
                    f"{len(open_kinds)} container(s) open"
                )
            if not root_seen:
                raise StructuralError("document has no root node")
            in_document = False
            continue
        if isinstance(event, (SequenceStart, MappingStart)):
            if not open_kinds and root_seen:
                raise StructuralError(f"second root node at location {index}")
            root_seen = True
            open_kinds.append(_MATCHING_END[type(event)])
            continue
        if isinstance(event, (SequenceEnd, MappingEnd)):
            if not open_kinds or open_kinds[-1] is not type(event):
                raise StructuralError(
                    f"{event.kind} at location {index} does not close an open container"
                )
            open_kinds.pop()
            continue
        if not open_kinds:
            if root_seen:
                raise StructuralError(f"second root node at location {index}")
            root_seen = True

    if in_document:
        raise StructuralError("document is not terminated by document_end")


__all__ = [
    "Alias",
    "DocumentEnd",
    "DocumentStart",
    "Event",
    "EventStream",
    "Location",
    "MappingEnd",
    "MappingStart",
    "Scalar",
    "ScalarStyle",
    "SequenceEnd",
    "SequenceStart",
    "StreamEnd",
    "StreamStart",
]
