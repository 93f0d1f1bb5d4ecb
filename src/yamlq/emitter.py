"""Re-emit a span of an ``EventStream`` as a standalone YAML document."""

from __future__ import annotations

import io
from collections.abc import Iterable
from typing import Protocol

import yaml
from yaml.emitter import Emitter, EmitterError

from .config import YAMLQ_CONFIG
from .errors import EmitError, StructuralError
from .runtime.logging import get_logger
from .stream import (
    Alias,
    DocumentEnd,
    DocumentStart,
    Event,
    EventStream,
    Location,
    MappingEnd,
    MappingStart,
    Scalar,
    SequenceEnd,
    SequenceStart,
    StreamEnd,
    StreamStart,
)


class TextWriter(Protocol):
    def write(self, data: str, /) -> object: ...


class _OutputBuffer:
    """Writer adapter that counts characters and classifies write failures."""

    def __init__(self, target: TextWriter) -> None:
        self._target = target
        self.written = 0

    def write(self, data: str) -> None:
        try:
            self._target.write(data)
        except MemoryError:
            raise
        except (OSError, ValueError, TypeError) as exc:
            raise EmitError("writer", str(exc) or type(exc).__name__) from exc
        self.written += len(data)

    def flush(self) -> None:
        flush = getattr(self._target, "flush", None)
        if flush is not None:
            flush()


class _FragmentEmitter(Emitter):
    """Emitter that records where the document wrapper ends.

    ``preamble_length`` is the number of characters written before the root
    node (directives and the document start marker). ``content_length`` is
    the number written once the root node is complete, before the document
    end handling adds its trailing line break and markers.
    """

    def __init__(self, stream: _OutputBuffer, **kwargs) -> None:
        super().__init__(stream, **kwargs)
        self._buffer = stream
        self.preamble_length: int | None = None
        self.content_length: int | None = None

    def expect_document_root(self) -> None:
        self.preamble_length = self._buffer.written
        super().expect_document_root()

    def expect_document_end(self) -> None:
        if isinstance(self.event, yaml.DocumentEndEvent):
            self.content_length = self._buffer.written
        super().expect_document_end()


def subtree_span(stream: EventStream, at: Location) -> tuple[Location, Location]:
    """Return the inclusive ``(start, end)`` span of the node rooted at ``at``.

    A scalar or alias spans one event; a container spans its start event up
    to and including the matching end event.
    """

    if not 0 <= at < len(stream):
        raise StructuralError(
            f"location {at} is outside the event stream ({len(stream)} events)"
        )
    event = stream[at]
    if isinstance(event, (Scalar, Alias)):
        return at, at
    if not isinstance(event, (SequenceStart, MappingStart)):
        raise StructuralError(f"location {at} points at {event.kind}, not a node start")

    depth = 1
    for index in range(at + 1, len(stream)):
        current = stream[index]
        if isinstance(current, (SequenceStart, MappingStart)):
            depth += 1
        elif isinstance(current, (SequenceEnd, MappingEnd)):
            depth -= 1
            if depth == 0:
                return at, index
    raise StructuralError(f"container at location {at} is never closed")


def to_yaml_event(event: Event) -> yaml.Event:
    """Re-instantiate ``event`` as a PyYAML event."""

    match event:
        case StreamStart():
            return yaml.StreamStartEvent()
        case StreamEnd():
            return yaml.StreamEndEvent()
        case DocumentStart():
            return yaml.DocumentStartEvent(
                explicit=event.explicit, version=event.version, tags=event.tags
            )
        case DocumentEnd():
            return yaml.DocumentEndEvent(explicit=event.explicit)
        case SequenceStart():
            return yaml.SequenceStartEvent(
                event.anchor, event.tag, event.implicit, flow_style=event.flow_style
            )
        case SequenceEnd():
            return yaml.SequenceEndEvent()
        case MappingStart():
            return yaml.MappingStartEvent(
                event.anchor, event.tag, event.implicit, flow_style=event.flow_style
            )
        case MappingEnd():
            return yaml.MappingEndEvent()
        case Scalar():
            return yaml.ScalarEvent(
                event.anchor, event.tag, event.implicit, event.value, style=event.style
            )
        case Alias():
            return yaml.AliasEvent(event.anchor)
    raise TypeError(f"unsupported event {type(event).__name__}")


def emit_events(events: Iterable[yaml.Event], writer: TextWriter) -> tuple[int, int]:
    """Serialize PyYAML ``events`` to ``writer``.

    Returns ``(preamble_length, content_length)`` as recorded while
    emitting the (single) document. Failures are raised as ``EmitError``.
    """

    buffer = _OutputBuffer(writer)
    emitter = _FragmentEmitter(
        buffer,
        indent=YAMLQ_CONFIG.emit_indent,
        width=YAMLQ_CONFIG.emit_width,
        allow_unicode=YAMLQ_CONFIG.allow_unicode,
    )
    try:
        for event in events:
            emitter.emit(event)
    except EmitterError as exc:
        raise EmitError("protocol", str(exc)) from exc
    except MemoryError as exc:
        raise EmitError("out_of_memory", "output buffer could not grow") from exc
    finally:
        emitter.dispose()

    preamble = emitter.preamble_length or 0
    content = emitter.content_length
    return preamble, buffer.written if content is None else content


def wrapper_start() -> list[yaml.Event]:
    return [
        yaml.StreamStartEvent(),
        yaml.DocumentStartEvent(explicit=True, version=YAMLQ_CONFIG.emit_version),
    ]


def wrapper_end() -> list[yaml.Event]:
    return [yaml.DocumentEndEvent(explicit=False), yaml.StreamEndEvent()]


def extract_subtree(stream: EventStream, at: Location) -> str:
    """Serialize the node at ``at`` into a standalone YAML fragment.

    The node is wrapped in fresh stream/document events carrying the
    configured version directive so the emitter produces a complete
    document; the wrapper's preamble is then cut off so callers only see the
    node itself. An empty plain scalar has no text of its own and is returned
    with its wrapper.
    """

    start, end = subtree_span(stream, at)
    events = [
        *wrapper_start(),
        *(to_yaml_event(stream[index]) for index in range(start, end + 1)),
        *wrapper_end(),
    ]

    output = io.StringIO()
    try:
        preamble, content = emit_events(events, output)
        text = output.getvalue()
    finally:
        output.close()

    body = text[preamble:content]
    if body[:1] in (" ", "\n"):
        body = body[1:]
    if not body:
        get_logger().debug("extract: empty node at %d kept with wrapper", at)
        return text
    if not body.endswith("\n"):
        body += "\n"
    get_logger().debug("extract: events %d..%d -> %d chars", start, end, len(body))
    return body


__all__ = [
    "TextWriter",
    "emit_events",
    "extract_subtree",
    "subtree_span",
    "to_yaml_event",
    "wrapper_end",
    "wrapper_start",
]
