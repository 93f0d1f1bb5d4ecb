"""Build an ``EventStream`` from raw YAML text."""

from __future__ import annotations

import yaml
from yaml.composer import ComposerError
from yaml.error import MarkedYAMLError
from yaml.parser import ParserError
from yaml.reader import ReaderError
from yaml.scanner import ScannerError

from .errors import ParseError, ParseErrorKind
from .runtime.logging import get_logger
from .stream import (
    Alias,
    DocumentEnd,
    DocumentStart,
    Event,
    EventStream,
    MappingEnd,
    MappingStart,
    Scalar,
    SequenceEnd,
    SequenceStart,
    StreamEnd,
    StreamStart,
)

Document = str | bytes


def parse(document: Document) -> EventStream:
    """Parse ``document`` into an event stream.

    The first failure reported by the YAML parser aborts the parse; no
    partial stream is ever returned. Inputs holding more than one document
    are rejected with a ``composition`` error.
    """

    if not isinstance(document, (str, bytes)):
        raise TypeError(
            f"yaml document must be str or bytes, got {type(document).__name__}"
        )

    events: list[Event] = []
    documents = 0
    try:
        for raw in yaml.parse(document, Loader=yaml.SafeLoader):
            if isinstance(raw, yaml.DocumentStartEvent):
                documents += 1
                if documents > 1:
                    raise ParseError(
                        "composition",
                        "but found another document",
                        "expected a single document in the stream",
                        line=_mark_line(raw.start_mark),
                        column=_mark_column(raw.start_mark),
                    )
            events.append(_convert(raw))
    except (ReaderError, ScannerError, ParserError, ComposerError) as exc:
        raise _classify(exc) from exc

    get_logger().debug("parse: %d events", len(events))
    return EventStream(events)


def _classify(exc: ReaderError | MarkedYAMLError) -> ParseError:
    if isinstance(exc, ReaderError):
        return ParseError(
            "reader",
            f"{exc.reason} (character {exc.character!r})",
            f"in {exc.name!r}, position {exc.position}",
        )
    kind: ParseErrorKind
    if isinstance(exc, ScannerError):
        kind = "scanner"
    elif isinstance(exc, ParserError):
        kind = "syntax"
    else:
        kind = "composition"

    mark = exc.problem_mark or exc.context_mark
    return ParseError(
        kind,
        exc.problem or str(exc),
        exc.context,
        line=_mark_line(mark),
        column=_mark_column(mark),
    )


def _mark_line(mark: yaml.Mark | None) -> int | None:
    return None if mark is None else mark.line


def _mark_column(mark: yaml.Mark | None) -> int | None:
    return None if mark is None else mark.column


def _convert(raw: yaml.Event) -> Event:
    position = {
        "line": _mark_line(raw.start_mark),
        "column": _mark_column(raw.start_mark),
    }
    match raw:
        case yaml.StreamStartEvent():
            return StreamStart(**position)
        case yaml.StreamEndEvent():
            return StreamEnd(**position)
        case yaml.DocumentStartEvent():
            return DocumentStart(
                explicit=bool(raw.explicit),
                version=raw.version,
                tags=raw.tags,
                **position,
            )
        case yaml.DocumentEndEvent():
            return DocumentEnd(explicit=bool(raw.explicit), **position)
        case yaml.SequenceStartEvent():
            return SequenceStart(
                anchor=raw.anchor,
                tag=raw.tag,
                implicit=bool(raw.implicit),
                flow_style=raw.flow_style,
                **position,
            )
        case yaml.SequenceEndEvent():
            return SequenceEnd(**position)
        case yaml.MappingStartEvent():
            return MappingStart(
                anchor=raw.anchor,
                tag=raw.tag,
                implicit=bool(raw.implicit),
                flow_style=raw.flow_style,
                **position,
            )
        case yaml.MappingEndEvent():
            return MappingEnd(**position)
        case yaml.ScalarEvent():
            return Scalar(
                value=raw.value,
                anchor=raw.anchor,
                tag=raw.tag,
                implicit=(bool(raw.implicit[0]), bool(raw.implicit[1])),
                style=raw.style,
                **position,
            )
        case yaml.AliasEvent():
            return Alias(anchor=raw.anchor, **position)
    raise TypeError(f"unsupported yaml event {type(raw).__name__}")


__all__ = ["Document", "parse"]
