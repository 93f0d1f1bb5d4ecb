"""Public query operations over raw YAML documents.

Every call parses its input into a fresh ``EventStream``, navigates it and
re-emits the selected node. Nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

import yaml
from yaml.resolver import Resolver

from .emitter import extract_subtree
from .errors import InvalidOperation
from .navigator import Shape, classify, classify_root, count_children, find_index
from .navigator import find_key, iter_children
from .parser import Document, parse
from .runtime.logging import get_logger
from .stream import EventStream, Location, Scalar

PathSegment = str | int

_NULL_TAG = "tag:yaml.org,2002:null"
_RESOLVER = Resolver()


def get_field(document: Document, key: str) -> str | None:
    """Return the value of ``key`` in the root mapping as a YAML fragment.

    Returns ``None`` when the key is absent or the root is not a mapping.
    """

    stream = parse(document)
    location = find_key(stream, key)
    _log_lookup("get_field", key, location)
    if location is None:
        return None
    return extract_subtree(stream, location)


def get_field_text(document: Document, key: str) -> str | None:
    """Like ``get_field`` but scalars are returned as plain text."""

    stream = parse(document)
    location = find_key(stream, key)
    _log_lookup("get_field_text", key, location)
    if location is None:
        return None
    return _as_text(stream, location)


def get_element(document: Document, index: int) -> str | None:
    """Return element ``index`` of the root sequence as a YAML fragment."""

    stream = parse(document)
    location = find_index(stream, index)
    _log_lookup("get_element", index, location)
    if location is None:
        return None
    return extract_subtree(stream, location)


def get_element_text(document: Document, index: int) -> str | None:
    stream = parse(document)
    location = find_index(stream, index)
    _log_lookup("get_element_text", index, location)
    if location is None:
        return None
    return _as_text(stream, location)


def get_path(document: Document, path: str | Sequence[PathSegment]) -> str | None:
    """Resolve a path through nested mappings and sequences.

    ``path`` is either dot-separated (``"config.layers.0"``) or a sequence of
    segments. Mapping segments match keys exactly; sequence segments must be
    integers, negative ones counting from the end. An empty path selects the
    whole document. Returns ``None`` if any segment is unavailable.
    """

    stream = parse(document)
    location = _walk(stream, _split_path(path))
    _log_lookup("get_path", path, location)
    if location is None:
        return None
    return extract_subtree(stream, location)


def get_path_text(document: Document, path: str | Sequence[PathSegment]) -> str | None:
    stream = parse(document)
    location = _walk(stream, _split_path(path))
    _log_lookup("get_path_text", path, location)
    if location is None:
        return None
    return _as_text(stream, location)


def type_of(document: Document) -> Shape:
    """Return the shape of the document root."""

    return classify_root(parse(document))


def length_of(document: Document) -> int:
    """Count the elements of the root sequence.

    Raises ``InvalidOperation`` when the root is not a sequence.
    """

    stream = parse(document)
    shape = classify_root(stream)
    if shape != "sequence":
        raise InvalidOperation(f"cannot get sequence length of a {shape}")
    return count_children(stream)


def elements_of(document: Document) -> Iterator[str]:
    """Yield one fragment per element of the root sequence, in order.

    The document is parsed and checked eagerly; fragments are produced
    lazily. The iterator is single-pass: call again to restart.
    """

    stream = _sequence_stream(document, "elements_of")
    return _iter_fragments(stream)


def elements_text_of(document: Document) -> Iterator[str | None]:
    """Like ``elements_of`` but scalars are yielded as plain text."""

    stream = _sequence_stream(document, "elements_text_of")
    return (_as_text(stream, location) for location in iter_children(stream))


def validate(document: Document) -> None:
    """Raise ``ParseError`` unless ``document`` is well-formed YAML."""

    parse(document)


def _sequence_stream(document: Document, operation: str) -> EventStream:
    stream = parse(document)
    shape = classify_root(stream)
    if shape != "sequence":
        raise InvalidOperation(f"cannot call {operation} on a {shape}")
    return stream


def _iter_fragments(stream: EventStream) -> Iterator[str]:
    for location in iter_children(stream):
        yield extract_subtree(stream, location)


def _split_path(path: str | Sequence[PathSegment]) -> list[PathSegment]:
    if isinstance(path, str):
        return path.split(".") if path else []
    return list(path)


def _walk(stream: EventStream, segments: list[PathSegment]) -> Location | None:
    location: Location = stream.root_location
    for segment in segments:
        shape = classify(stream, location)
        if shape == "mapping":
            found = find_key(stream, str(segment), location)
        elif shape == "sequence":
            index = _parse_index(segment)
            if index is None:
                return None
            found = find_index(stream, index, location)
        else:
            return None
        if found is None:
            return None
        location = found
    return location


def _parse_index(segment: PathSegment) -> int | None:
    if isinstance(segment, int):
        return segment
    text = segment.strip()
    digits = text[1:] if text.startswith("-") else text
    if not digits.isdecimal():
        return None
    return int(text)


def _as_text(stream: EventStream, location: Location) -> str | None:
    event = stream[location]
    if not isinstance(event, Scalar):
        return extract_subtree(stream, location)
    tag = event.tag
    if tag is None or tag == "!":
        tag = _RESOLVER.resolve(yaml.ScalarNode, event.value, event.implicit)
    if tag == _NULL_TAG:
        return None
    return event.value


def _log_lookup(action: str, target: object, location: Location | None) -> None:
    get_logger().debug(
        "%s %r (%s)",
        action,
        target,
        "missing" if location is None else f"found at {location}",
        extra={"yamlq_action_color": "yellow" if location is None else "green"},
    )


__all__ = [
    "PathSegment",
    "elements_of",
    "elements_text_of",
    "get_element",
    "get_element_text",
    "get_field",
    "get_field_text",
    "get_path",
    "get_path_text",
    "length_of",
    "type_of",
    "validate",
]
