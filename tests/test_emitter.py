"""Tests for re-emitting event spans as standalone fragments."""

import io

import pytest
import yaml

from yamlq import EmitError, StructuralError, classify_root, parse
from yamlq.emitter import emit_events, extract_subtree, subtree_span, wrapper_start
from yamlq.navigator import find_key
from yamlq.stream import Scalar
from yamlq.testing import yamlq_test_env


def test_subtree_span_of_scalar_is_single_event() -> None:
    stream = parse("{a: 1}")

    assert subtree_span(stream, 4) == (4, 4)


def test_subtree_span_covers_nested_containers() -> None:
    stream = parse("{a: [1, {b: 2}], c: 3}")

    location = find_key(stream, "a")
    start, end = subtree_span(stream, location)
    assert start == location
    assert stream[end].kind == "sequence_end"
    assert stream[end + 1].value == "c"


def test_subtree_span_rejects_non_node_locations() -> None:
    stream = parse("{a: 1}")

    with pytest.raises(StructuralError, match="not a node start"):
        subtree_span(stream, 5)
    with pytest.raises(StructuralError, match="outside"):
        subtree_span(stream, len(stream))
    with pytest.raises(StructuralError, match="outside"):
        subtree_span(stream, -1)


def test_extract_scalar_fragment(yamlq_config) -> None:
    stream = parse("{a: 1, b: hello world}")

    assert extract_subtree(stream, find_key(stream, "a")) == "1\n"
    assert extract_subtree(stream, find_key(stream, "b")) == "hello world\n"


def test_extract_keeps_flow_and_block_styles(yamlq_config) -> None:
    stream = parse("flow: [1, 2]\nblock:\n  x: 1\n  y: [a]\n")

    assert extract_subtree(stream, find_key(stream, "flow")) == "[1, 2]\n"
    assert extract_subtree(stream, find_key(stream, "block")) == "x: 1\ny: [a]\n"


def test_extract_keeps_quoting_and_tags(yamlq_config) -> None:
    stream = parse("{a: 'x: y', b: !!str 12}")

    assert extract_subtree(stream, find_key(stream, "a")) == "'x: y'\n"
    tagged = extract_subtree(stream, find_key(stream, "b"))
    assert tagged.startswith("!!str ")
    reparsed = parse(tagged)
    assert reparsed[2].value == "12"
    assert reparsed[2].tag == "tag:yaml.org,2002:str"


def test_extract_empty_container(yamlq_config) -> None:
    stream = parse("{a: {}, b: []}")

    assert extract_subtree(stream, find_key(stream, "a")) == "{}\n"
    assert extract_subtree(stream, find_key(stream, "b")) == "[]\n"


def test_extract_empty_scalar_keeps_wrapper(yamlq_config) -> None:
    stream = parse("a:\nb: 1\n")

    fragment = extract_subtree(stream, find_key(stream, "a"))
    reparsed = parse(fragment)
    assert classify_root(reparsed) == "scalar"
    assert reparsed[2].value == ""


def test_extract_root_round_trips_shape_and_scalars(yamlq_config) -> None:
    source = "name: demo\nlayers:\n  - {size: 3, act: relu}\n  - [1, 2.5, 'x']\n"
    stream = parse(source)

    fragment = extract_subtree(stream, stream.root_location)
    reparsed = parse(fragment)

    def scalars(s):
        return [e.value for e in s if isinstance(e, Scalar)]

    assert classify_root(reparsed) == classify_root(stream) == "mapping"
    assert scalars(reparsed) == scalars(stream)


def test_fragment_is_independent_of_version_directive() -> None:
    stream = parse("{a: [1, 2], b: text}")
    fragments = []
    for version in ((1, 1), (1, 2), None):
        with yamlq_test_env(emit_version=version):
            fragments.append(
                (
                    extract_subtree(stream, find_key(stream, "a")),
                    extract_subtree(stream, find_key(stream, "b")),
                )
            )

    assert fragments[0] == fragments[1] == fragments[2] == ("[1, 2]\n", "text\n")


def test_emit_events_reports_preamble_length(yamlq_config) -> None:
    output = io.StringIO()
    events = [
        *wrapper_start(),
        yaml.ScalarEvent(None, None, (True, False), "x"),
        yaml.DocumentEndEvent(explicit=False),
        yaml.StreamEndEvent(),
    ]

    preamble, content = emit_events(events, output)

    text = output.getvalue()
    assert text.startswith("%YAML 1.1")
    assert text[:preamble].endswith("---")
    assert text[preamble:content] == " x"


def test_emit_events_protocol_error(yamlq_config) -> None:
    events = [yaml.StreamStartEvent(), yaml.MappingEndEvent()]

    with pytest.raises(EmitError) as excinfo:
        emit_events(events, io.StringIO())

    assert excinfo.value.kind == "protocol"


class _BrokenWriter:
    def write(self, data: str) -> None:
        raise OSError("disk full")


def test_emit_events_writer_error(yamlq_config) -> None:
    events = [
        *wrapper_start(),
        yaml.SequenceStartEvent(None, None, True, flow_style=True),
        yaml.SequenceEndEvent(),
        yaml.DocumentEndEvent(explicit=False),
        yaml.StreamEndEvent(),
    ]

    with pytest.raises(EmitError, match="disk full") as excinfo:
        emit_events(events, _BrokenWriter())

    assert excinfo.value.kind == "writer"


class _ExhaustedWriter:
    def write(self, data: str) -> None:
        raise MemoryError


def test_emit_events_out_of_memory(yamlq_config) -> None:
    events = [*wrapper_start(), yaml.ScalarEvent(None, None, (True, False), "x")]

    with pytest.raises(EmitError) as excinfo:
        emit_events(events, _ExhaustedWriter())

    assert excinfo.value.kind == "out_of_memory"
    assert isinstance(excinfo.value.__cause__, MemoryError)
