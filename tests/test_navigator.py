"""Tests for depth-tracking navigation over event streams."""

import pytest

from yamlq import InvalidOperation, StructuralError, parse
from yamlq.navigator import (
    classify,
    classify_root,
    count_children,
    find_index,
    find_key,
    iter_children,
)
from yamlq.stream import (
    Alias,
    DocumentEnd,
    DocumentStart,
    EventStream,
    MappingEnd,
    MappingStart,
    Scalar,
    StreamEnd,
    StreamStart,
)


@pytest.mark.parametrize(
    ("document", "shape"),
    [
        ("plain", "scalar"),
        ("'quoted'", "scalar"),
        ("---\n", "scalar"),
        ("[1, 2]", "sequence"),
        ("- a\n- b\n", "sequence"),
        ("{}", "mapping"),
        ("a: 1\n", "mapping"),
    ],
)
def test_classify_root(document: str, shape: str) -> None:
    assert classify_root(parse(document)) == shape


def test_classify_root_of_empty_input_is_structural_error() -> None:
    with pytest.raises(StructuralError):
        classify_root(parse(""))


def test_classify_rejects_non_node_location() -> None:
    stream = parse("{a: 1}")

    with pytest.raises(StructuralError, match="mapping_end"):
        classify(stream, 5)
    with pytest.raises(StructuralError, match="outside"):
        classify(stream, 99)


def test_find_key_returns_value_location() -> None:
    stream = parse("{a: 1, b: two}")

    location = find_key(stream, "b")
    assert location is not None
    value = stream[location]
    assert isinstance(value, Scalar)
    assert value.value == "two"


def test_find_key_requires_exact_match() -> None:
    stream = parse("{ab: 1, a: 2}")

    location = find_key(stream, "a")
    assert location is not None
    assert stream[location].value == "2"
    assert find_key(stream, "abc") is None


def test_find_key_skips_nested_containers() -> None:
    stream = parse(
        "outer:\n  target: nested\n  list: [target, x]\nitems: [1, 2]\ntarget: top\n"
    )

    location = find_key(stream, "target")
    assert location is not None
    assert stream[location].value == "top"


def test_find_key_does_not_match_values() -> None:
    stream = parse("{a: b, c: d}")

    assert find_key(stream, "b") is None
    assert find_key(stream, "d") is None


def test_find_key_steps_over_complex_keys() -> None:
    stream = parse("? [k, v]\n: first\nk: second\n")

    location = find_key(stream, "k")
    assert location is not None
    assert stream[location].value == "second"


def test_find_key_returns_container_start() -> None:
    stream = parse("{a: {b: 1}, c: [1]}")

    assert isinstance(stream[find_key(stream, "a")], MappingStart)


def test_find_key_on_non_mapping_is_absent() -> None:
    assert find_key(parse("[a, b]"), "a") is None
    assert find_key(parse("a"), "a") is None


def test_find_key_in_nested_mapping() -> None:
    stream = parse("{outer: {inner: 5}}")

    outer = find_key(stream, "outer")
    assert outer is not None
    inner = find_key(stream, "inner", outer)
    assert inner is not None
    assert stream[inner].value == "5"
    assert find_key(stream, "inner") is None


def test_find_key_without_value_is_structural_error() -> None:
    stream = EventStream(
        [
            StreamStart(),
            DocumentStart(),
            MappingStart(),
            Scalar(value="a"),
            Scalar(value="1"),
            Scalar(value="last"),
            MappingEnd(),
            DocumentEnd(),
            StreamEnd(),
        ]
    )

    assert stream[find_key(stream, "a")].value == "1"
    with pytest.raises(StructuralError, match="has no value"):
        find_key(stream, "last")


def test_count_children_counts_only_immediate_elements() -> None:
    assert count_children(parse("[1, 2, [3, 4], 5]")) == 4
    assert count_children(parse("[{a: [1, 2, 3]}, b]")) == 2
    assert count_children(parse("[]")) == 0


def test_count_children_includes_aliases() -> None:
    assert count_children(parse("- &x 1\n- *x\n")) == 2


def test_count_children_requires_sequence() -> None:
    with pytest.raises(InvalidOperation, match="mapping"):
        count_children(parse("{a: 1}"))


def test_iter_children_yields_in_document_order() -> None:
    stream = parse("[x, [y], z]")

    kinds = [stream[location].kind for location in iter_children(stream)]
    assert kinds == ["scalar", "sequence_start", "scalar"]


def test_find_index_supports_negative_indexes() -> None:
    stream = parse("[a, [b, c], d]")

    assert stream[find_index(stream, 0)].value == "a"
    assert stream[find_index(stream, -1)].value == "d"
    assert stream[find_index(stream, -2)].kind == "sequence_start"
    assert find_index(stream, 3) is None
    assert find_index(stream, -4) is None


def test_find_index_on_non_sequence_is_absent() -> None:
    assert find_index(parse("{a: 1}"), 0) is None


def test_alias_root_is_not_classifiable() -> None:
    stream = EventStream(
        [StreamStart(), DocumentStart(), Alias(anchor="x"), DocumentEnd(), StreamEnd()]
    )

    with pytest.raises(StructuralError, match="alias"):
        classify_root(stream)
