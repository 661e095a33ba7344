import io

import pytest

from xml_schema_infer.errors import MalformedInputError
from xml_schema_infer.tokens import CharData, EndTag, StartTag, iter_events


def _events(data, chunk_size=64 * 1024):
    return list(iter_events(io.BytesIO(data), chunk_size=chunk_size))


def test_events_in_document_order():
    events = _events(b"<r><a>hi</a><b/></r>")
    assert events == [
        StartTag("r"),
        StartTag("a"),
        CharData("hi"),
        EndTag("a"),
        StartTag("b"),
        EndTag("b"),
        EndTag("r"),
    ]


def test_namespaces_and_prefixes_are_reported():
    events = _events(b'<r xmlns="urn:d" xmlns:p="urn:p"><p:a p:x="1" y="2"/></r>')
    root, child = events[0], events[1]

    assert (root.name, root.space, root.prefix) == ("r", "urn:d", "")
    assert (child.name, child.space, child.prefix) == ("a", "urn:p", "p")

    attrs = {(a.name, a.space, a.prefix, a.value) for a in child.attributes}
    assert attrs == {("x", "urn:p", "p", "1"), ("y", "", "", "2")}


def test_namespace_declarations_are_not_attributes():
    events = _events(b'<r xmlns:p="urn:p"/>')
    assert events[0].attributes == ()


def test_prefix_scope_ends_with_element():
    events = _events(b'<r><x:a xmlns:x="urn:1"/><y:a xmlns:y="urn:1"/></r>')
    starts = [e for e in events if isinstance(e, StartTag)]
    assert [s.prefix for s in starts] == ["", "x", "y"]


def test_tiny_chunks_produce_same_structure():
    data = b"<catalog><book id='1'><title>Dune</title></book></catalog>"
    whole = [e for e in _events(data) if not isinstance(e, CharData)]
    chunked_events = _events(data, chunk_size=3)
    chunked = [e for e in chunked_events if not isinstance(e, CharData)]

    assert chunked == whole
    text = "".join(e.content for e in chunked_events if isinstance(e, CharData))
    assert text == "Dune"


def test_mismatched_tag_reports_position():
    with pytest.raises(MalformedInputError) as excinfo:
        _events(b"<r>\n<a></r>")
    assert excinfo.value.line == 2
    assert "line 2" in str(excinfo.value)


def test_truncated_document_is_malformed():
    with pytest.raises(MalformedInputError):
        _events(b"<r><a>text")


def test_prefix_is_taken_from_the_tag_as_written():
    events = _events(b'<r xmlns="urn:x" xmlns:p="urn:x"><a/><p:b p:c="1" d="2"/></r>')
    starts = [e for e in events if isinstance(e, StartTag)]

    assert [(s.name, s.space, s.prefix) for s in starts] == [
        ("r", "urn:x", ""),
        ("a", "urn:x", ""),
        ("b", "urn:x", "p"),
    ]
    attrs = {(a.name, a.space, a.prefix) for a in starts[2].attributes}
    assert attrs == {("c", "urn:x", "p"), ("d", "", "")}
