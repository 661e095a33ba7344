from pathlib import Path

import pytest

from xml_schema_infer.config import InferenceConfig
from xml_schema_infer.errors import MalformedInputError
from xml_schema_infer.models import DOCUMENT_NODE_NAME
from xml_schema_infer.tokens import CharData, EndTag, StartTag
from xml_schema_infer.tree_builder import TreeBuilder, infer_from_string, infer_schema
from xml_schema_infer.type_sniffer import ScalarType

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "xml"
TYPED = InferenceConfig(use_type=True)


def test_repeated_identity_is_merged_with_types():
    result = infer_from_string('<r><a>1</a><a>2</a><b x="1"/></r>', TYPED)

    a = result.find("a")
    assert a.occurrence_count == 2
    assert a.scalar_type is ScalarType.INTEGER
    assert a.repeats is True

    b = result.find("b")
    records = result.attributes_for(b)
    assert [r.name for r in records] == ["x"]
    assert records[0].scalar_type is ScalarType.INTEGER


def test_conflicting_text_widens_to_string():
    result = infer_from_string("<r><a>1</a><a>hi</a></r>", TYPED)
    a = result.find("a")
    assert a.occurrence_count == 2
    assert a.scalar_type is ScalarType.STRING


def test_same_local_name_in_different_namespaces_stays_separate():
    result = infer_from_string('<ns:r xmlns:ns="urn:x"><ns:a/><a/></ns:r>')

    qualified = result.find("{urn:x}a")
    plain = result.find("a")
    assert qualified is not None and plain is not None
    assert qualified is not plain
    assert result.namespaces["{urn:x}a"] == "ns"
    assert result.namespaces["a"] == ""


def test_identity_merged_regardless_of_nesting():
    result = infer_from_string("<r><a/><b><a/><c><a/></c></b></r>")

    assert len([n for n in result.iter_nodes() if n.name == "a"]) == 1
    a = result.find("a")
    assert a.occurrence_count == 3
    # never twice inside one parent occurrence
    assert a.repeats is False
    assert result.find("b").children["a"] is a
    assert result.find("c").children["a"] is a


def test_attribute_union_without_duplicates():
    result = infer_from_string('<r><e a="1"/><e b="x"/><e a="2" c="true"/></r>', TYPED)
    records = {r.name: r for r in result.attributes_for(result.find("e"))}

    assert list(records) == ["a", "b", "c"]
    assert records["a"].occurrence_count == 2
    assert records["a"].scalar_type is ScalarType.INTEGER
    assert records["c"].scalar_type is ScalarType.BOOLEAN


def test_types_not_inferred_without_use_type():
    result = infer_from_string('<r><a n="1">1</a></r>')
    a = result.find("a")
    assert a.text_observed is True
    assert a.inferred_type is None
    assert a.scalar_type is ScalarType.STRING
    assert result.attributes_for(a)[0].inferred_type is None


def test_whitespace_between_children_is_not_text():
    result = infer_from_string("<r>\n  <a>x</a>\n</r>")
    assert result.first_node.text_observed is False


def test_mixed_content_keeps_both_facts():
    result = infer_from_string("<r>hello<a/></r>")
    assert result.first_node.text_observed is True
    assert result.first_node.has_children is True


def test_whitespace_only_leaf_counts_as_string_text():
    result = infer_from_string("<r><a> </a></r>", TYPED)
    a = result.find("a")
    assert a.text_observed is True
    assert a.scalar_type is ScalarType.STRING


def test_recursive_document_produces_cycle():
    result = infer_from_string("<a><b><a/></b></a>")
    a = result.find("a")
    b = result.find("b")
    assert b.children["a"] is a
    assert [n.name for n in result.iter_nodes()] == ["a", "b"]
    assert result.to_dict()["tree"]["children"][0]["children"] == [{"ref": "a"}]


def test_root_and_first_node():
    result = infer_from_string("<catalog><book/></catalog>")
    assert result.root.name == DOCUMENT_NODE_NAME
    assert result.first_node.name == "catalog"
    assert list(result.root.children.values()) == [result.first_node]
    assert [n.name for n in result.one_level_down()] == ["book"]


def test_books_fixture():
    with open(FIXTURE_DIR / "books.xml", "rb") as stream:
        result = infer_schema(stream, TYPED)

    assert result.element_count == 17
    book = result.find("book")
    assert book.occurrence_count == 3
    assert book.repeats is True
    assert list(book.children) == ["author", "title", "price", "pages"]

    author = result.find("author")
    assert author.occurrence_count == 4
    assert author.repeats is True
    assert result.find("title").repeats is False
    assert result.find("price").scalar_type is ScalarType.DECIMAL
    assert result.find("pages").scalar_type is ScalarType.STRING

    records = {r.name: r for r in result.attributes_for(book)}
    assert records["id"].occurrence_count == 3
    assert records["id"].scalar_type is ScalarType.STRING
    assert records["available"].occurrence_count == 2
    assert records["available"].scalar_type is ScalarType.BOOLEAN


def test_namespaced_fixture_shares_identities():
    with open(FIXTURE_DIR / "namespaced.xml", "rb") as stream:
        result = infer_schema(stream)

    atom = "http://www.w3.org/2005/Atom"
    title = result.find(f"{{{atom}}}title")
    assert title.occurrence_count == 3
    assert result.find(f"{{{atom}}}entry").children[title.key] is title

    point = result.find("{http://www.georss.org/georss}point")
    assert point.prefix == "geo"

    link = result.find(f"{{{atom}}}link")
    attrs = {r.key: r for r in result.attributes_for(link)}
    assert set(attrs) == {"href", "{http://www.georss.org/georss}accuracy"}
    assert attrs["{http://www.georss.org/georss}accuracy"].prefix == "geo"


def test_unterminated_document_fails():
    with pytest.raises(MalformedInputError):
        infer_from_string("<r><a>")


def test_unbalanced_events_fail():
    builder = TreeBuilder()
    with pytest.raises(MalformedInputError):
        builder.build([StartTag("r"), StartTag("a"), EndTag("r")])
    with pytest.raises(MalformedInputError):
        builder.build([StartTag("r")])
    with pytest.raises(MalformedInputError):
        builder.build([EndTag("r")])


def test_document_without_elements_fails():
    with pytest.raises(MalformedInputError):
        infer_from_string("")
    with pytest.raises(MalformedInputError):
        TreeBuilder().build([CharData("  ")])


def test_progress_callback_every_interval():
    calls = []
    config = InferenceConfig(progress_interval=2)
    events = [StartTag("r")]
    for _ in range(3):
        events += [StartTag("a"), EndTag("a")]
    events.append(EndTag("r"))

    TreeBuilder(config).build(events, progress_callback=calls.append)
    assert calls == [2, 4]


def test_builder_is_reusable():
    builder = TreeBuilder()
    first = builder.build([StartTag("r"), StartTag("a"), EndTag("a"), EndTag("r")])
    second = builder.build([StartTag("s"), EndTag("s")])
    assert first.find("a").occurrence_count == 1
    assert second.find("a") is None
    assert second.element_count == 1


def test_namespace_table_keeps_prefix_as_written():
    result = infer_from_string('<r xmlns="urn:x" xmlns:p="urn:x"><a/><p:b/></r>')
    assert result.namespaces == {"{urn:x}r": "", "{urn:x}a": "", "{urn:x}b": "p"}
