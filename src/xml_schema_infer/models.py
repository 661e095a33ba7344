"""Core data structures for the inferred document shape.

These lightweight dataclasses are produced by the tree builder and consumed
read-only by the emitters and the HTTP service. They avoid framework
dependencies so they can be serialized or inspected easily.

Overview:
        * ``ElementNode`` represents one *element identity* (local name plus
            namespace URI), not one occurrence. Every occurrence of the same
            identity anywhere in the document is merged into the same node.
        * ``AttributeRecord`` represents one attribute identity observed on an
            element identity, with the union of evidence about its type.
        * ``InferenceResult`` bundles the synthetic document root, the
            document element, the global attribute table and the namespace
            prefix table produced by one run.

Typical construction (simplified)::

        from xml_schema_infer.models import ElementNode

        book = ElementNode(name="book")
        title = ElementNode(name="title")
        book.add_child(title)
        title.record_text("Dune", use_type=True)

        [n.name for n in book.iter_nodes()]   # ['book', 'title']

Design notes:
        * Children are keyed by identity key in insertion order, so emission
            is deterministic and follows document discovery order.
        * Because identities are merged document-wide, one node can be the
            child of several parents, and a recursive document (``<a><a/></a>``)
            produces a cycle. ``iter_nodes`` and every emitter therefore track
            the identities they have already seen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set

from .type_sniffer import ScalarType, classify, merge

DOCUMENT_NODE_NAME = "#document"


def identity_key(name: str, space: str = "") -> str:
    """Return the Clark-notation key (``{uri}local``) of an identity."""
    return f"{{{space}}}{name}" if space else name


@dataclass(eq=False)
class AttributeRecord:
    """One attribute identity seen on an element identity.

    Attributes:
        name: Local attribute name.
        space: Namespace URI (empty when unqualified).
        prefix: Namespace prefix the attribute was first written with.
        inferred_type: Merged scalar type, ``None`` when inference is off.
        occurrence_count: Number of element occurrences carrying it.
    """

    name: str
    space: str = ""
    prefix: str = ""
    inferred_type: Optional[ScalarType] = None
    occurrence_count: int = 0

    @property
    def key(self) -> str:
        return identity_key(self.name, self.space)

    @property
    def scalar_type(self) -> ScalarType:
        return self.inferred_type or ScalarType.STRING

    def record_value(self, value: str, use_type: bool) -> None:
        self.occurrence_count += 1
        if use_type:
            self.inferred_type = merge(self.inferred_type, classify(value))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "space": self.space,
            "prefix": self.prefix,
            "type": self.scalar_type.value,
            "inferred": self.inferred_type is not None,
            "occurrence_count": self.occurrence_count,
        }


@dataclass(eq=False)
class ElementNode:
    """A generalized element identity and everything observed about it.

    Attributes:
        name: Local element name.
        space: Namespace URI (empty when unqualified).
        prefix: Namespace prefix the element was first written with.
        children: Child identities keyed by :func:`identity_key`, in the
            order they were first seen under this identity.
        occurrence_count: Number of times the identity occurred anywhere.
        repeats: True when the identity occurred more than once inside a
            single occurrence of some parent (a repeated field).
        text_observed: True when character data was ever found directly
            inside an occurrence.
        inferred_type: Merged scalar type of that text; ``None`` when type
            inference is disabled or no text was observed.
    """

    name: str
    space: str = ""
    prefix: str = ""
    children: Dict[str, "ElementNode"] = field(default_factory=dict)
    occurrence_count: int = 0
    repeats: bool = False
    text_observed: bool = False
    inferred_type: Optional[ScalarType] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Element name cannot be empty")

    @property
    def key(self) -> str:
        return identity_key(self.name, self.space)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def scalar_type(self) -> ScalarType:
        """Inferred type, defaulting to ``STRING`` when nothing was inferred."""
        return self.inferred_type or ScalarType.STRING

    def add_child(self, child: "ElementNode") -> "ElementNode":
        """Register ``child`` under this identity (idempotent by key)."""
        return self.children.setdefault(child.key, child)

    def record_text(self, text: str, use_type: bool) -> None:
        self.text_observed = True
        if use_type:
            self.inferred_type = merge(self.inferred_type, classify(text))

    def iter_nodes(self) -> List["ElementNode"]:
        """Return this node and every reachable identity, each exactly once.

        Order is depth-first, children in insertion order.

        Example:
            >>> parent = ElementNode(name="a")
            >>> _ = parent.add_child(ElementNode(name="b"))
            >>> [n.name for n in parent.iter_nodes()]
            ['a', 'b']
        """
        return list(_walk(self, set()))

    def to_dict(self, _seen: Optional[Set[str]] = None) -> dict:
        """Convert the node (recursively) into a JSON-serializable dictionary.

        An identity already expanded elsewhere in the output is rendered as a
        reference (``{"ref": key}``) so shared and recursive identities stay
        finite.
        """
        seen = set() if _seen is None else _seen
        seen.add(self.key)
        children: List[Dict[str, Any]] = []
        for key, child in self.children.items():
            if key in seen:
                children.append({"ref": key})
            else:
                children.append(child.to_dict(seen))
        return {
            "key": self.key,
            "name": self.name,
            "space": self.space,
            "prefix": self.prefix,
            "occurrence_count": self.occurrence_count,
            "repeats": self.repeats,
            "text_observed": self.text_observed,
            "type": self.scalar_type.value,
            "inferred": self.inferred_type is not None,
            "children": children,
        }


def _walk(node: ElementNode, seen: Set[str]) -> Iterator[ElementNode]:
    if node.key in seen:
        return
    seen.add(node.key)
    yield node
    for child in node.children.values():
        yield from _walk(child, seen)


@dataclass
class InferenceResult:
    """Everything one inference run produced.

    Attributes:
        root: Synthetic document node whose only child is the document element.
        first_node: The document (root) element identity; the entry-point
            type for generated code.
        attributes: Element identity key -> attribute identity key -> record.
        namespaces: Element identity key -> namespace prefix it was first
            observed with (empty for unprefixed elements).
        element_count: Total number of start tags processed.
    """

    root: ElementNode
    first_node: ElementNode
    attributes: Dict[str, Dict[str, AttributeRecord]] = field(default_factory=dict)
    namespaces: Dict[str, str] = field(default_factory=dict)
    element_count: int = 0

    def attributes_for(self, node: ElementNode) -> List[AttributeRecord]:
        return list(self.attributes.get(node.key, {}).values())

    def find(self, key: str) -> Optional[ElementNode]:
        """Look up an element identity by key (``name`` or ``{uri}name``)."""
        for node in self.iter_nodes():
            if node.key == key:
                return node
        return None

    def iter_nodes(self) -> List[ElementNode]:
        """All distinct element identities, excluding the synthetic root."""
        return [n for n in self.root.iter_nodes() if n is not self.root]

    def one_level_down(self) -> List[ElementNode]:
        """Child identities of the document element.

        These are the record-level elements a streaming decoder can pick off
        one at a time without holding the whole document.
        """
        return [
            child
            for top in self.root.children.values()
            for child in top.children.values()
        ]

    def to_dict(self) -> dict:
        return {
            "first_node": self.first_node.key,
            "element_count": self.element_count,
            "tree": self.first_node.to_dict(),
            "attributes": {
                key: [record.to_dict() for record in records.values()]
                for key, records in self.attributes.items()
            },
            "namespaces": dict(self.namespaces),
        }
