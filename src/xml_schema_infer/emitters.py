"""Tree visitors that render the inferred model as source code.

Every emitter is a read-only traversal of a finished
:class:`~xml_schema_infer.models.InferenceResult`. The traversal lives in
:class:`TreeVisitor`: an iterative depth-first worklist with a seen-set that
is local to each call, so an identity reachable from several parents (or
from itself, in recursive documents) is rendered exactly once and the same
visitor can be reused or run concurrently on different trees.

Adding an output format means subclassing :class:`TreeVisitor` and
implementing :meth:`TreeVisitor.render_node`; the tree builder is not
involved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .config import InferenceConfig
from .models import ElementNode, InferenceResult
from .naming import TypeNamer
from .rendering import render_template
from .type_sniffer import ScalarType

GO_SCALAR_TYPES: Dict[ScalarType, str] = {
    ScalarType.BOOLEAN: "bool",
    ScalarType.INTEGER: "int64",
    ScalarType.DECIMAL: "float64",
    ScalarType.STRING: "string",
}


@dataclass(frozen=True)
class FieldSpec:
    """One rendered field: identifier, target type and tag/annotation."""

    name: str
    type: str
    tag: str


class TreeVisitor:
    """Base class for emitters; walks each identity exactly once."""

    def __init__(self, config: Optional[InferenceConfig] = None) -> None:
        self.config = config or InferenceConfig()

    def walk(self, result: InferenceResult) -> Iterator[ElementNode]:
        """Yield distinct identities in depth-first, document-discovery order."""
        seen: Set[str] = set()
        worklist: List[ElementNode] = list(reversed(list(result.root.children.values())))
        while worklist:
            node = worklist.pop()
            if node.key in seen:
                continue
            seen.add(node.key)
            yield node
            worklist.extend(reversed(list(node.children.values())))

    def render_all(
        self, result: InferenceResult, namer: Optional[TypeNamer] = None
    ) -> List[Tuple[ElementNode, str]]:
        namer = namer or TypeNamer(self.config)
        return [(node, self.render_node(node, result, namer)) for node in self.walk(result)]

    def render_node(
        self, node: ElementNode, result: InferenceResult, namer: TypeNamer
    ) -> str:
        raise NotImplementedError

    def scalar_type(self, scalar: ScalarType) -> str:
        raise NotImplementedError

    def _type_of(self, scalar: ScalarType) -> str:
        return self.scalar_type(scalar if self.config.use_type else ScalarType.STRING)

    @staticmethod
    def field_namer(reserved: Iterable[str] = ()) -> Callable[[str], str]:
        """Return a function handing out unique field names within one type.

        A name already taken (or reserved) gets a numeric suffix: ``XId``,
        ``XId2``, ...
        """
        used: Set[str] = set(reserved)

        def unique(name: str) -> str:
            candidate, counter = name, 1
            while candidate in used:
                counter += 1
                candidate = f"{name}{counter}"
            used.add(candidate)
            return candidate

        return unique


def _go_xml_name(name: str, space: str) -> str:
    return f"{space} {name}" if space else name


class GoStructVisitor(TreeVisitor):
    """Render one Go struct per element identity.

    Example output for ``<book id="1"><title>Dune</title></book>``::

        type XBook struct {
            AttrId string `xml:"id,attr" json:"id,omitempty"`
            XTitle *XTitle `xml:"title,omitempty" json:"title,omitempty"`
            XMLName xml.Name `xml:"book,omitempty" json:"-"`
        }
    """

    def visit(self, result: InferenceResult, namer: Optional[TypeNamer] = None) -> str:
        return "\n".join(text for _, text in self.render_all(result, namer))

    def scalar_type(self, scalar: ScalarType) -> str:
        return GO_SCALAR_TYPES[scalar]

    def render_node(
        self, node: ElementNode, result: InferenceResult, namer: TypeNamer
    ) -> str:
        return render_template(
            "go_struct.go.j2",
            type_name=namer.type_name(node),
            fields=self.fields_for(node, result, namer),
        )

    def fields_for(
        self, node: ElementNode, result: InferenceResult, namer: TypeNamer
    ) -> List[FieldSpec]:
        fields: List[FieldSpec] = []
        # XMLName must keep its exact name for encoding/xml to use it.
        unique = self.field_namer(reserved=("XMLName",))
        for record in result.attributes_for(node):
            json_name = namer.json_name(record.name, record.prefix)
            fields.append(
                FieldSpec(
                    name=unique(namer.attribute_field(record)),
                    type=self._type_of(record.scalar_type),
                    tag=f'xml:"{_go_xml_name(record.name, record.space)},attr" '
                    f'json:"{json_name},omitempty"',
                )
            )

        for child in node.children.values():
            type_name = namer.type_name(child)
            json_name = namer.json_name(child.name, child.prefix)
            fields.append(
                FieldSpec(
                    name=unique(type_name),
                    type=f"[]*{type_name}" if child.repeats else f"*{type_name}",
                    tag=f'xml:"{_go_xml_name(child.name, child.space)},omitempty" '
                    f'json:"{json_name},omitempty"',
                )
            )

        if node.text_observed:
            fields.append(
                FieldSpec(
                    name=unique("Text"),
                    type=self._type_of(node.scalar_type),
                    tag='xml:",chardata" json:",omitempty"',
                )
            )

        xml_name_json = '"XMLName,omitempty"' if self.config.add_xml_name else '"-"'
        fields.append(
            FieldSpec(
                name="XMLName",
                type="xml.Name",
                tag=f'xml:"{_go_xml_name(node.name, node.space)},omitempty" '
                f"json:{xml_name_json}",
            )
        )
        return fields


def render_struct_definitions(
    result: InferenceResult, config: Optional[InferenceConfig] = None
) -> str:
    """Render the Go struct definitions for every identity in ``result``."""
    return GoStructVisitor(config).visit(result)
