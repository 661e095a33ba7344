"""Infer a generalized element tree from a sample XML document.

This module is the structural inference engine. It consumes the flat event
stream produced by :mod:`xml_schema_infer.tokens` and builds an
:class:`~xml_schema_infer.models.InferenceResult`: one
:class:`~xml_schema_infer.models.ElementNode` per distinct element identity,
the union of attributes ever seen on each identity, and the namespace prefix
each identity was written with.

Design goals:
* Memory proportional to the number of distinct identities plus nesting
    depth, never to document size: a document with a million ``<record>``
    siblings yields one ``record`` node with ``occurrence_count == 1000000``.
* Identities are (local name, namespace URI): same-named elements in
    different namespaces are never merged.
* Scalar types are merged conservatively (see
    :mod:`xml_schema_infer.type_sniffer`) so the result does not depend on
    the order occurrences appear in.

Walk strategy:
A stack of :class:`_Frame` objects mirrors the open tags. Each frame points at
the shared node for its identity and buffers the character data of *that
occurrence*; the text is classified once, at the end tag, because the reader
may split one run of character data across several events. A frame also
counts its child identities, which is how repeated (list-like) children are
detected.

Typical usage:
        from xml_schema_infer.config import InferenceConfig
        from xml_schema_infer.tree_builder import infer_from_string

        result = infer_from_string("<r><a>1</a><a>2</a></r>", InferenceConfig(use_type=True))
        a = result.find("a")
        print(a.occurrence_count, a.scalar_type)   # 2 ScalarType.INTEGER
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, Iterable, List, Optional, Union

from .config import InferenceConfig
from .errors import MalformedInputError
from .models import (
    DOCUMENT_NODE_NAME,
    AttributeRecord,
    ElementNode,
    InferenceResult,
    identity_key,
)
from .tokens import CharData, EndTag, Event, StartTag, iter_events

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


@dataclass
class _Frame:
    """One open tag: the shared node plus per-occurrence bookkeeping."""

    node: ElementNode
    text_parts: List[str] = field(default_factory=list)
    child_counts: Dict[str, int] = field(default_factory=dict)


class TreeBuilder:
    """Build an :class:`InferenceResult` from a stream of XML events.

    A builder instance holds the state of one walk; :meth:`build` resets it,
    so the same instance can be reused for several documents one after the
    other (each run processes exactly one document).

    Example:
        from xml_schema_infer.tokens import StartTag, EndTag, CharData
        from xml_schema_infer.tree_builder import TreeBuilder

        events = [StartTag("r"), StartTag("a"), CharData("1"), EndTag("a"), EndTag("r")]
        result = TreeBuilder().build(events)
        assert result.first_node.name == "r"
    """

    def __init__(self, config: Optional[InferenceConfig] = None) -> None:
        self.config = config or InferenceConfig()
        self._reset()

    def _reset(self) -> None:
        self.root = ElementNode(name=DOCUMENT_NODE_NAME)
        self.first_node: Optional[ElementNode] = None
        self.nodes: Dict[str, ElementNode] = {}
        self.attributes: Dict[str, Dict[str, AttributeRecord]] = {}
        self.namespaces: Dict[str, str] = {}
        self.element_count = 0
        self._stack: List[_Frame] = [_Frame(self.root)]

    def build(
        self,
        events: Iterable[Event],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> InferenceResult:
        """Consume ``events`` completely and return the inferred model.

        Args:
            events: Start/end/character-data events in document order.
            progress_callback: Called with the running start-tag count every
                ``config.progress_interval`` start tags.

        Raises:
            MalformedInputError: Unbalanced tags, a stream that ends with
                open elements, or a document without any element.
        """
        self._reset()
        for event in events:
            if isinstance(event, StartTag):
                self._start(event)
                if self.element_count % self.config.progress_interval == 0:
                    self._report_progress(progress_callback)
            elif isinstance(event, CharData):
                self._stack[-1].text_parts.append(event.content)
            elif isinstance(event, EndTag):
                self._end(event)

        if len(self._stack) > 1:
            open_tag = self._stack[-1].node
            raise MalformedInputError(
                f"Document ended with unterminated element <{open_tag.key}> "
                f"({len(self._stack) - 1} element(s) still open)"
            )
        if self.first_node is None:
            raise MalformedInputError("Document contains no elements")

        logger.debug(
            "Inferred %d distinct elements from %d start tags",
            len(self.nodes),
            self.element_count,
        )
        return InferenceResult(
            root=self.root,
            first_node=self.first_node,
            attributes=self.attributes,
            namespaces=self.namespaces,
            element_count=self.element_count,
        )

    # ---------------- Event handlers ---------------- #

    def _start(self, tag: StartTag) -> None:
        key = identity_key(tag.name, tag.space)
        parent = self._stack[-1]

        node = self.nodes.get(key)
        if node is None:
            node = ElementNode(name=tag.name, space=tag.space, prefix=tag.prefix)
            self.nodes[key] = node
        if self.first_node is None:
            self.first_node = node

        parent.node.add_child(node)
        seen = parent.child_counts.get(key, 0) + 1
        parent.child_counts[key] = seen
        if seen > 1:
            node.repeats = True

        node.occurrence_count += 1
        self.element_count += 1
        self.namespaces.setdefault(key, tag.prefix)

        if tag.attributes:
            self._record_attributes(key, tag)
        self._stack.append(_Frame(node))

    def _record_attributes(self, key: str, tag: StartTag) -> None:
        records = self.attributes.setdefault(key, {})
        for attribute in tag.attributes:
            attr_key = identity_key(attribute.name, attribute.space)
            record = records.get(attr_key)
            if record is None:
                record = AttributeRecord(
                    name=attribute.name, space=attribute.space, prefix=attribute.prefix
                )
                records[attr_key] = record
            record.record_value(attribute.value, self.config.use_type)

    def _end(self, tag: EndTag) -> None:
        if len(self._stack) == 1:
            raise MalformedInputError(f"Unexpected end tag </{tag.name}>")
        frame = self._stack.pop()
        node = frame.node
        if (node.name, node.space) != (tag.name, tag.space):
            raise MalformedInputError(
                f"End tag </{identity_key(tag.name, tag.space)}> does not match "
                f"open element <{node.key}>"
            )

        if not frame.text_parts:
            return
        text = "".join(frame.text_parts)
        # Whitespace between child elements is layout, not content.
        if frame.child_counts and not text.strip():
            return
        node.record_text(text, self.config.use_type)

    def _report_progress(self, callback: Optional[ProgressCallback]) -> None:
        if self.config.progress:
            logger.info(
                "Processed %d elements (%d distinct)",
                self.element_count,
                len(self.nodes),
            )
        if callback is not None:
            callback(self.element_count)


def infer_schema(
    stream: BinaryIO,
    config: Optional[InferenceConfig] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> InferenceResult:
    """Read an XML byte stream and return the inferred model.

    This is a convenience wrapper around :func:`~xml_schema_infer.tokens.iter_events`
    and :class:`TreeBuilder` for callers that already hold an open stream
    (see :func:`xml_schema_infer.sources.open_source`).

    Raises:
        MalformedInputError: The document is not well-formed.
        SourceError: The stream could not be read.
    """
    config = config or InferenceConfig()
    events = iter_events(stream, chunk_size=config.chunk_size)
    return TreeBuilder(config).build(events, progress_callback=progress_callback)


def infer_from_string(
    document: Union[str, bytes], config: Optional[InferenceConfig] = None
) -> InferenceResult:
    """Infer the model of an in-memory document."""
    data = document.encode("utf-8") if isinstance(document, str) else document
    return infer_schema(io.BytesIO(data), config)
