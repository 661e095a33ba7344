"""Streaming XML event source.

Turns a byte stream into a flat sequence of start-tag, end-tag and
character-data events in document order. The stdlib expat parser is driven
incrementally: the stream is read in fixed-size chunks, each chunk is fed to
the parser, and the events it produced are yielded before the next read.
Memory use therefore depends on the chunk size and nesting depth, not on the
size of the document.

Namespace processing is enabled with prefix reporting, so expat hands over
every element and attribute name as ``uri local [prefix]``. The prefix is
therefore the one the tag was actually written with, even when several
prefixes are bound to the same URI. ``xmlns`` declarations are not reported
as attributes and external entities are never fetched.

Example:
        import io
        from xml_schema_infer.tokens import iter_events

        for event in iter_events(io.BytesIO(b"<r><a x='1'>hi</a></r>")):
                print(event)
"""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Dict, Iterator, List, Tuple, Union
from xml.parsers import expat

from .config import DEFAULT_CHUNK_SIZE
from .errors import MalformedInputError, SourceError

logger = logging.getLogger(__name__)

# Local names and URIs cannot contain a space.
_NS_SEPARATOR = " "


@dataclass(frozen=True)
class Attribute:
    name: str
    value: str
    space: str = ""
    prefix: str = ""


@dataclass(frozen=True)
class StartTag:
    name: str
    space: str = ""
    prefix: str = ""
    attributes: Tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class EndTag:
    name: str
    space: str = ""


@dataclass(frozen=True)
class CharData:
    content: str


Event = Union[StartTag, EndTag, CharData]


def split_name(name: str) -> Tuple[str, str, str]:
    """Split an expat name into ``(uri, local, prefix)``.

    Example:
        >>> split_name("urn:p a p")
        ('urn:p', 'a', 'p')
        >>> split_name("urn:d a")
        ('urn:d', 'a', '')
        >>> split_name("a")
        ('', 'a', '')
    """
    parts = name.split(_NS_SEPARATOR)
    if len(parts) == 3:
        return parts[0], parts[1], parts[2]
    if len(parts) == 2:
        return parts[0], parts[1], ""
    return "", name, ""


class _EventCollector:
    """Expat callbacks buffering events until the caller drains them."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def drain(self) -> List[Event]:
        events, self.events = self.events, []
        return events

    def start_element(self, name: str, attrs: Dict[str, str]) -> None:
        space, local, prefix = split_name(name)
        attributes = []
        for attr_name, value in attrs.items():
            attr_space, attr_local, attr_prefix = split_name(attr_name)
            attributes.append(
                Attribute(name=attr_local, value=value, space=attr_space, prefix=attr_prefix)
            )
        self.events.append(
            StartTag(name=local, space=space, prefix=prefix, attributes=tuple(attributes))
        )

    def end_element(self, name: str) -> None:
        space, local, _ = split_name(name)
        self.events.append(EndTag(name=local, space=space))

    def character_data(self, data: str) -> None:
        self.events.append(CharData(data))


def _make_parser(collector: _EventCollector):
    parser = expat.ParserCreate(namespace_separator=_NS_SEPARATOR)
    parser.namespace_prefixes = True
    parser.buffer_text = True
    parser.SetParamEntityParsing(expat.XML_PARAM_ENTITY_PARSING_NEVER)
    parser.StartElementHandler = collector.start_element
    parser.EndElementHandler = collector.end_element
    parser.CharacterDataHandler = collector.character_data
    return parser


def iter_events(stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[Event]:
    """Yield XML events read incrementally from ``stream``.

    Args:
        stream: Binary file-like object (possibly a decompressing wrapper).
        chunk_size: Number of bytes fed to the parser at a time.

    Raises:
        MalformedInputError: The bytes are not well-formed XML, including an
            empty document or one that ends while elements are still open.
        SourceError: Reading the stream failed (I/O or decompression error).
    """
    collector = _EventCollector()
    parser = _make_parser(collector)

    try:
        while True:
            try:
                chunk = stream.read(chunk_size)
            except (OSError, EOFError, zlib.error) as exc:
                raise SourceError(f"Failed reading XML source: {exc}") from exc
            if not chunk:
                break
            parser.Parse(chunk, False)
            yield from collector.drain()
        parser.Parse(b"", True)
        logger.debug("Finished reading XML source")
    except expat.ExpatError as exc:
        raise MalformedInputError(
            f"Malformed XML: {expat.ErrorString(exc.code)}",
            line=exc.lineno,
            column=exc.offset,
        ) from exc

    yield from collector.drain()
