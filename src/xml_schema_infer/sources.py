"""Open the sample document as a byte stream.

The document may come from a local file, a URL, or standard input, and may
be gzip or bzip2 compressed. Compression is detected from the name
(``.gz`` / ``.bz2``) or, failing that, from the first bytes of the stream,
so compressed data piped through standard input works too.

Example:
        from xml_schema_infer.sources import open_source
        from xml_schema_infer.tree_builder import infer_schema

        with open_source("catalog.xml.gz") as stream:
                result = infer_schema(stream)

Notes:
* Decompression errors surface while the stream is being read; the token
    layer reports them as :class:`~xml_schema_infer.errors.SourceError`.
* URLs are fetched with ``urllib`` and a fixed timeout; there is no retry.
"""

from __future__ import annotations

import bz2
import gzip
import io
import logging
import sys
import urllib.error
import urllib.request
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from .errors import ConfigurationError, SourceError

logger = logging.getLogger(__name__)

URL_TIMEOUT_SECONDS = 30
STDIN_NAME = "<stdin>"

_GZIP_MAGIC = b"\x1f\x8b"
_BZIP2_MAGIC = b"BZh"


def describe_source(name: Optional[str], url: bool = False, stdin: bool = False) -> str:
    """Return the display name of a source (absolute path, URL, or ``<stdin>``)."""
    if stdin:
        return STDIN_NAME
    if not name:
        raise ConfigurationError("No XML source given")
    if url:
        return name
    return str(Path(name).expanduser().resolve())


def _compression_for(name: str, head: bytes) -> Optional[str]:
    lowered = name.lower()
    if lowered.endswith(".gz") or head.startswith(_GZIP_MAGIC):
        return "gzip"
    if lowered.endswith(".bz2") or head.startswith(_BZIP2_MAGIC):
        return "bzip2"
    return None


def _decompressing(stream: BinaryIO, name: str) -> BinaryIO:
    buffered = stream if isinstance(stream, io.BufferedReader) else io.BufferedReader(stream)
    compression = _compression_for(name, buffered.peek(len(_BZIP2_MAGIC))[:3])
    if compression == "gzip":
        logger.debug("Reading gzip-compressed source %s", name)
        return gzip.GzipFile(fileobj=buffered, mode="rb")
    if compression == "bzip2":
        logger.debug("Reading bzip2-compressed source %s", name)
        return bz2.BZ2File(buffered, mode="rb")
    return buffered


def _open_raw(name: str, url: bool, stdin: bool) -> BinaryIO:
    if stdin:
        return sys.stdin.buffer
    if url:
        try:
            return urllib.request.urlopen(name, timeout=URL_TIMEOUT_SECONDS)
        except (urllib.error.URLError, ValueError) as exc:
            raise SourceError(f"Failed to fetch {name}: {exc}") from exc
    try:
        return open(name, "rb")
    except OSError as exc:
        raise SourceError(f"Cannot open {name}: {exc.strerror or exc}") from exc


@contextmanager
def open_source(
    name: Optional[str] = None, *, url: bool = False, stdin: bool = False
) -> Iterator[BinaryIO]:
    """Open a sample document for reading, decompressing transparently.

    Args:
        name: File path or URL; ignored when ``stdin`` is set.
        url: Interpret ``name`` as a URL.
        stdin: Read from standard input.

    Raises:
        ConfigurationError: Neither a name nor ``stdin`` was given, or both
            ``url`` and ``stdin`` were requested.
        SourceError: The source cannot be opened.
    """
    if url and stdin:
        raise ConfigurationError("A source cannot be both a URL and standard input")
    display = describe_source(name, url=url, stdin=stdin)
    logger.debug("Opening XML source %s", display)

    with ExitStack() as stack:
        raw = _open_raw(display, url, stdin)
        if not stdin:
            stack.callback(raw.close)
        try:
            stream = _decompressing(raw, display)
        except OSError as exc:
            raise SourceError(f"Cannot read {display}: {exc}") from exc
        yield stream
