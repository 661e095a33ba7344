"""XML Schema Inference
====================

Infer the structure of a sample XML document in one streaming pass and
generate code that reads documents of the same shape.

Key capabilities
----------------
- Merge every occurrence of an element identity (local name + namespace)
  into one :class:`~xml_schema_infer.models.ElementNode`, however large the
  document is.
- Union the attributes seen on each identity and infer conservative scalar
  types (boolean, integer, decimal, string) for text and attribute values.
- Read plain, gzip or bzip2 documents from a file, a URL or standard input.
- Emit Go struct definitions, a standalone Go XML-to-JSON conversion
  program, or a Maven project of Java/JAXB classes.
- Serve the same pipeline over HTTP with FastAPI.

Design principles
-----------------
1. **One explicit configuration** - every run is driven by a frozen
   :class:`~xml_schema_infer.config.InferenceConfig`.
2. **Build, then emit** - the tree is complete before any emitter runs, and
   rendering finishes before anything is written, so a failed run never
   leaves partial output.
3. **Read-only emitters** - visitors never mutate the tree and render each
   identity exactly once.

Minimal quick start
-------------------
>>> from xml_schema_infer import InferenceConfig, infer_from_string, render_struct_definitions
>>> result = infer_from_string("<r><a>1</a><a>2</a></r>", InferenceConfig(use_type=True))
>>> result.find("a").occurrence_count
2
>>> print(render_struct_definitions(result))  # doctest: +SKIP

FastAPI application instance (for ASGI servers like uvicorn):
>>> from xml_schema_infer.app import app  # noqa: F401
"""

__version__ = "0.1.0"

from .config import InferenceConfig, OutputMode
from .emitters import render_struct_definitions
from .errors import (
    ConfigurationError,
    InferenceError,
    MalformedInputError,
    OutputError,
    SourceError,
    TemplateRenderError,
)
from .generator import generate
from .models import AttributeRecord, ElementNode, InferenceResult
from .sources import open_source
from .tree_builder import infer_from_string, infer_schema

__all__ = [
    "AttributeRecord",
    "ConfigurationError",
    "ElementNode",
    "InferenceConfig",
    "InferenceError",
    "InferenceResult",
    "MalformedInputError",
    "OutputError",
    "OutputMode",
    "SourceError",
    "TemplateRenderError",
    "generate",
    "infer_from_string",
    "infer_schema",
    "open_source",
    "render_struct_definitions",
]
