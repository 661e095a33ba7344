"""Exception types raised by the inference pipeline.

Every failure during a run is fatal to that run; callers (the CLI and the
HTTP service) translate these into exit codes or HTTP status codes. The
hierarchy also subclasses the closest builtin so generic handlers
(``except OSError`` / ``except ValueError``) keep working.
"""

from __future__ import annotations

from typing import Optional


class InferenceError(Exception):
    """Base class for all errors raised by :mod:`xml_schema_infer`."""


class ConfigurationError(InferenceError, ValueError):
    """Invalid option combination (output mode, input source, option values)."""


class SourceError(InferenceError, OSError):
    """The input document could not be opened, fetched, or decompressed."""


class OutputError(InferenceError, OSError):
    """Generated files could not be written to the output directory."""


class MalformedInputError(InferenceError, ValueError):
    """The input is not well-formed XML (unbalanced, truncated, or empty).

    Attributes:
        line: 1-based line number reported by the XML reader, if known.
        column: 0-based column reported by the XML reader, if known.
    """

    def __init__(
        self, message: str, line: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class TemplateRenderError(InferenceError, RuntimeError):
    """A code template could not be loaded or rendered."""

    def __init__(self, template_name: str, message: str) -> None:
        super().__init__(f"Failed to render template '{template_name}': {message}")
        self.template_name = template_name
