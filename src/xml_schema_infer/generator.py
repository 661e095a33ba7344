"""Dispatch a finished inference result to the selected emitter.

Thin orchestration helpers: the heavy lifting is done by the tree builder
and the emitter modules. Exactly one emitter runs per call.

Example:
    from xml_schema_infer.config import InferenceConfig, OutputMode
    from xml_schema_infer.generator import generate
    from xml_schema_infer.tree_builder import infer_from_string

    result = infer_from_string("<r><a>1</a></r>")
    output = generate(result, InferenceConfig(), OutputMode.STRUCT_DEFINITIONS)
    print(output.text)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .codegen import render_conversion_code
from .config import InferenceConfig, OutputMode
from .emitters import render_struct_definitions
from .jaxb import render_java_project
from .models import InferenceResult


@dataclass
class GeneratedOutput:
    """Rendered output of one run.

    Single-document modes fill ``text``; the Java mode fills ``files``
    (relative path -> contents, relative to ``config.java_base_dir``).
    """

    mode: OutputMode
    text: Optional[str] = None
    files: Dict[str, str] = field(default_factory=dict)


def generate(
    result: InferenceResult,
    config: InferenceConfig,
    mode: OutputMode,
    source_name: str = "",
) -> GeneratedOutput:
    """Render ``result`` with the emitter for ``mode``.

    Args:
        result: Finished inference model (read only).
        config: Naming/formatting options shared with the tree builder.
        mode: Output kind to produce.
        source_name: Input name embedded in generated programs.

    Raises:
        TemplateRenderError: A template failed to render.
    """
    if mode is OutputMode.CONVERSION_CODE:
        return GeneratedOutput(mode, text=render_conversion_code(result, config, source_name))
    if mode is OutputMode.STRUCT_DEFINITIONS:
        return GeneratedOutput(mode, text=render_struct_definitions(result, config))
    if mode is OutputMode.TARGET_CLASSES:
        return GeneratedOutput(mode, files=render_java_project(result, config, source_name))
    raise ValueError(f"Unsupported output mode: {mode!r}")
