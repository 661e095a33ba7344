"""Generate a standalone Go conversion program for the inferred shape.

The program embeds the struct definitions from
:class:`~xml_schema_infer.emitters.GoStructVisitor`, decodes documents shaped
like the sample into them, and re-encodes them as JSON or XML. Record-level
elements (children of the document element) get their own decode branch so
large documents can be streamed one record at a time.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .config import InferenceConfig
from .emitters import GoStructVisitor
from .models import ElementNode, InferenceResult
from .naming import TypeNamer
from .rendering import render_template


def _describe(node: ElementNode, namer: TypeNamer) -> Dict[str, str]:
    return {"type_name": namer.type_name(node), "name": node.name, "space": node.space}


def render_conversion_code(
    result: InferenceResult,
    config: Optional[InferenceConfig] = None,
    source_name: str = "",
) -> str:
    """Render the complete Go program as text.

    Args:
        result: Finished inference model.
        config: Naming and formatting options (``pretty_print`` selects
            indented JSON output).
        source_name: Default input file or URL baked into the program.
    """
    config = config or InferenceConfig()
    namer = TypeNamer(config)
    structs = GoStructVisitor(config).visit(result, namer)

    one_level_down: List[Dict[str, str]] = []
    seen = set()
    for node in result.one_level_down():
        if node.key not in seen:
            seen.add(node.key)
            one_level_down.append(_describe(node, namer))

    return render_template(
        "conversion.go.j2",
        filename=source_name,
        base=_describe(result.first_node, namer),
        one_level_down=one_level_down,
        pretty_print=config.pretty_print,
        structs=structs,
    )
