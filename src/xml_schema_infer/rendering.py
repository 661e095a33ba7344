"""Template rendering for generated source files.

Rendering is a pure function of a template name and a context: nothing here
writes files or prints, so emitters can be unit-tested by asserting on the
returned strings.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from .errors import TemplateRenderError

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"


def quote(value: Any) -> str:
    """Double-quoted string literal valid in both Go and Java source."""
    return json.dumps(str(value), ensure_ascii=False)


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    env.filters["quote"] = quote
    return env


def render_template(template_name: str, **context: Any) -> str:
    """Render ``template_name`` from the packaged template directory.

    Raises:
        TemplateRenderError: The template is missing, invalid, or refers to
            a context value that was not supplied.
    """
    try:
        template = get_environment().get_template(template_name)
        return template.render(**context)
    except TemplateError as exc:
        raise TemplateRenderError(template_name, str(exc)) from exc
