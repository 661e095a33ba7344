"""FastAPI application exposing schema inference over HTTP.

The service runs the same pipeline as the command line on a document posted
as the raw request body. Each request is one independent run: nothing is
cached between requests. Parsing and rendering are CPU bound and run in
the threadpool so one large document does not stall other requests.

Quick start (run the server)::

    uvicorn xml_schema_infer.app:app --reload

Endpoints:

    GET  /health              Basic health probe
    GET  /config              Default inference configuration
    POST /infer               Inferred element tree, attributes, namespaces
    POST /render/{mode}       Generated code (structs | conversion | java)

Example: infer the shape of a document with type inference::

    curl -X POST "http://localhost:8000/infer?use_type=true" \
         -H "Content-Type: application/xml" \
         --data-binary @catalog.xml | jq .

Example: generate Go structs::

    curl -X POST "http://localhost:8000/render/structs?name_prefix=Doc" \
         --data-binary @catalog.xml | jq -r .text

Errors:
    * Malformed XML -> 422 with ``{"error": "Malformed XML", "detail": ...}``
    * Invalid options (e.g. a lowercase ``name_prefix``) -> 400
    * Unknown render mode -> 422 (request validation)

Default options come from ``XML_SCHEMA_INFER_CONFIG`` (see
:func:`xml_schema_infer.config.config_from_env`); query parameters override
them per request.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .config import InferenceConfig, OutputMode, config_from_env
from .errors import ConfigurationError, MalformedInputError, TemplateRenderError
from .generator import generate
from .models import InferenceResult
from .tree_builder import infer_from_string

logger = logging.getLogger(__name__)

app = FastAPI(
    title="XML Schema Inference API",
    version=__version__,
    description="Infer the structure of sample XML documents and generate Go or Java/JAXB code for them",
    docs_url="/docs",
    redoc_url="/redoc",
)


class InferenceResponse(BaseModel):
    """Response model for the inference endpoint."""

    first_node: str = Field(..., description="Identity key of the document element")
    element_count: int = Field(..., description="Number of start tags read")
    distinct_elements: int = Field(..., description="Number of distinct element identities")
    tree: Dict[str, Any] = Field(..., description="Nested element tree; repeated identities appear as refs")
    attributes: Dict[str, List[Dict[str, Any]]] = Field(
        default_factory=dict, description="Element key -> attribute records"
    )
    namespaces: Dict[str, str] = Field(
        default_factory=dict, description="Element key -> namespace prefix"
    )


class RenderResponse(BaseModel):
    """Response model for the render endpoint."""

    mode: OutputMode
    text: Optional[str] = Field(None, description="Rendered document for single-file modes")
    files: Dict[str, str] = Field(
        default_factory=dict, description="Relative path -> contents for the Java project"
    )


@lru_cache(maxsize=1)
def get_config() -> InferenceConfig:
    return config_from_env()


def _request_config(
    base: InferenceConfig,
    use_type: Optional[bool],
    name_prefix: Optional[str],
    name_suffix: Optional[str],
    attribute_prefix: Optional[str],
) -> InferenceConfig:
    return base.with_overrides(
        use_type=use_type,
        name_prefix=name_prefix,
        name_suffix=name_suffix,
        attribute_prefix=attribute_prefix,
    )


async def _infer(request: Request, config: InferenceConfig) -> InferenceResult:
    body = await request.body()
    logger.debug("Inferring schema from %d byte request body", len(body))
    return await run_in_threadpool(infer_from_string, body, config)


@app.get("/health")
def health() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/config")
def current_config(config: InferenceConfig = Depends(get_config)) -> Dict[str, Any]:
    """Default configuration applied when a request sets no overrides."""
    return config.to_dict()


@app.post("/infer", response_model=InferenceResponse)
async def infer(
    request: Request,
    use_type: Optional[bool] = Query(None, description="Infer scalar types from text"),
    name_prefix: Optional[str] = Query(None, description="Type name prefix"),
    name_suffix: Optional[str] = Query(None, description="Type name suffix"),
    attribute_prefix: Optional[str] = Query(None, description="Attribute field prefix"),
    config: InferenceConfig = Depends(get_config),
) -> InferenceResponse:
    """Infer the element tree of the XML document in the request body."""
    run_config = _request_config(config, use_type, name_prefix, name_suffix, attribute_prefix)
    result = await _infer(request, run_config)
    data = await run_in_threadpool(result.to_dict)
    return InferenceResponse(distinct_elements=len(result.iter_nodes()), **data)


@app.post("/render/{mode}", response_model=RenderResponse)
async def render(
    mode: OutputMode,
    request: Request,
    use_type: Optional[bool] = Query(None, description="Infer scalar types from text"),
    name_prefix: Optional[str] = Query(None, description="Type name prefix"),
    name_suffix: Optional[str] = Query(None, description="Type name suffix"),
    attribute_prefix: Optional[str] = Query(None, description="Attribute field prefix"),
    config: InferenceConfig = Depends(get_config),
) -> RenderResponse:
    """Generate code for the XML document in the request body."""
    run_config = _request_config(config, use_type, name_prefix, name_suffix, attribute_prefix)
    result = await _infer(request, run_config)
    output = await run_in_threadpool(generate, result, run_config, mode, "request.xml")
    return RenderResponse(mode=output.mode, text=output.text, files=output.files)


@app.exception_handler(MalformedInputError)
async def malformed_input_handler(request, exc):
    """Report XML that could not be parsed."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "Malformed XML",
            "detail": str(exc),
            "line": exc.line,
            "column": exc.column,
        },
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request, exc):
    """Report invalid inference options."""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid configuration", "detail": str(exc)},
    )


@app.exception_handler(TemplateRenderError)
async def render_error_handler(request, exc):
    """Report a code generation failure."""
    logger.error("Template rendering failed: %s", exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred generating code",
        },
    )
