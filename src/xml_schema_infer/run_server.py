"""Serve XML schema inference over HTTP.

Starts uvicorn on the application from :mod:`xml_schema_infer.app`, which
accepts sample documents on ``POST /infer`` and ``POST /render/{mode}``.
Installed as the ``xml-schema-infer-server`` console script.

Environment Variables:
    HOST: Interface to bind (default ``0.0.0.0``).
    PORT (int): Listening port (default 8000).
    XML_SCHEMA_INFER_CONFIG: Default inference options, e.g. ``use_type=true``.

Example:
    $ xml-schema-infer-server
    $ PORT=9000 XML_SCHEMA_INFER_CONFIG=use_type=true python -m xml_schema_infer.run_server
"""

from __future__ import annotations

import logging
import os

import uvicorn

from .app import app

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the inference service until interrupted."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info("Serving XML schema inference on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
