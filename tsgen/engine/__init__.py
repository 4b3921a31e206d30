"""OpenAPI 3.x -> TypeScript generation engine.

Callers use two functions:
  openapi_ts(source, options)  load a schema and build the declaration AST
  ast_to_string(document)      flatten the AST to TypeScript text

The output is a pure function of the schema and the options.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .codegen import ast_to_string
from .context_builder import build_document
from .loader import SchemaSource, load_document
from .nodes import Document
from .options import EngineOptions

logger = logging.getLogger(__name__)

__all__ = ["Document", "EngineOptions", "ast_to_string", "openapi_ts"]


async def openapi_ts(
    source: SchemaSource,
    options: Mapping[str, Any] | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> Document:
    """Load one schema source and build its TypeScript declarations."""
    opts = EngineOptions.from_mapping(options or {})
    doc = await load_document(source, client=client)
    if not opts.silent:
        title = (doc.get("info") or {}).get("title", "untitled")
        logger.debug("Loaded OpenAPI %s document %r", doc.get("openapi", "?"), title)
    return build_document(doc, opts)
