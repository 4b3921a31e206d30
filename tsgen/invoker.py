"""Call the generation engine for one schema source."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

import httpx

from .engine import ast_to_string, openapi_ts
from .flags import InvocationOptions
from .resolver import SchemaSource

logger = logging.getLogger(__name__)

COMMENT_HEADER = """/**
 * This file was auto-generated by openapi-tsgen.
 * Do not make direct changes to the file.
 */

"""


@dataclass(frozen=True)
class GenerationResult:
    text: str


def engine_options(options: InvocationOptions, *, silent: bool) -> dict[str, object]:
    """The flat option record passed to the engine; nothing else is added."""
    return {**options.switches(), "redoc": options.config, "silent": silent}


async def generate_schema(
    source: SchemaSource,
    options: InvocationOptions,
    *,
    silent: bool = False,
    overrides: Mapping[str, bool] | None = None,
    client: httpx.AsyncClient | None = None,
) -> GenerationResult:
    """Generate types for one source and prepend the provenance header.

    Engine errors propagate unchanged.
    """
    effective = options.with_overrides(overrides)
    document = await openapi_ts(source, engine_options(effective, silent=silent), client=client)
    return GenerationResult(text=COMMENT_HEADER + ast_to_string(document))
