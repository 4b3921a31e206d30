"""Read an OpenAPI document from a path, URL or stream.

Each source is read exactly once.  JSON and YAML are both parsed with
PyYAML, since YAML is a superset of JSON.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import IO, Any, Union

import httpx
import yaml

from ..errors import SchemaLoadError
from .naming import unescape_pointer

logger = logging.getLogger(__name__)

SchemaSource = Union[Path, str, IO[bytes], IO[str]]

HTTP_TIMEOUT = 30.0


def _label(source: SchemaSource) -> str:
    if isinstance(source, (Path, str)):
        return str(source)
    return getattr(source, "name", None) or "stream"


def _is_url(source: SchemaSource) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def _read_stream(stream: IO[Any]) -> str:
    data = stream.read()
    if isinstance(data, bytes):
        return data.decode("utf-8")
    return data


async def _fetch(url: str, client: httpx.AsyncClient | None) -> str:
    """GET a schema over HTTP; one attempt, no retries."""
    try:
        if client is not None:
            resp = await client.get(url, follow_redirects=True)
        else:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as owned:
                resp = await owned.get(url, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SchemaLoadError(
            f"Could not fetch {url}: HTTP {exc.response.status_code}"
        ) from exc
    except httpx.RequestError as exc:
        raise SchemaLoadError(f"Could not fetch {url}: {exc}") from exc
    return resp.text


async def read_source(
    source: SchemaSource,
    *,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Return the raw text of a schema source."""
    if _is_url(source):
        return await _fetch(source, client)
    try:
        if isinstance(source, (Path, str)):
            return await asyncio.to_thread(Path(source).read_text, encoding="utf-8")
        return await asyncio.to_thread(_read_stream, source)
    except FileNotFoundError as exc:
        raise SchemaLoadError(f"Schema not found: {_label(source)}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaLoadError(f"Could not read {_label(source)}: {exc}") from exc


def parse_document(text: str, label: str = "schema") -> dict[str, Any]:
    """Parse JSON/YAML text into an OpenAPI 3.x document."""
    if not text.strip():
        raise SchemaLoadError(f"{label} is empty")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SchemaLoadError(f"Could not parse {label}: {exc}") from exc
    if not isinstance(doc, dict):
        raise SchemaLoadError(f"{label} is not an OpenAPI document")
    if "swagger" in doc:
        raise SchemaLoadError(
            f"{label} is Swagger {doc['swagger']}; only OpenAPI 3.x is supported"
        )
    return doc


async def load_document(
    source: SchemaSource,
    *,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Read and parse one schema source."""
    text = await read_source(source, client=client)
    return parse_document(text, _label(source))


def resolve_ref(doc: dict[str, Any], ref: str) -> Any:
    """Resolve a local $ref pointer, or return None if it does not resolve."""
    if not ref.startswith("#"):
        return None
    node: Any = doc
    for part in ref.lstrip("#/").split("/"):
        if not part:
            continue
        key = unescape_pointer(part)
        if isinstance(node, dict) and key in node:
            node = node[key]
        elif isinstance(node, list) and key.isdigit() and int(key) < len(node):
            node = node[int(key)]
        else:
            return None
    return node
