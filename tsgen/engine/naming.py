"""Naming rules for emitted TypeScript.

Examples:
  petId                    -> petId
  x-rate-limit             -> "x-rate-limit"
  #/components/schemas/Pet -> components["schemas"]["Pet"]
  "in-progress" (enum)     -> InProgress
"""

from __future__ import annotations

import json
import re

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name))


def quote(value: str) -> str:
    """Return a double-quoted TypeScript string literal."""
    return json.dumps(value, ensure_ascii=False)


def property_key(name: str) -> str:
    """Return an object key, quoted unless it is a plain identifier."""
    return name if is_identifier(name) else quote(name)


def status_key(code: str) -> str:
    """Response keys: numeric codes and ``default`` stay bare."""
    if code.isdigit() or code == "default":
        return code
    return quote(code)


def unescape_pointer(part: str) -> str:
    return part.replace("~1", "/").replace("~0", "~")


def ref_to_type(ref: str) -> str:
    """Turn a local JSON pointer into an indexed access type."""
    parts = [unescape_pointer(p) for p in ref.lstrip("#/").split("/") if p]
    if not parts:
        return "unknown"
    head, *rest = parts
    return head + "".join(f"[{quote(p)}]" for p in rest)


def literal(value: object) -> str:
    """Render a JSON value as a TypeScript literal type."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return quote(value)
    return "unknown"


def _camel_case(value: str) -> str:
    words = re.split(r"[^A-Za-z0-9]+", value)
    return "".join(w[:1].upper() + w[1:] for w in words if w)


def type_name(name: str) -> str:
    """PascalCase a schema name for use as a declaration name."""
    result = _camel_case(name) or "Schema"
    return f"_{result}" if result[0].isdigit() else result


def enum_member_name(value: object) -> str:
    """Derive an enum member name from its value."""
    if isinstance(value, str):
        name = _camel_case(value)
        if not name:
            return "Empty"
        return f"Value{name}" if name[0].isdigit() else name
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        text = str(value).replace("-", "Minus").replace(".", "_")
        return f"Value{text}"
    return "Value"


def jsdoc_text(text: str) -> str:
    """Make text safe to embed inside a /** */ comment."""
    text = text.replace("*/", "*\\/")
    return re.sub(r"\s+", " ", text).strip()
