"""Convert JSON Schema objects into TypeScript type nodes.

Handles:
- $ref (local pointers become indexed access types)
- nullable (3.0) and type arrays containing "null" (3.1)
- enum / const literals
- oneOf / anyOf (union) and allOf (intersection)
- arrays, prefixItems tuples and minItems/maxItems tuples
- objects: required, additionalProperties, defaults, deprecation
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from .loader import resolve_ref
from .naming import jsdoc_text, literal, property_key, ref_to_type
from .nodes import (
    EMPTY_RECORD,
    NEVER,
    NULL,
    UNKNOWN,
    ArrayType,
    EnumDeclaration,
    Member,
    ObjectType,
    Raw,
    TupleType,
    TypeNode,
    intersection,
    union,
)
from .options import EngineOptions

logger = logging.getLogger(__name__)

# Longest tuple union emitted for minItems/maxItems before falling back
MAX_TUPLE_LENGTH = 10

# Guard against $ref chains that point back at themselves
MAX_REF_DEPTH = 32

_PRIMITIVES: dict[str, str] = {
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
    "null": "null",
}

_COMPOSITION_KEYS = ("oneOf", "anyOf", "allOf")


@dataclass
class TransformContext:
    """Per-document state shared by all transforms."""

    doc: dict[str, Any]
    options: EngineOptions
    enums: list[EnumDeclaration] = field(default_factory=list)
    _warned: set[str] = field(default_factory=set)

    def warn(self, key: str, message: str) -> None:
        """Log a warning once per key, unless running silent."""
        if self.options.silent or key in self._warned:
            return
        self._warned.add(key)
        logger.warning(message)

    def ref(self, ref: str) -> TypeNode:
        """Type for a $ref; unresolvable refs degrade to unknown."""
        if not ref.startswith("#"):
            self.warn(ref, f"External $ref {ref!r} is not supported; using unknown")
            return UNKNOWN
        if resolve_ref(self.doc, ref) is None:
            self.warn(ref, f"Could not resolve $ref {ref!r}; using unknown")
            return UNKNOWN
        return Raw(ref_to_type(ref))

    def deref(self, node: Any) -> Any:
        """Follow $ref chains to the referenced object."""
        for _ in range(MAX_REF_DEPTH):
            if not isinstance(node, dict) or "$ref" not in node:
                return node
            target = resolve_ref(self.doc, node["$ref"])
            if target is None:
                return {}
            node = target
        return {}

    def ordered(self, mapping: dict[Any, Any]) -> list[Any]:
        """Keys in document order, or sorted with --alphabetize.

        YAML may produce non-string keys (e.g. response codes), so keys are
        returned as-is and compared by their string form.
        """
        keys = list(mapping)
        return sorted(keys, key=str) if self.options.alphabetize else keys


def schema_comment(schema: Any) -> str | None:
    """Build JSDoc lines for a schema or operation, if it has any."""
    if not isinstance(schema, dict):
        return None
    lines = []
    if schema.get("deprecated"):
        lines.append("@deprecated")
    for key in ("summary", "description"):
        text = schema.get(key)
        if isinstance(text, str) and text.strip():
            lines.append(f"@{key} {jsdoc_text(text)}")
    if "default" in schema:
        lines.append(f"@default {jsdoc_text(json.dumps(schema['default'], default=str))}")
    if isinstance(schema.get("format"), str):
        lines.append(f"Format: {jsdoc_text(schema['format'])}")
    return "\n".join(lines) or None


def is_deprecated(ctx: TransformContext, node: Any) -> bool:
    resolved = ctx.deref(node)
    return isinstance(resolved, dict) and bool(resolved.get("deprecated"))


def transform_schema(ctx: TransformContext, schema: Any) -> TypeNode:
    """Resolve a JSON Schema to a TypeScript type node."""
    if schema is True or schema is None:
        return UNKNOWN
    if schema is False:
        return NEVER
    if not isinstance(schema, dict) or not schema:
        return UNKNOWN

    if "$ref" in schema:
        node = ctx.ref(schema["$ref"])
    else:
        node = _transform_composite(ctx, schema)

    if schema.get("nullable") is True:
        node = union([node, NULL])
    return node


def _transform_composite(ctx: TransformContext, schema: dict[str, Any]) -> TypeNode:
    parts: list[TypeNode] = []
    for key in ("oneOf", "anyOf"):
        if isinstance(schema.get(key), list):
            parts.append(union([transform_schema(ctx, sub) for sub in schema[key]]))
    if isinstance(schema.get("allOf"), list):
        parts.extend(transform_schema(ctx, sub) for sub in schema["allOf"])

    rest = {k: v for k, v in schema.items() if k not in _COMPOSITION_KEYS}
    if not parts:
        return _transform_typed(ctx, rest)

    # Siblings of a composition only add constraints when they carry shape
    if any(k in rest for k in ("type", "properties", "items", "enum", "const")):
        parts.append(_transform_typed(ctx, rest))
    return intersection(parts)


def _transform_typed(ctx: TransformContext, schema: dict[str, Any]) -> TypeNode:
    if "const" in schema:
        return Raw(literal(schema["const"]))
    if isinstance(schema.get("enum"), list):
        return union([Raw(literal(v)) for v in schema["enum"]])

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        return union([_transform_typed(ctx, {**schema, "type": t}) for t in schema_type])

    if schema_type == "array" or "items" in schema or "prefixItems" in schema:
        return _transform_array(ctx, schema)
    if (
        schema_type == "object"
        or "properties" in schema
        or "additionalProperties" in schema
    ):
        return _transform_object(ctx, schema)
    if schema_type in _PRIMITIVES:
        return Raw(_PRIMITIVES[schema_type])
    return UNKNOWN


def _transform_array(ctx: TransformContext, schema: dict[str, Any]) -> TypeNode:
    readonly = ctx.options.immutable
    items = schema.get("items")

    prefix = schema.get("prefixItems")
    if isinstance(prefix, list):
        rest = None if items is False else transform_schema(ctx, items)
        return TupleType([transform_schema(ctx, p) for p in prefix], rest, readonly)

    item = transform_schema(ctx, items) if isinstance(items, dict) else UNKNOWN

    if ctx.options.array_length:
        min_items = schema.get("minItems") or 0
        max_items = schema.get("maxItems")
        if isinstance(max_items, int) and min_items <= max_items <= MAX_TUPLE_LENGTH:
            return union([
                TupleType([item] * n, None, readonly)
                for n in range(min_items, max_items + 1)
            ])
        if isinstance(min_items, int) and min_items > 0:
            return TupleType([item] * min_items, item, readonly)

    return ArrayType(item, readonly)


def _transform_object(ctx: TransformContext, schema: dict[str, Any]) -> TypeNode:
    options = ctx.options
    properties = schema.get("properties") or {}
    required = set(schema.get("required") or [])

    members = []
    for name in ctx.ordered(properties):
        prop = properties[name]
        if options.exclude_deprecated and is_deprecated(ctx, prop):
            continue
        optional = name not in required
        if optional and options.default_non_nullable and isinstance(prop, dict) and "default" in prop:
            optional = False
        members.append(Member(
            name=property_key(str(name)),
            type=transform_schema(ctx, prop),
            optional=optional,
            readonly=options.immutable,
            comment=schema_comment(prop),
        ))

    additional = schema.get("additionalProperties")
    index: TypeNode | None = None
    if additional is True or additional == {}:
        index = UNKNOWN
    elif isinstance(additional, dict):
        index = transform_schema(ctx, additional)
    elif additional is None and options.additional_properties:
        index = UNKNOWN

    if not members and index is None:
        return UNKNOWN if options.empty_objects_unknown else EMPTY_RECORD
    return ObjectType(members, index, options.immutable)
