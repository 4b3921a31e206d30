"""Build the structured TypeScript document from an OpenAPI document.

Emits, in order:
  paths       one member per path, methods inline or as operations["id"]
  webhooks    same shape as paths (OpenAPI 3.1)
  components  schemas, responses, parameters, requestBodies, headers, pathItems
  $defs       always empty
  operations  every operation that has an operationId
  enums       one per enum component schema, with --enum only
"""

from __future__ import annotations

import re
from typing import Any

from .naming import enum_member_name, literal, property_key, quote, status_key, type_name
from .nodes import (
    EMPTY_RECORD,
    NEVER,
    NULL,
    UNKNOWN,
    Declaration,
    Document,
    EnumDeclaration,
    EnumMember,
    Member,
    ObjectType,
    Raw,
    TypeNode,
    union,
)
from .options import EngineOptions
from .schema_parser import (
    TransformContext,
    is_deprecated,
    schema_comment,
    transform_schema,
)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Parameter locations, in emitted order
PARAM_LOCATIONS = ("query", "header", "path", "cookie")

_COMPONENT_SECTIONS = ("schemas", "responses", "parameters", "requestBodies", "headers", "pathItems")

_PATH_TEMPLATE = re.compile(r"\{([^}]+)\}")


class _Builder:
    """Walks one document, collecting operations and enums as it goes."""

    def __init__(self, ctx: TransformContext) -> None:
        self.ctx = ctx
        self.options = ctx.options
        self.operations: list[Member] = []
        self._enum_names: set[str] = set()

    # -- parameters -------------------------------------------------------

    def merge_parameters(self, inherited: list[Any], own: list[Any]) -> list[Any]:
        """Operation parameters override path-level ones by (in, name)."""
        merged: dict[tuple[str, str], Any] = {}
        for param in [*inherited, *own]:
            resolved = self.ctx.deref(param)
            if not isinstance(resolved, dict) or "name" not in resolved:
                continue
            merged[(resolved.get("in", "query"), str(resolved["name"]))] = param
        return list(merged.values())

    def parameter_type(self, param: Any) -> TypeNode:
        if isinstance(param, dict) and "$ref" in param:
            return self.ctx.ref(param["$ref"])
        resolved = self.ctx.deref(param)
        if "schema" in resolved:
            return transform_schema(self.ctx, resolved["schema"])
        return self.content_value(resolved.get("content"))

    def parameters_type(self, params: list[Any]) -> ObjectType:
        members = []
        for location in PARAM_LOCATIONS:
            group = []
            for param in params:
                resolved = self.ctx.deref(param)
                if resolved.get("in", "query") != location:
                    continue
                if self.options.exclude_deprecated and resolved.get("deprecated"):
                    continue
                group.append((str(resolved["name"]), param, resolved))
            if not group:
                members.append(Member(location, NEVER, optional=True))
                continue
            if self.options.alphabetize:
                group.sort(key=lambda g: g[0])
            fields = [
                Member(
                    name=property_key(name),
                    type=self.parameter_type(param),
                    optional=location != "path" and not resolved.get("required"),
                    readonly=self.options.immutable,
                    comment=schema_comment(resolved),
                )
                for name, param, resolved in group
            ]
            members.append(Member(
                location,
                ObjectType(fields, readonly=self.options.immutable),
                optional=all(f.optional for f in fields),
            ))
        return ObjectType(members)

    # -- bodies and responses ---------------------------------------------

    def content_value(self, content: Any) -> TypeNode:
        """Union of the schemas of every media type in a content map."""
        if not isinstance(content, dict) or not content:
            return UNKNOWN
        return union([
            transform_schema(self.ctx, (content[k] or {}).get("schema"))
            for k in self.ctx.ordered(content)
        ])

    def content_type(self, content: dict[str, Any]) -> ObjectType:
        return ObjectType([
            Member(quote(str(media)), transform_schema(self.ctx, (content[media] or {}).get("schema")))
            for media in self.ctx.ordered(content)
        ])

    def request_body_type(self, body: dict[str, Any]) -> TypeNode:
        content = body.get("content")
        if not isinstance(content, dict) or not content:
            return UNKNOWN
        return ObjectType([Member("content", self.content_type(content))])

    def response_type(self, response: dict[str, Any]) -> TypeNode:
        headers = response.get("headers") or {}
        header_members = [
            Member(
                property_key(str(name)),
                self.parameter_type(headers[name]),
                optional=not self.ctx.deref(headers[name]).get("required"),
                comment=schema_comment(self.ctx.deref(headers[name])),
            )
            for name in self.ctx.ordered(headers)
        ]
        members = [Member("headers", ObjectType(header_members, index=UNKNOWN))]

        content = response.get("content")
        if isinstance(content, dict) and content:
            members.append(Member("content", self.content_type(content)))
        elif self.options.content_never:
            members.append(Member("content", NEVER, optional=True))
        return ObjectType(members)

    def responses_type(self, responses: Any) -> TypeNode:
        if not isinstance(responses, dict) or not responses:
            return EMPTY_RECORD
        members = []
        for code in self.ctx.ordered(responses):
            response = responses[code]
            if isinstance(response, dict) and "$ref" in response:
                node = self.ctx.ref(response["$ref"])
            else:
                node = self.response_type(response or {})
            members.append(Member(status_key(str(code)), node, comment=schema_comment(self.ctx.deref(response))))
        return ObjectType(members)

    # -- operations and paths ---------------------------------------------

    def operation_type(self, operation: dict[str, Any], inherited: list[Any]) -> ObjectType:
        params = self.merge_parameters(inherited, operation.get("parameters") or [])
        members = [Member("parameters", self.parameters_type(params))]

        body = operation.get("requestBody")
        if isinstance(body, dict) and "$ref" in body:
            required = bool(self.ctx.deref(body).get("required"))
            members.append(Member("requestBody", self.ctx.ref(body["$ref"]), optional=not required))
        elif isinstance(body, dict):
            members.append(Member(
                "requestBody",
                self.request_body_type(body),
                optional=not body.get("required"),
                comment=schema_comment(body),
            ))
        else:
            members.append(Member("requestBody", NEVER, optional=True))

        members.append(Member("responses", self.responses_type(operation.get("responses"))))
        return ObjectType(members)

    def path_item_type(self, item: dict[str, Any]) -> ObjectType:
        inherited = item.get("parameters") or []
        members = [Member("parameters", self.parameters_type(self.merge_parameters(inherited, [])))]
        for method in HTTP_METHODS:
            operation = item.get(method)
            if not isinstance(operation, dict):
                continue
            if self.options.exclude_deprecated and operation.get("deprecated"):
                continue
            node = self.operation_type(operation, inherited)
            comment = schema_comment(operation)
            operation_id = operation.get("operationId")
            if operation_id:
                self.operations.append(Member(property_key(str(operation_id)), node, comment=comment))
                node = Raw(f"operations[{quote(str(operation_id))}]")
            members.append(Member(method, node, comment=comment))
        return ObjectType(members)

    def path_key(self, path: str, item: dict[str, Any]) -> str:
        """Quoted path, or a template literal index with --path-params-as-types."""
        if not (self.options.path_params_as_types and _PATH_TEMPLATE.search(path)):
            return quote(path)

        param_types: dict[str, str] = {}
        operations = [item[m] for m in HTTP_METHODS if isinstance(item.get(m), dict)]
        for param in [*(item.get("parameters") or []), *(p for op in operations for p in op.get("parameters") or [])]:
            resolved = self.ctx.deref(param)
            if not isinstance(resolved, dict):
                continue
            if resolved.get("in") == "path" and "name" in resolved:
                schema = self.ctx.deref(resolved.get("schema") or {})
                if schema.get("type") in ("integer", "number"):
                    param_types[str(resolved["name"])] = "number"

        def _sub(match: re.Match[str]) -> str:
            return "${" + param_types.get(match.group(1), "string") + "}"

        template = _PATH_TEMPLATE.sub(_sub, path.replace("`", "\\`"))
        return f"[path: `{template}`]"

    def paths_type(self, paths: Any) -> ObjectType:
        members = []
        if not isinstance(paths, dict):
            return ObjectType(members)
        for path in self.ctx.ordered(paths):
            item = self.ctx.deref(paths[path])
            path = str(path)
            if not path.startswith("/") or not isinstance(item, dict):
                continue
            members.append(Member(self.path_key(path, item), self.path_item_type(item)))
        return ObjectType(members)

    def webhooks_type(self, webhooks: Any) -> ObjectType:
        if not isinstance(webhooks, dict):
            return ObjectType()
        return ObjectType([
            Member(property_key(str(name)), self.path_item_type(self.ctx.deref(webhooks[name])))
            for name in self.ctx.ordered(webhooks)
            if isinstance(self.ctx.deref(webhooks[name]), dict)
        ])

    # -- components -------------------------------------------------------

    def enum_declaration(self, name: str, schema: dict[str, Any]) -> TypeNode | None:
        """Declare an ``export enum`` for an enum schema; None if not eligible."""
        values = schema.get("enum")
        if not isinstance(values, list) or "$ref" in schema:
            return None
        non_null = [v for v in values if v is not None]
        if not non_null or any(isinstance(v, bool) or not isinstance(v, (str, int, float)) for v in non_null):
            return None

        base = type_name(name)
        enum_name, n = base, 2
        while enum_name in self._enum_names:
            enum_name, n = f"{base}{n}", n + 1
        self._enum_names.add(enum_name)

        members: list[EnumMember] = []
        seen: set[str] = set()
        for value in non_null:
            member, i = enum_member_name(value), 2
            candidate = member
            while candidate in seen:
                candidate, i = f"{member}{i}", i + 1
            seen.add(candidate)
            members.append(EnumMember(candidate, literal(value)))
        self.ctx.enums.append(EnumDeclaration(enum_name, members))

        node: TypeNode = Raw(enum_name)
        if len(non_null) != len(values) or schema.get("nullable") is True:
            node = union([node, NULL])
        return node

    def component_entry(self, section: str, name: str, value: Any) -> TypeNode:
        resolved = self.ctx.deref(value)
        if isinstance(value, dict) and "$ref" in value:
            return self.ctx.ref(value["$ref"])
        if section == "schemas":
            if self.options.enum and isinstance(value, dict):
                node = self.enum_declaration(name, value)
                if node is not None:
                    return node
            return transform_schema(self.ctx, value)
        if section == "responses":
            return self.response_type(resolved)
        if section in ("parameters", "headers"):
            return self.parameter_type(resolved)
        if section == "requestBodies":
            return self.request_body_type(resolved)
        return self.path_item_type(resolved)

    def components_type(self, components: Any) -> ObjectType:
        components = components if isinstance(components, dict) else {}
        members = []
        for section in _COMPONENT_SECTIONS:
            entries = components.get(section)
            if not isinstance(entries, dict) or not entries:
                members.append(Member(section, NEVER))
                continue
            fields = []
            for name in self.ctx.ordered(entries):
                value = entries[name]
                if self.options.exclude_deprecated and is_deprecated(self.ctx, value):
                    continue
                fields.append(Member(
                    property_key(str(name)),
                    self.component_entry(section, str(name), value),
                    comment=schema_comment(self.ctx.deref(value)),
                ))
            members.append(Member(section, ObjectType(fields) if fields else NEVER))
        return ObjectType(members)


def _declare(name: str, node: TypeNode, options: EngineOptions) -> Declaration:
    is_object = isinstance(node, ObjectType) and (node.members or node.index is not None)
    return Declaration(name, node, interface=bool(is_object) and not options.export_type)


def build_document(doc: dict[str, Any], options: EngineOptions) -> Document:
    """Build every top-level declaration for one OpenAPI document."""
    ctx = TransformContext(doc=doc, options=options)
    builder = _Builder(ctx)

    paths = builder.paths_type(doc.get("paths"))
    webhooks = builder.webhooks_type(doc.get("webhooks"))
    components = builder.components_type(doc.get("components"))

    operation_members = builder.operations
    if options.alphabetize:
        operation_members = sorted(operation_members, key=lambda m: m.name)
    operations = ObjectType(operation_members)

    declarations: list[Declaration | EnumDeclaration] = [
        _declare("paths", paths, options),
        _declare("webhooks", webhooks, options),
        _declare("components", components, options),
        Declaration("$defs", EMPTY_RECORD, interface=False),
        _declare("operations", operations, options),
        *ctx.enums,
    ]
    return Document(declarations)
