"""Flatten the structured document to TypeScript text.

Top-level layout comes from templates/types.ts.j2; type nodes are rendered
recursively by the ``ts`` filter with four-space indentation.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from .nodes import (
    ArrayType,
    Document,
    IntersectionType,
    Member,
    ObjectType,
    Raw,
    TupleType,
    TypeNode,
    UnionType,
)

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "types.ts.j2"
INDENT = "    "


def _needs_parens(node: TypeNode) -> bool:
    if isinstance(node, (UnionType, IntersectionType)):
        return True
    return isinstance(node, (ArrayType, TupleType)) and node.readonly


def render_comment(comment: str, depth: int) -> list[str]:
    pad = INDENT * depth
    lines = comment.splitlines()
    if len(lines) == 1:
        return [f"{pad}/** {lines[0]} */"]
    return [f"{pad}/**", *(f"{pad} * {line}" for line in lines), f"{pad} */"]


def _render_member(member: Member, depth: int) -> list[str]:
    pad = INDENT * depth
    lines = render_comment(member.comment, depth) if member.comment else []
    readonly = "readonly " if member.readonly else ""
    optional = "?" if member.optional else ""
    lines.append(f"{pad}{readonly}{member.name}{optional}: {render_type(member.type, depth)};")
    return lines


def render_type(node: TypeNode, depth: int = 0) -> str:
    """Render a type node; nested objects indent relative to depth."""
    if isinstance(node, Raw):
        return node.text

    if isinstance(node, ArrayType):
        item = render_type(node.item, depth)
        if _needs_parens(node.item):
            item = f"({item})"
        return f"{'readonly ' if node.readonly else ''}{item}[]"

    if isinstance(node, TupleType):
        parts = [render_type(item, depth) for item in node.items]
        if node.rest is not None:
            parts.append("..." + render_type(ArrayType(node.rest), depth))
        return f"{'readonly ' if node.readonly else ''}[{', '.join(parts)}]"

    if isinstance(node, UnionType):
        return " | ".join(render_type(item, depth) for item in node.items)

    if isinstance(node, IntersectionType):
        return " & ".join(
            f"({render_type(item, depth)})" if isinstance(item, UnionType) else render_type(item, depth)
            for item in node.items
        )

    if isinstance(node, ObjectType):
        if not node.members and node.index is None:
            return "Record<string, never>"
        lines = ["{"]
        for member in node.members:
            lines.extend(_render_member(member, depth + 1))
        if node.index is not None:
            readonly = "readonly " if node.readonly else ""
            value = render_type(node.index, depth + 1)
            lines.append(f"{INDENT * (depth + 1)}{readonly}[key: string]: {value};")
        lines.append(f"{INDENT * depth}}}")
        return "\n".join(lines)

    raise TypeError(f"Unknown type node: {node!r}")


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    env.filters["ts"] = render_type
    return env


def ast_to_string(document: Document) -> str:
    """Render the document to TypeScript source text."""
    template = _environment().get_template(TEMPLATE_NAME)
    output = template.render(declarations=document.declarations)
    return output.rstrip("\n") + "\n"
