"""Normalize command-line flags into InvocationOptions.

Legacy flags are rejected before click ever sees the arguments, so an old
invocation fails with a pointer to the new name instead of being parsed
into something else.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from .errors import DeprecatedFlagError

if TYPE_CHECKING:
    from .config import ExternalConfig

# Retired flag -> message naming the replacement
LEGACY_FLAGS: dict[str, str] = {
    "-ap": 'The -ap alias has been deprecated. Use "--additional-properties" instead.',
    "--immutable-types": 'The --immutable-types flag has been renamed to "--immutable".',
    "--support-array-length": 'The --support-array-length flag has been renamed to "--array-length".',
    "-it": 'The -it alias has been deprecated. Use "--immutable" instead.',
}

# Boolean generation switches, in the order they are passed to the engine
SWITCHES: tuple[str, ...] = (
    "additional_properties",
    "alphabetize",
    "array_length",
    "content_never",
    "default_non_nullable",
    "empty_objects_unknown",
    "enum",
    "exclude_deprecated",
    "export_type",
    "immutable",
    "path_params_as_types",
)


def check_legacy_flags(args: Iterable[str]) -> None:
    """Raise DeprecatedFlagError for the first retired flag in args."""
    for arg in args:
        if arg == "--":
            return
        message = LEGACY_FLAGS.get(arg)
        if message:
            raise DeprecatedFlagError(message)


def switch_name(key: str) -> str | None:
    """Map a camelCase or kebab-case switch name to its option field."""
    snake = "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in key)
    snake = snake.replace("-", "_").lstrip("_")
    return snake if snake in SWITCHES else None


@dataclass(frozen=True)
class InvocationOptions:
    """Every generation switch of one run, plus the resolved config."""

    additional_properties: bool = False
    alphabetize: bool = False
    array_length: bool = False
    content_never: bool = False
    default_non_nullable: bool = False
    empty_objects_unknown: bool = False
    enum: bool = False
    exclude_deprecated: bool = False
    export_type: bool = False
    immutable: bool = False
    path_params_as_types: bool = False
    output: str | None = None
    redoc: str | None = None
    config: ExternalConfig | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> InvocationOptions:
        """Build options from click's parsed parameter mapping."""
        known = {f.name for f in fields(cls)} - {"config"}
        values: dict[str, Any] = {}
        for name in known:
            value = params.get(name)
            if name in SWITCHES:
                values[name] = bool(value)
            elif value:
                values[name] = str(value)
        return cls(**values)

    def switches(self) -> dict[str, bool]:
        """Return the boolean generation switches as a flat mapping."""
        return {name: getattr(self, name) for name in SWITCHES}

    def with_overrides(self, overrides: Mapping[str, bool] | None) -> InvocationOptions:
        """Return a copy with per-target switch overrides applied."""
        if not overrides:
            return self
        return replace(self, **{k: bool(v) for k, v in overrides.items() if k in SWITCHES})
