"""Flat option record accepted by the engine."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class EngineOptions:
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
    silent: bool = False
    # Loaded Redocly config, carried for callers; generation does not read it
    redoc: Any = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> EngineOptions:
        """Build options from a flat mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"Unknown engine options: {', '.join(sorted(unknown))}")
        return cls(**values)
