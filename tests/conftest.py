"""Shared fixtures: a small petstore schema and helpers that lay out
schema files and redocly.yaml configs in a temporary working directory.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml
from click.testing import CliRunner

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "summary": "List all pets",
                "parameters": [
                    {"name": "limit", "in": "query", "schema": {"type": "integer"}},
                ],
                "responses": {
                    "200": {
                        "description": "A list of pets",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Pet"},
                                },
                            },
                        },
                    },
                },
            },
        },
        "/pets/{petId}": {
            "parameters": [
                {"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}},
            ],
            "get": {
                "responses": {
                    "200": {
                        "description": "A pet",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pet"},
                            },
                        },
                    },
                    "404": {"description": "Not found"},
                },
            },
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                    "tag": {"type": "string", "nullable": True},
                    "status": {"$ref": "#/components/schemas/Status"},
                },
            },
            "Status": {"type": "string", "enum": ["available", "sold"]},
        },
    },
}

STORE: dict[str, Any] = {
    "openapi": "3.1.0",
    "info": {"title": "Store", "version": "2.0.0"},
    "paths": {
        "/orders": {
            "post": {
                "operationId": "createOrder",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/Order"}},
                    },
                },
                "responses": {"201": {"description": "Created"}},
            },
        },
    },
    "components": {
        "schemas": {
            "Order": {
                "type": "object",
                "properties": {"quantity": {"type": "integer"}},
            },
        },
    },
}


@pytest.fixture
def petstore() -> dict[str, Any]:
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def store() -> dict[str, Any]:
    return copy.deepcopy(STORE)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty working directory (no redocly.yaml) the test runs in."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_schema() -> Callable[..., Path]:
    """Write a schema as YAML (or JSON for *.json names) and return its path."""

    def _write(path: Path, schema: dict[str, Any]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".json":
            path.write_text(json.dumps(schema, indent=2))
        else:
            path.write_text(yaml.safe_dump(schema, sort_keys=False))
        return path

    return _write


@pytest.fixture
def write_config() -> Callable[..., Path]:
    """Write a redocly.yaml with the given ``apis`` mapping."""

    def _write(directory: Path, apis: dict[str, Any], name: str = "redocly.yaml") -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(yaml.safe_dump({"apis": apis}, sort_keys=False))
        return path

    return _write


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_tsgen_logger():
    """Drop handlers a CLI run attached to the ``tsgen`` logger."""
    yield
    logger = logging.getLogger("tsgen")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
