"""Tests for reading schema sources."""

import io
import json

import httpx
import pytest

from tsgen.engine.loader import load_document, parse_document, read_source, resolve_ref
from tsgen.errors import SchemaLoadError

URL = "https://api.example.com/openapi.json"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestReadSource:
    async def test_path(self, tmp_path, petstore, write_schema):
        path = write_schema(tmp_path / "petstore.json", petstore)
        doc = await load_document(path)
        assert doc["info"]["title"] == "Petstore"

    async def test_yaml_path(self, tmp_path, petstore, write_schema):
        path = write_schema(tmp_path / "petstore.yaml", petstore)
        doc = await load_document(path)
        assert set(doc["paths"]) == {"/pets", "/pets/{petId}"}

    async def test_missing_path(self, tmp_path):
        with pytest.raises(SchemaLoadError, match="Schema not found"):
            await read_source(tmp_path / "nope.yaml")

    async def test_binary_stream(self, petstore):
        stream = io.BytesIO(json.dumps(petstore).encode())
        doc = await load_document(stream)
        assert doc["openapi"] == "3.0.3"

    async def test_text_stream(self, petstore):
        doc = await load_document(io.StringIO(json.dumps(petstore)))
        assert doc["openapi"] == "3.0.3"

    async def test_url(self, petstore):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=petstore)

        async with _client(handler) as client:
            doc = await load_document(URL, client=client)
        assert doc["info"]["title"] == "Petstore"
        assert len(requests) == 1

    async def test_url_http_error(self):
        async with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(SchemaLoadError, match="HTTP 404"):
                await read_source(URL, client=client)

    async def test_url_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(SchemaLoadError, match="Could not fetch"):
                await read_source(URL, client=client)


class TestParseDocument:
    def test_empty(self):
        with pytest.raises(SchemaLoadError, match="empty"):
            parse_document("   ")

    def test_not_a_mapping(self):
        with pytest.raises(SchemaLoadError, match="not an OpenAPI document"):
            parse_document("- a\n- b\n")

    def test_invalid_yaml(self):
        with pytest.raises(SchemaLoadError, match="Could not parse"):
            parse_document("openapi: [unclosed")

    def test_swagger_rejected(self):
        with pytest.raises(SchemaLoadError, match="Swagger 2.0"):
            parse_document('{"swagger": "2.0"}')


class TestResolveRef:
    def test_component(self, petstore):
        assert resolve_ref(petstore, "#/components/schemas/Status")["enum"] == ["available", "sold"]

    def test_escaped_path(self, petstore):
        assert "get" in resolve_ref(petstore, "#/paths/~1pets")

    def test_list_index(self, petstore):
        param = resolve_ref(petstore, "#/paths/~1pets/get/parameters/0")
        assert param["name"] == "limit"

    def test_missing(self, petstore):
        assert resolve_ref(petstore, "#/components/schemas/Nope") is None

    def test_external(self, petstore):
        assert resolve_ref(petstore, "other.yaml#/Pet") is None
