"""Unit tests for listing sources: Linear API client and JSON file source."""

import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
import pytest
from sources import get_source
from sources.base import SourceFetchError
from sources.file_source import JsonFileSource
from sources.linear.client import LinearClient, extract_listings

RECORD = {"nonLocalizedValues": {"id": "l-1"}, "address": {"fi": {"value": "Testikatu 1"}}}


def make_client(handler, **linear):
    """LinearClient wired to a MockTransport handler."""
    linear_config = {"base_url": "https://api.example.fi", "api_key": "secret"}
    linear_config.update(linear)
    return LinearClient({"linear": linear_config}, transport=httpx.MockTransport(handler))


def fetch(client):
    async def run():
        try:
            return await client.fetch_listings()
        finally:
            await client.close()

    return asyncio.run(run())


class TestLinearClient:
    """Test requests and error handling of the Linear API client."""

    def test_request_shape(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json=[RECORD])

        listings = fetch(make_client(handler, company_id="acme"))
        request = seen["request"]

        assert listings == [RECORD]
        assert request.url.path == "/v2/listings"
        assert request.url.params["languages[]"] == "fi"
        assert request.headers["authorization"] == "LINEAR-API-KEY secret"
        assert request.headers["x-company-id"] == "acme"
        assert request.headers["accept"] == "application/json"

    def test_prefixed_key_not_doubled(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, json=[])

        fetch(make_client(handler, api_key="LINEAR-API-KEY secret"))
        assert seen["auth"] == "LINEAR-API-KEY secret"

    def test_no_company_header_when_unset(self):
        seen = {}

        def handler(request):
            seen["headers"] = request.headers
            return httpx.Response(200, json=[])

        fetch(make_client(handler))
        assert "x-company-id" not in seen["headers"]

    @pytest.mark.parametrize(
        "payload",
        [
            [RECORD],
            {"success": True, "data": [{"listings": [RECORD]}]},
            {"listings": [RECORD]},
            {"data": [RECORD]},
        ],
    )
    def test_response_shapes(self, payload):
        listings = fetch(make_client(lambda request: httpx.Response(200, json=payload)))
        assert listings == [RECORD]

    def test_empty_listing_set(self):
        assert fetch(make_client(lambda request: httpx.Response(200, json={"listings": []}))) == []

    def test_server_error(self):
        client = make_client(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(SourceFetchError, match="HTTP 500"):
            fetch(client)

    def test_unknown_shape(self):
        client = make_client(lambda request: httpx.Response(200, json={"items": []}))
        with pytest.raises(SourceFetchError, match="Unknown"):
            fetch(client)

    def test_invalid_json(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(SourceFetchError, match="invalid JSON"):
            fetch(client)

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        with pytest.raises(SourceFetchError, match="timed out"):
            fetch(make_client(handler))

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SourceFetchError, match="request failed"):
            fetch(make_client(handler))

    def test_missing_api_key(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=[])

        with pytest.raises(SourceFetchError, match="API key"):
            fetch(make_client(handler, api_key=None))
        assert calls == []

    def test_source_name(self):
        assert make_client(lambda request: httpx.Response(200)).get_source_name() == "linear"


class TestExtractListings:
    """Test response shape detection on its own."""

    def test_nested_listings_preferred_over_data(self):
        data = {"data": [{"listings": [RECORD]}]}
        assert extract_listings(data) == [RECORD]

    def test_data_array_of_records(self):
        assert extract_listings({"data": [RECORD, RECORD]}) == [RECORD, RECORD]

    @pytest.mark.parametrize("payload", [None, "listings", 42, {"data": {"listings": []}}])
    def test_rejects_unknown(self, payload):
        with pytest.raises(SourceFetchError):
            extract_listings(payload)


class TestJsonFileSource:
    """Test the file-backed source."""

    def test_reads_export(self, tmp_path):
        path = tmp_path / "listings.json"
        path.write_text(json.dumps({"data": [{"listings": [RECORD]}]}), encoding="utf-8")

        source = JsonFileSource({"file": {"path": str(path)}})
        assert asyncio.run(source.fetch_listings()) == [RECORD]
        assert source.get_source_name() == "file"

    def test_missing_file(self, tmp_path):
        source = JsonFileSource({"file": {"path": str(tmp_path / "missing.json")}})
        with pytest.raises(SourceFetchError, match="not found"):
            asyncio.run(source.fetch_listings())

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SourceFetchError, match="Invalid JSON"):
            asyncio.run(JsonFileSource({"file": {"path": str(path)}}).fetch_listings())

    def test_requires_path(self):
        with pytest.raises(ValueError):
            JsonFileSource({"file": {}})


class TestSourceFactory:
    """Test get_source."""

    def test_linear(self):
        source = get_source({"source": "linear", "linear": {"api_key": "k"}})
        assert isinstance(source, LinearClient)

    def test_file(self, tmp_path):
        source = get_source({"source": "file", "file": {"path": str(tmp_path / "x.json")}})
        assert isinstance(source, JsonFileSource)

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported source"):
            get_source({"source": "oikotie"})
