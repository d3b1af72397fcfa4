"""Tests for theme source resolution and fetching."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from themetools.core.errors import InputError
from themetools.core.fetch import (
    ThemeSource,
    fetch_json,
    load_definition,
    parse_definition,
    resolve_source,
)

REGISTRY_URL = "https://tweakcn.com/r/themes/{name}.json"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestResolveSource:
    def test_url(self):
        source = resolve_source("https://tweakcn.com/r/themes/vintage-paper.json", REGISTRY_URL)
        assert source == ThemeSource("https://tweakcn.com/r/themes/vintage-paper.json", is_remote=True)
        assert source.default_name == "Vintage Paper"

    def test_registry_name(self):
        source = resolve_source("catppuccin", REGISTRY_URL)
        assert source.location == "https://tweakcn.com/r/themes/catppuccin.json"
        assert source.is_remote

    def test_local_file(self, tmp_path: Path):
        path = tmp_path / "ocean-breeze.json"
        path.write_text("{}")
        source = resolve_source("ocean-breeze.json", REGISTRY_URL, base_dir=tmp_path)
        assert source == ThemeSource(str(path), is_remote=False)
        assert source.default_name == "Ocean Breeze"

    @pytest.mark.parametrize("value", ["ftp://example.com/t.json", "https://", "not a url", "   "])
    def test_invalid(self, value: str):
        with pytest.raises(InputError):
            resolve_source(value, REGISTRY_URL)


class TestFetchJson:
    def test_success(self):
        client = _client(lambda request: httpx.Response(200, json={"cssVars": {}}))
        assert fetch_json("https://example.com/t.json", client=client) == {"cssVars": {}}

    def test_http_error_status(self):
        client = _client(lambda request: httpx.Response(404))
        with pytest.raises(InputError, match="HTTP 404"):
            fetch_json("https://example.com/t.json", client=client)

    def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(InputError, match="Timed out"):
            fetch_json("https://example.com/t.json", client=_client(handler))

    def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(InputError, match="Failed to download"):
            fetch_json("https://example.com/t.json", client=_client(handler))

    def test_not_json(self):
        client = _client(lambda request: httpx.Response(200, text="<html></html>"))
        with pytest.raises(InputError, match="not valid JSON"):
            fetch_json("https://example.com/t.json", client=client)


class TestParseDefinition:
    def test_valid(self, vintage_json):
        definition = parse_definition(vintage_json)
        assert definition.name == "vintage"
        assert definition.css_vars.dark == {"primary": "oklch(0.7 0.2 250)"}

    @pytest.mark.parametrize("data", [{}, {"cssVars": None}, {"cssVars": "x"}, [], "text"])
    def test_missing_css_vars(self, data):
        with pytest.raises(InputError, match="cssVars"):
            parse_definition(data)

    def test_invalid_section(self):
        with pytest.raises(InputError):
            parse_definition({"cssVars": {"light": ["not", "a", "map"]}})


class TestLoadDefinition:
    def test_remote(self, vintage_json):
        client = _client(lambda request: httpx.Response(200, json=vintage_json))
        source = ThemeSource("https://example.com/vintage.json", is_remote=True)
        assert load_definition(source, client=client).name == "vintage"

    def test_local(self, tmp_path: Path, vintage_json):
        path = tmp_path / "vintage.json"
        path.write_text(json.dumps(vintage_json))
        definition = load_definition(ThemeSource(str(path), is_remote=False))
        assert definition.css_vars.theme == {"font-sans": "Lora, serif"}

    def test_local_not_json(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{oops")
        with pytest.raises(InputError):
            load_definition(ThemeSource(str(path), is_remote=False))
