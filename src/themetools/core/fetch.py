"""
Theme definition sources.

A source is an http(s) URL, a path to a local JSON file, or a bare registry
name that is expanded through the configured registry URL template. Every
failure is reported as InputError before any document is touched.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError

from .errors import InputError
from .models import ThemeDefinition
from .strings import theme_name_from_url

logger = logging.getLogger(__name__)

_REGISTRY_NAME = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


@dataclass(frozen=True)
class ThemeSource:
    """Where a theme definition comes from."""

    location: str
    is_remote: bool

    @property
    def default_name(self) -> str:
        """Display name derived from the file name of the source."""
        return theme_name_from_url(self.location)


def _is_http_url(value: str) -> bool:
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError):
        return False
    return url.scheme in ("http", "https") and bool(url.host)


def resolve_source(value: str, registry_url: str, base_dir: Path | None = None) -> ThemeSource:
    """
    Classify a command-line source argument.

    Raises:
        InputError: If the value is neither a URL, an existing file, nor a
            registry name
    """
    value = value.strip()
    if not value:
        raise InputError("A theme URL is required.")

    if "://" in value:
        if not _is_http_url(value):
            raise InputError(f"Invalid URL provided: {value}")
        return ThemeSource(value, is_remote=True)

    path = Path(value)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    if path.is_file():
        return ThemeSource(str(path), is_remote=False)

    if _REGISTRY_NAME.match(value):
        url = registry_url.format(name=value)
        logger.debug("Expanded registry name %r to %s", value, url)
        return ThemeSource(url, is_remote=True)

    raise InputError(f"Invalid URL provided: {value}")


def fetch_json(url: str, timeout: float = 30.0, client: httpx.Client | None = None) -> Any:
    """
    GET a JSON document.

    Raises:
        InputError: On transport errors, timeouts, non-2xx status or a body
            that is not JSON
    """
    logger.info("Fetching theme from %s", url)
    try:
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                response = own_client.get(url)
        else:
            response = client.get(url, timeout=timeout)
    except httpx.TimeoutException as e:
        raise InputError(f"Timed out fetching theme from {url}") from e
    except httpx.HTTPError as e:
        raise InputError(f"Failed to download theme definition: {e}") from e

    if not response.is_success:
        raise InputError(
            f"Failed to download theme definition (HTTP {response.status_code}) from {url}"
        )

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InputError(f"Theme definition at {url} is not valid JSON") from e


def read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InputError(f"Theme definition {path} is not valid JSON: {e}") from e


def parse_definition(data: Any) -> ThemeDefinition:
    """
    Validate raw JSON into a ThemeDefinition.

    Raises:
        InputError: If ``cssVars`` is missing or not an object
    """
    if not isinstance(data, dict) or not isinstance(data.get("cssVars"), dict):
        raise InputError("Invalid theme JSON structure: a 'cssVars' object is required.")
    try:
        return ThemeDefinition.model_validate(data)
    except ValidationError as e:
        raise InputError(f"Invalid theme JSON structure: {e.errors()[0]['msg']}") from e


def load_definition(
    source: ThemeSource,
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> ThemeDefinition:
    """Fetch or read a source and validate it."""
    if source.is_remote:
        data = fetch_json(source.location, timeout=timeout, client=client)
    else:
        data = read_json(Path(source.location))
    return parse_definition(data)
