"""
Registry client — query the Zed extension API.

    GET {base}/extensions?filter=<query>&max_schema_version=<n>
        -> {"data": [{id, name, version, ...}, ...]}
    GET {base}/extensions/<id>/<version>/download
        -> redirect to the archive bytes

There is no "get by ID" endpoint; exact lookup is a search filtered on
the ID, so a query can return fuzzy matches and still be "not found".
"""

from __future__ import annotations

import json
import logging
from urllib.parse import quote, urlencode

from pydantic import ValidationError

from zedext.core.config.loader import DEFAULT_API_BASE, DEFAULT_MAX_SCHEMA_VERSION
from zedext.core.errors import ExtensionNotFoundError, RegistryError
from zedext.core.models.registry import RegistryEntry, SearchResponse

logger = logging.getLogger(__name__)


class RegistryClient:
    """Read-only client for the extension registry."""

    def __init__(
        self,
        client,
        api_base: str = DEFAULT_API_BASE,
        max_schema_version: int = DEFAULT_MAX_SCHEMA_VERSION,
    ):
        self.client = client
        self.api_base = api_base.rstrip("/")
        self.max_schema_version = max_schema_version

    def search_url(self, query: str) -> str:
        params = urlencode({"filter": query, "max_schema_version": self.max_schema_version})
        return f"{self.api_base}/extensions?{params}"

    def search(self, query: str) -> list[RegistryEntry]:
        """Full-text search.

        Raises:
            HttpError: On transport failure.
            RegistryError: On a non-200 status or an unreadable payload.
        """
        url = self.search_url(query)
        with self.client.stream(url) as resp:
            body = resp.read_text()
            if not resp.ok:
                raise RegistryError(f"API returned {resp.status}: {body.strip()}")

        try:
            result = SearchResponse.model_validate(json.loads(body))
        except (json.JSONDecodeError, ValidationError) as e:
            raise RegistryError(f"failed to parse API response: {e}") from e

        logger.debug("Search %r returned %d results", query, len(result.data))
        return result.data

    def find_exact(self, ext_id: str) -> RegistryEntry:
        """Look up one extension by its exact ID.

        Raises:
            ExtensionNotFoundError: If no result has exactly this ID.
        """
        for entry in self.search(ext_id):
            if entry.id == ext_id:
                return entry
        raise ExtensionNotFoundError(f"extension {ext_id!r} not found")

    def download_url(self, ext_id: str, version: str) -> str:
        """Archive URL for one version. The API redirects to storage."""
        return f"{self.api_base}/extensions/{quote(ext_id, safe='')}/{quote(version, safe='')}/download"
