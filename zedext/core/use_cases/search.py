"""
Search use case — query the registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zedext.core.errors import ZedExtError
from zedext.core.models.registry import RegistryEntry
from zedext.core.services.registry import RegistryClient


@dataclass
class SearchResult:
    """Registry matches for a query."""

    query: str
    entries: list[RegistryEntry] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.error:
            return {"query": self.query, "error": self.error}
        return {
            "query": self.query,
            "results": [e.model_dump(mode="json") for e in self.entries],
        }


def search_registry(query: str, *, registry: RegistryClient) -> SearchResult:
    """Search the registry; errors are reported in the result."""
    result = SearchResult(query=query)
    try:
        result.entries = registry.search(query)
    except ZedExtError as e:
        result.error = str(e)
    return result
