"""
RegistryEntry — extension metadata as returned by the registry API.

Transient: fetched per query, never persisted.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class RegistryEntry(BaseModel):
    """One record of the ``data`` list in a search response."""

    id: str
    name: str
    version: str
    description: str = ""
    authors: list[str] = Field(default_factory=list)
    repository: str = ""
    schema_version: int = 0
    wasm_api_version: str | None = None
    provides: list[str] = Field(default_factory=list)
    published_at: str = ""
    download_count: int = 0

    @field_validator(
        "description", "authors", "repository", "schema_version",
        "provides", "published_at", "download_count",
        mode="before",
    )
    @classmethod
    def _null_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class SearchResponse(BaseModel):
    """Envelope of ``GET /extensions``."""

    data: list[RegistryEntry] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value
