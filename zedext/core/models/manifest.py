"""
Extension manifest — the contents of an installed extension's extension.toml.

The manifest is immutable once installed and replaced wholesale on
reinstall. ``None`` for ``themes`` / ``languages`` means the manifest did
not declare them (resources are auto-detected on disk); an empty list
means it explicitly declares none.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator


class ManifestLib(BaseModel):
    """Optional native library binding (e.g. a Rust wasm module)."""

    kind: str | None = None
    version: str | None = None


class ExtensionManifest(BaseModel):
    """Per-extension descriptor shipped inside the extension archive."""

    id: str
    name: str
    version: str
    description: str = ""
    authors: list[str] = Field(default_factory=list)
    repository: str = ""
    lib: ManifestLib | None = None

    # ── Declared resources ───────────────────────────────────────
    themes: list[str] | None = None
    icon_themes: list[str] | None = None
    languages: list[str] | None = None
    grammars: dict[str, Any] | None = None  # opaque, kept verbatim

    @field_validator("description", "authors", "repository", mode="before")
    @classmethod
    def _null_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        # index.json written by Zed stores omitted fields as null
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value
