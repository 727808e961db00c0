"""
ExtensionIndex — the persisted registry of installed extensions.

Serialized to ``<extensions>/index.json`` in the layout Zed itself reads:

    {
      "extensions": {"<id>": {"manifest": {...}, "dev": false}},
      "themes":     {"<theme name>": {"extension": "<id>", "path": "themes/x.json"}},
      "icon_themes": {...},
      "languages":  {"<language name>": {"extension": "<id>", "path": "languages/x"}}
    }

Every theme/language entry is owned by one extension ID. Ownership is
maintained on the write paths only; it is not checked on load.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from zedext.core.models.manifest import ExtensionManifest


class IndexExtensionEntry(BaseModel):
    """An installed extension."""

    manifest: ExtensionManifest
    dev: bool = False


class IndexResourceEntry(BaseModel):
    """A theme or language contributed by an extension."""

    extension: str  # owning extension ID
    path: str       # relative to the extension directory, "/"-separated


class ExtensionIndex(BaseModel):
    """Root index model — all four mappings are always present."""

    extensions: dict[str, IndexExtensionEntry] = Field(default_factory=dict)
    themes: dict[str, IndexResourceEntry] = Field(default_factory=dict)
    icon_themes: dict[str, Any] = Field(default_factory=dict)
    languages: dict[str, IndexResourceEntry] = Field(default_factory=dict)

    @field_validator("extensions", "themes", "icon_themes", "languages", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def themes_of(self, ext_id: str) -> list[str]:
        """Names of the themes owned by an extension."""
        return sorted(name for name, e in self.themes.items() if e.extension == ext_id)

    def languages_of(self, ext_id: str) -> list[str]:
        """Names of the languages owned by an extension."""
        return sorted(name for name, e in self.languages.items() if e.extension == ext_id)
