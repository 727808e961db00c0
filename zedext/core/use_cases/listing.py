"""
List use case — what the index says is installed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zedext.core.config.paths import ExtensionPaths
from zedext.core.errors import IndexFileError
from zedext.core.persistence.index_file import load_index


@dataclass
class InstalledExtension:
    """One row of ``zedext list``."""

    id: str
    name: str
    version: str
    dev: bool = False


@dataclass
class ListResult:
    """Installed extensions from the index."""

    extensions: list[InstalledExtension] = field(default_factory=list)
    # Directories under installed/, only collected when the index is empty
    unindexed_dirs: list[str] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.error:
            return {"error": self.error}
        return {
            "extensions": [
                {"id": e.id, "name": e.name, "version": e.version, "dev": e.dev}
                for e in self.extensions
            ],
            "unindexed_dirs": list(self.unindexed_dirs),
        }


def list_installed(*, paths: ExtensionPaths) -> ListResult:
    """List installed extensions, sorted by ID."""
    result = ListResult()

    try:
        index = load_index(paths)
    except IndexFileError as e:
        result.error = str(e)
        return result

    result.extensions = [
        InstalledExtension(
            id=ext_id,
            name=entry.manifest.name,
            version=entry.manifest.version,
            dev=entry.dev,
        )
        for ext_id, entry in sorted(index.extensions.items())
    ]

    if not result.extensions and paths.installed.is_dir():
        result.unindexed_dirs = sorted(p.name for p in paths.installed.iterdir() if p.is_dir())

    return result
