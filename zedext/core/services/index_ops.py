"""
Index reconciliation — keep index.json in step with installed extensions.

After an install, the extension's extension.toml is read and its entry,
languages and themes are (re)registered. After a removal, the entry and
every theme/language it owned are dropped.

Resource discovery follows one rule for both kinds: if the manifest
lists them explicitly, use that list; otherwise scan the conventional
directory (``languages/`` for sub-directories, ``themes/`` for ``*.json``).
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path, PurePosixPath

from pydantic import ValidationError

from zedext.core.config.paths import ExtensionPaths
from zedext.core.errors import ManifestError
from zedext.core.models.index import ExtensionIndex, IndexExtensionEntry, IndexResourceEntry
from zedext.core.models.manifest import ExtensionManifest

logger = logging.getLogger(__name__)

MANIFEST_FILE = "extension.toml"
LANGUAGE_CONFIG_FILE = "config.toml"
LANGUAGES_DIR = "languages"
THEMES_DIR = "themes"


def read_manifest(ext_dir: Path) -> ExtensionManifest:
    """Parse ``<ext_dir>/extension.toml``.

    Raises:
        ManifestError: If the file is missing, not TOML, or lacks required keys.
    """
    path = ext_dir / MANIFEST_FILE
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ManifestError(f"read {MANIFEST_FILE}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"parse {MANIFEST_FILE}: {e}") from e

    try:
        return ExtensionManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"invalid {MANIFEST_FILE}: {e}") from e


def read_language_name(config_path: Path) -> str | None:
    """The ``name`` declared in a language's config.toml, if readable."""
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None
    name = data.get("name")
    return name if isinstance(name, str) and name else None


def reconcile_install(ext_id: str, paths: ExtensionPaths, index: ExtensionIndex) -> ExtensionManifest:
    """Register an installed extension and its resources in ``index``.

    Existing entries with the same keys are overwritten.

    Raises:
        ManifestError: If the manifest cannot be read.
    """
    ext_dir = paths.extension_dir(ext_id)
    manifest = read_manifest(ext_dir)

    index.extensions[ext_id] = IndexExtensionEntry(manifest=manifest, dev=False)

    for name, rel in _languages(ext_dir, manifest):
        index.languages[name] = IndexResourceEntry(extension=ext_id, path=rel)

    for name, rel in _themes(ext_dir, manifest):
        index.themes[name] = IndexResourceEntry(extension=ext_id, path=rel)

    logger.info(
        "Indexed %s: %d languages, %d themes",
        ext_id,
        len(index.languages_of(ext_id)),
        len(index.themes_of(ext_id)),
    )
    return manifest


def reconcile_remove(ext_id: str, index: ExtensionIndex) -> int:
    """Drop an extension and everything it owns from ``index``.

    Returns:
        Number of theme and language entries removed.
    """
    index.extensions.pop(ext_id, None)

    removed = 0
    for mapping in (index.themes, index.languages):
        for name in [n for n, entry in mapping.items() if entry.extension == ext_id]:
            del mapping[name]
            removed += 1

    logger.info("Unindexed %s (%d resources)", ext_id, removed)
    return removed


def _languages(ext_dir: Path, manifest: ExtensionManifest) -> list[tuple[str, str]]:
    if manifest.languages is not None:
        found = []
        for lang_dir in manifest.languages:
            rel = PurePosixPath(lang_dir)
            name = read_language_name(ext_dir / rel / LANGUAGE_CONFIG_FILE) or rel.name
            found.append((name, lang_dir))
        return found

    found = []
    for child in _scan(ext_dir / LANGUAGES_DIR):
        if child.is_dir():
            name = read_language_name(child / LANGUAGE_CONFIG_FILE) or child.name
            found.append((name, f"{LANGUAGES_DIR}/{child.name}"))
    return found


def _themes(ext_dir: Path, manifest: ExtensionManifest) -> list[tuple[str, str]]:
    if manifest.themes is not None:
        return [(PurePosixPath(theme).stem, theme) for theme in manifest.themes]

    return [
        (child.name.removesuffix(".json"), f"{THEMES_DIR}/{child.name}")
        for child in _scan(ext_dir / THEMES_DIR)
        if not child.is_dir() and child.name.endswith(".json")
    ]


def _scan(directory: Path) -> list[Path]:
    """Sorted children of ``directory``; empty if it doesn't exist."""
    try:
        return sorted(directory.iterdir())
    except OSError:
        return []
