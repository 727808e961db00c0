"""
Index file persistence — atomic read/write for ExtensionIndex.

The index lives at ``<extensions>/index.json``. Writes are atomic
(write to temp file, then rename) so a crash mid-write never leaves a
truncated index behind. There is no locking: two processes writing the
index at once can lose an update.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from zedext.core.config.paths import ExtensionPaths
from zedext.core.errors import IndexFileError
from zedext.core.models.index import ExtensionIndex

logger = logging.getLogger(__name__)


def load_index(paths: ExtensionPaths) -> ExtensionIndex:
    """Load the extension index.

    Args:
        paths: Resolved extension paths.

    Returns:
        ExtensionIndex. If the file doesn't exist, returns an empty index.

    Raises:
        IndexFileError: If the file exists but cannot be read or parsed.
    """
    path = paths.index
    if not path.exists():
        logger.info("No index at %s — starting empty", path)
        return ExtensionIndex()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise IndexFileError(f"read index: {e}") from e

    try:
        index = ExtensionIndex.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise IndexFileError(f"parse index {path}: {e}") from e

    logger.debug("Loaded index from %s (%d extensions)", path, len(index.extensions))
    return index


def save_index(paths: ExtensionPaths, index: ExtensionIndex) -> None:
    """Write the extension index (atomic write).

    Raises:
        IndexFileError: If the file cannot be written.
    """
    path = paths.index
    data = index.model_dump(mode="json")
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".index_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            tmp.chmod(0o644)
            tmp.replace(path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        raise IndexFileError(f"write index: {e}") from e

    logger.debug("Index saved to %s", path)
