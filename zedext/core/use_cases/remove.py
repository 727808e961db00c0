"""
Remove use case — delete an extension's files and unindex it.
"""

from __future__ import annotations

import logging
import shutil

from zedext.core.config.paths import ExtensionPaths
from zedext.core.errors import NotInstalledError, ZedExtError
from zedext.core.persistence.index_file import load_index, save_index
from zedext.core.services.index_ops import reconcile_remove
from zedext.core.use_cases.result import LifecycleResult

logger = logging.getLogger(__name__)


def remove_extension(ext_id: str, *, paths: ExtensionPaths) -> LifecycleResult:
    """Remove an installed extension.

    The directory is deleted first; if the index cannot be updated
    afterwards the result is ``partial`` and the index keeps a stale entry.
    """
    result = LifecycleResult(extension_id=ext_id)
    try:
        ext_dir = paths.extension_dir(ext_id)
        if not ext_dir.is_dir():
            raise NotInstalledError(f"extension {ext_id!r} is not installed")
        shutil.rmtree(ext_dir)
    except (ZedExtError, OSError) as e:
        result.error = str(e)
        return result

    result.primary_ok = True
    logger.info("Removed %s", ext_dir)

    try:
        index = load_index(paths)
        reconcile_remove(ext_id, index)
        save_index(paths, index)
    except ZedExtError as e:
        message = f"could not update index: {e}"
        logger.info(message)
        result.warnings.append(message)
        return result

    result.index_updated = True
    return result
