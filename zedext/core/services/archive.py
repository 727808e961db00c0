"""
Archive extraction — unpack an extension's .tar.gz into its directory.

The archive is read as a stream, entry by entry. Entry names are
normalised before use and any name that would land outside the
destination (``..`` after normalisation) aborts the whole extraction.
Only directories and regular files are materialised; symlinks, hard
links and device nodes are skipped.
"""

from __future__ import annotations

import logging
import os
import posixpath
import shutil
import tarfile
import zlib
from pathlib import Path

from zedext.core.errors import ArchiveError

logger = logging.getLogger(__name__)

DIR_MODE = 0o755


def safe_member_path(name: str) -> str | None:
    """Normalise an archive entry name.

    Returns:
        The cleaned relative path, or None for entries that refer to the
        archive root itself (``.``, ``./``).

    Raises:
        ArchiveError: If the path escapes the destination.
    """
    cleaned = posixpath.normpath(name.replace("\\", "/").lstrip("/"))
    if cleaned in (".", ""):
        return None
    if ".." in cleaned.split("/"):
        raise ArchiveError(f"invalid path in archive: {name}")
    return cleaned


def extract_tar_gz(archive: Path, dest: Path) -> int:
    """Extract a gzip-compressed tarball into ``dest``.

    Args:
        archive: Path to the .tar.gz file.
        dest: Existing destination directory.

    Returns:
        Number of regular files written.

    Raises:
        ArchiveError: On unsafe paths or a corrupt/truncated archive.
    """
    files_written = 0
    try:
        with tarfile.open(archive, mode="r|gz") as tar:
            for member in tar:
                rel = safe_member_path(member.name)
                if rel is None:
                    continue
                target = dest / rel

                if member.isdir():
                    target.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
                elif member.isreg():
                    target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
                    _write_member(tar, member, target)
                    files_written += 1
                else:
                    logger.debug("Skipping non-regular entry %s (type %r)", member.name, member.type)
    except ArchiveError:
        raise
    except (tarfile.TarError, EOFError, zlib.error) as e:
        raise ArchiveError(f"corrupt archive {archive.name}: {e}") from e
    except OSError as e:
        raise ArchiveError(f"cannot extract {archive.name}: {e}") from e

    logger.debug("Extracted %d files from %s into %s", files_written, archive, dest)
    return files_written


def _write_member(tar: tarfile.TarFile, member: tarfile.TarInfo, target: Path) -> None:
    source = tar.extractfile(member)
    if source is None:
        raise ArchiveError(f"cannot read {member.name} from archive")
    fd = os.open(target, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, member.mode & 0o7777)
    with source, os.fdopen(fd, "wb") as out:
        shutil.copyfileobj(source, out)
