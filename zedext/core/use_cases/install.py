"""
Install use case — look up, download, extract, and index an extension.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from zedext.core.config.paths import ExtensionPaths
from zedext.core.errors import ZedExtError
from zedext.core.persistence.index_file import load_index, save_index
from zedext.core.services.archive import extract_tar_gz
from zedext.core.services.downloader import Downloader
from zedext.core.services.index_ops import reconcile_install
from zedext.core.services.registry import RegistryClient
from zedext.core.use_cases.result import LifecycleResult

logger = logging.getLogger(__name__)

TEMP_PREFIX = "zed-ext-"
TEMP_SUFFIX = ".tar.gz"


@dataclass
class InstallResult(LifecycleResult):
    """Install outcome plus what got installed."""

    name: str = ""
    version: str = ""
    install_dir: Path | None = None
    bytes_downloaded: int = 0
    files_extracted: int = 0

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update({
            "name": self.name,
            "version": self.version,
            "install_dir": str(self.install_dir) if self.install_dir else None,
            "bytes_downloaded": self.bytes_downloaded,
            "files_extracted": self.files_extracted,
        })
        return result


def install_extension(
    ext_id: str,
    version: str | None = None,
    *,
    paths: ExtensionPaths,
    registry: RegistryClient,
    downloader: Downloader,
) -> InstallResult:
    """Install (or reinstall) an extension.

    Any existing installation is replaced. The index is updated after the
    files are in place; an index failure is reported as a warning and
    does not undo the install.

    Args:
        ext_id: Exact extension ID.
        version: Version to install instead of the registry's latest.
        paths: Resolved extension paths.
        registry: Registry client for lookup and download URLs.
        downloader: Retrying fetcher for the archive.
    """
    result = InstallResult(extension_id=ext_id)

    try:
        paths.extension_dir(ext_id)
        entry = registry.find_exact(ext_id)
        result.name = entry.name
        result.version = version or entry.version
        result.install_dir = _install_files(ext_id, result, paths, registry, downloader)
    except (ZedExtError, OSError) as e:
        logger.debug("Install of %s failed", ext_id, exc_info=True)
        result.error = str(e)
        return result

    result.primary_ok = True
    _update_index(ext_id, result, paths)
    return result


def _install_files(
    ext_id: str,
    result: InstallResult,
    paths: ExtensionPaths,
    registry: RegistryClient,
    downloader: Downloader,
) -> Path:
    dest = paths.extension_dir(ext_id)

    if dest.exists():
        logger.info("Removing existing installation at %s", dest)
        shutil.rmtree(dest)

    fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX)
    os.close(fd)
    archive = Path(tmp_name)
    try:
        url = registry.download_url(ext_id, result.version)
        logger.info("Downloading %s", url)
        report = downloader.fetch(url, archive)
        result.bytes_downloaded = report.bytes_written

        dest.mkdir(parents=True, exist_ok=True)
        logger.info("Extracting to %s", dest)
        try:
            result.files_extracted = extract_tar_gz(archive, dest)
        except ZedExtError:
            shutil.rmtree(dest, ignore_errors=True)
            raise
    finally:
        archive.unlink(missing_ok=True)

    return dest


def _update_index(ext_id: str, result: LifecycleResult, paths: ExtensionPaths) -> None:
    try:
        index = load_index(paths)
        reconcile_install(ext_id, paths, index)
        save_index(paths, index)
    except ZedExtError as e:
        message = f"could not update index: {e}"
        logger.info(message)
        result.warnings.append(message)
        return
    result.index_updated = True
