"""
Error hierarchy — every failure the tool reports derives from ZedExtError.

Low-level errors (OSError, JSON/TOML decode errors, tarfile errors) are
wrapped into one of these with a contextual message and chained with
``raise ... from``.
"""

from __future__ import annotations


class ZedExtError(Exception):
    """Base exception for all zedext errors."""


class HttpError(ZedExtError):
    """Transport-level failure: DNS, connection refused, timeout."""


class RegistryError(ZedExtError):
    """The registry API answered with an error or an unreadable payload."""


class ExtensionNotFoundError(RegistryError):
    """No search result carries exactly the requested extension ID."""


class DownloadError(ZedExtError):
    """A download attempt failed, or all attempts were exhausted."""


class ArchiveError(ZedExtError):
    """The archive is corrupt, truncated, or contains an unsafe path."""


class ManifestError(ZedExtError):
    """extension.toml is missing or cannot be parsed."""


class IndexFileError(ZedExtError):
    """index.json cannot be read, parsed, or written."""


class NotInstalledError(ZedExtError):
    """The extension has no installation directory."""


class InvalidExtensionIdError(ZedExtError):
    """The extension ID cannot name a directory under installed/."""
