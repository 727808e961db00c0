"""
Filesystem paths — where Zed keeps its extensions on this machine.

Resolved once per invocation and read-only afterwards.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from zedext.core.config.loader import ConfigError
from zedext.core.errors import InvalidExtensionIdError

INSTALLED_DIR = "installed"
INDEX_FILE = "index.json"


class UnsupportedPlatformError(ConfigError):
    """No known extensions directory for this operating system."""


@dataclass(frozen=True)
class ExtensionPaths:
    """The (base, installed, index) triple."""

    base: Path
    installed: Path
    index: Path

    @classmethod
    def from_base(cls, base: Path) -> ExtensionPaths:
        return cls(base=base, installed=base / INSTALLED_DIR, index=base / INDEX_FILE)

    def extension_dir(self, ext_id: str) -> Path:
        """Installation directory of one extension.

        Raises:
            InvalidExtensionIdError: If the ID is empty, a dot entry, or
                contains a path separator.
        """
        if ext_id in ("", ".", "..") or "/" in ext_id or "\\" in ext_id:
            raise InvalidExtensionIdError(f"invalid extension id: {ext_id!r}")
        return self.installed / ext_id


def resolve_paths(
    override: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    system: str | None = None,
) -> ExtensionPaths:
    """Resolve Zed's extensions directory.

    Args:
        override: Explicit base directory (``--extensions-dir``/``ZEDEXT_HOME``
            or ``extensions_dir`` in the settings file).
        env: Environment mapping (default: ``os.environ``).
        system: ``platform.system()`` value (default: the running OS).

    Raises:
        UnsupportedPlatformError: On operating systems other than macOS/Linux.
        ConfigError: If the home directory cannot be determined.
    """
    if override:
        return ExtensionPaths.from_base(Path(override).expanduser())
    env = os.environ if env is None else env
    return ExtensionPaths.from_base(_extensions_base(env, system or platform.system()))


def _extensions_base(env: Mapping[str, str], system: str) -> Path:
    if system == "Darwin":
        return _home(env) / "Library" / "Application Support" / "Zed" / "extensions"
    if system == "Linux":
        xdg = env.get("XDG_DATA_HOME")
        if xdg:
            return Path(xdg) / "zed" / "extensions"
        return _home(env) / ".local" / "share" / "zed" / "extensions"
    raise UnsupportedPlatformError(f"unsupported platform: {system}")


def _home(env: Mapping[str, str]) -> Path:
    home = env.get("HOME")
    if home:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError as e:
        raise ConfigError(f"cannot determine home directory: {e}") from e
