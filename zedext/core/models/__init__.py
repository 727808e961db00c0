"""
Domain models — Pydantic types for extensions, the index, and the registry.

All models are re-exported here for convenient access:

    from zedext.core.models import ExtensionIndex, ExtensionManifest, RegistryEntry
"""

from zedext.core.models.index import (
    ExtensionIndex,
    IndexExtensionEntry,
    IndexResourceEntry,
)
from zedext.core.models.manifest import ExtensionManifest, ManifestLib
from zedext.core.models.registry import RegistryEntry, SearchResponse

__all__ = [
    # index.py
    "ExtensionIndex",
    # manifest.py
    "ExtensionManifest",
    "IndexExtensionEntry",
    "IndexResourceEntry",
    "ManifestLib",
    # registry.py
    "RegistryEntry",
    "SearchResponse",
]
