"""
Lifecycle result — what install/remove report back to the caller.

Install and remove have a primary effect (files on disk) and a
secondary one (the index). The secondary step is best-effort: when it
fails after the primary succeeded, the operation is ``partial`` rather
than ``failed``, and the reason is kept in ``warnings``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LifecycleResult:
    """Outcome of an install or remove."""

    extension_id: str
    primary_ok: bool = False       # files installed / removed
    index_updated: bool = False    # index.json reconciled and saved
    warnings: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def status(self) -> str:
        """ok, partial, or failed."""
        if not self.primary_ok:
            return "failed"
        return "ok" if self.index_updated else "partial"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "extension_id": self.extension_id,
            "status": self.status,
            "index_updated": self.index_updated,
        }
        if self.warnings:
            result["warnings"] = list(self.warnings)
        if self.error:
            result["error"] = self.error
        return result
