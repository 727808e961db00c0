"""
Downloader — fetch a URL to a local file with bounded retries.

Every attempt either leaves the destination holding exactly the bytes
the server sent, or deletes it. Attempt failures are logged and
swallowed; only exhausting the retry policy raises.
"""

from __future__ import annotations

import http.client
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from zedext.core.errors import DownloadError, ZedExtError
from zedext.core.reliability.retry import RetryPolicy

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int, int], None]


@dataclass
class DownloadReport:
    """Outcome of a successful fetch."""

    url: str
    path: Path
    bytes_written: int
    attempts: int


class Downloader:
    """Retrying file fetcher.

    Args:
        client: An HttpClient (or anything with a compatible ``stream()``).
        policy: Retry bounds and backoff.
        sleep: Sleep function, injectable so tests don't wait.
        on_progress: Called with ``(current, total)`` after each chunk,
            only when the server advertised a content length.
    """

    def __init__(
        self,
        client,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: ProgressCallback | None = None,
    ):
        self.client = client
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.on_progress = on_progress

    def fetch(self, url: str, dest: Path) -> DownloadReport:
        """Download ``url`` into ``dest``.

        Raises:
            DownloadError: After every attempt failed. ``dest`` does not exist.
        """
        last_error: Exception | None = None

        for attempt in range(self.policy.total_attempts):
            if attempt > 0:
                delay = self.policy.delay_for(attempt)
                logger.warning("retry %d/%d in %gs...", attempt, self.policy.max_retries, delay)
                self.sleep(delay)

            try:
                written = self._fetch_once(url, dest)
            except (ZedExtError, OSError) as e:
                last_error = e
                logger.warning("attempt failed: %s", e)
                continue

            logger.info("Downloaded %s (%s) in %d attempt(s)", url, format_bytes(written), attempt + 1)
            return DownloadReport(url=url, path=dest, bytes_written=written, attempts=attempt + 1)

        dest.unlink(missing_ok=True)
        raise DownloadError(
            f"download failed after {self.policy.max_retries} retries: {last_error}"
        ) from last_error

    def _fetch_once(self, url: str, dest: Path) -> int:
        try:
            with self.client.stream(url) as resp:
                if not resp.ok:
                    raise DownloadError(f"HTTP {resp.status}")

                total = resp.content_length
                written = 0
                with dest.open("wb") as out:
                    while True:
                        chunk = resp.body.read(CHUNK_SIZE)
                        if not chunk:
                            break
                        out.write(chunk)
                        written += len(chunk)
                        if total and self.on_progress is not None:
                            self.on_progress(written, total)
        except (OSError, http.client.HTTPException) as e:
            dest.unlink(missing_ok=True)
            raise DownloadError(f"transfer error: {e}") from e
        except ZedExtError:
            dest.unlink(missing_ok=True)
            raise

        if total and written != total:
            dest.unlink(missing_ok=True)
            raise DownloadError(f"incomplete download: got {written} of {total} bytes")

        return written


def format_bytes(size: int) -> str:
    """Human-readable byte count, 1024-based: ``512 B``, ``1.5 KB``, ``3.2 MB``."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"
