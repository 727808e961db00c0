"""
HTTP client — the single network entry point, built once per process.

A thin wrapper over ``urllib.request`` that applies a timeout and a
User-Agent to every request. Components receive the client explicitly
(RegistryClient, Downloader) instead of reaching for a global, which
also lets tests hand in a fake with the same ``stream()`` method.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from email.message import Message
from typing import BinaryIO

from zedext import __version__
from zedext.core.errors import HttpError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"zedext/{__version__}"


@dataclass
class HttpResponse:
    """Status, headers and an unread body stream."""

    status: int
    headers: Message
    body: BinaryIO

    @property
    def ok(self) -> bool:
        return self.status == 200

    @property
    def content_length(self) -> int | None:
        """Advertised body size, or None when the server did not send one."""
        raw = self.headers.get("Content-Length") if self.headers is not None else None
        if raw is None:
            return None
        try:
            value = int(raw)
        except ValueError:
            return None
        return value if value >= 0 else None

    def read_text(self) -> str:
        return self.body.read().decode("utf-8", errors="replace")


class HttpClient:
    """Blocking HTTP GET client with a fixed timeout."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, user_agent: str = DEFAULT_USER_AGENT):
        self.timeout = timeout
        self.user_agent = user_agent

    @contextmanager
    def stream(self, url: str) -> Iterator[HttpResponse]:
        """GET ``url`` and yield the response with its body still unread.

        Redirects are followed. Error statuses (4xx/5xx) are yielded like
        any other response so callers decide what a bad status means.

        Raises:
            HttpError: On transport failures (DNS, refused, timeout) or a
                malformed URL.
        """
        logger.debug("GET %s", url)
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            resp = urllib.request.urlopen(req, timeout=self.timeout)
        except urllib.error.HTTPError as e:
            resp = e
        except (urllib.error.URLError, OSError) as e:
            raise HttpError(f"request to {url} failed: {e}") from e
        except ValueError as e:
            raise HttpError(f"invalid URL {url!r}: {e}") from e

        try:
            yield HttpResponse(status=resp.status, headers=resp.headers, body=resp)
        finally:
            resp.close()
