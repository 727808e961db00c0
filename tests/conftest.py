"""
Shared test fixtures and configuration.
"""

import io
import tarfile
import textwrap
from collections.abc import Callable
from contextlib import contextmanager
from email.message import Message
from pathlib import Path

import pytest

from zedext.core.config.paths import ExtensionPaths
from zedext.core.services.http_client import HttpResponse


class FakeHttpClient:
    """Stands in for HttpClient: ``handler(url)`` returns a response or an exception."""

    def __init__(self, handler: Callable[[str], object]):
        self.handler = handler
        self.calls: list[str] = []

    @contextmanager
    def stream(self, url: str):
        self.calls.append(url)
        outcome = self.handler(url)
        if isinstance(outcome, Exception):
            raise outcome
        yield outcome


def _response(status: int = 200, body: bytes = b"", content_length: int | None | str = "auto") -> HttpResponse:
    headers = Message()
    if content_length == "auto":
        headers["Content-Length"] = str(len(body))
    elif content_length is not None:
        headers["Content-Length"] = str(content_length)
    return HttpResponse(status=status, headers=headers, body=io.BytesIO(body))


@pytest.fixture
def make_response() -> Callable[..., HttpResponse]:
    """Build an HttpResponse; Content-Length defaults to the body size."""
    return _response


@pytest.fixture
def fake_client() -> Callable[[Callable[[str], object]], FakeHttpClient]:
    """Build a FakeHttpClient around a handler."""
    return FakeHttpClient


@pytest.fixture
def ext_paths(tmp_path: Path) -> ExtensionPaths:
    """Extension paths rooted in a temporary directory."""
    paths = ExtensionPaths.from_base(tmp_path / "extensions")
    paths.installed.mkdir(parents=True)
    return paths


def _tar_gz(entries: dict[str, bytes | None], mode: int = 0o644) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in entries.items():
            info = tarfile.TarInfo(name=name)
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(data)
                info.mode = mode
                tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def tar_gz_bytes() -> Callable[..., bytes]:
    """Build a .tar.gz in memory: ``{name: bytes}`` for files, ``{name: None}`` for dirs."""
    return _tar_gz


@pytest.fixture
def write_archive(tmp_path: Path) -> Callable[..., Path]:
    """Write a .tar.gz built from ``entries`` and return its path."""

    def _write(entries: dict[str, bytes | None], name: str = "ext.tar.gz", mode: int = 0o644) -> Path:
        path = tmp_path / name
        path.write_bytes(_tar_gz(entries, mode=mode))
        return path

    return _write


FOO_MANIFEST = textwrap.dedent("""\
    id = "foo"
    name = "Foo"
    version = "1.0.0"
    description = "Foo language support"
    authors = ["Jane <jane@example.com>"]
    repository = "https://github.com/example/foo"
    languages = ["languages/foo"]
    themes = ["themes/foo.json"]

    [grammars.foo]
    repository = "https://github.com/example/tree-sitter-foo"
    rev = "abc123"
""")


@pytest.fixture
def foo_files() -> dict[str, bytes | None]:
    """Archive contents of a typical extension "foo"."""
    return {
        "./": None,
        "./extension.toml": FOO_MANIFEST.encode(),
        "./languages/foo/config.toml": b'name = "Foo"\ngrammar = "foo"\n',
        "./languages/foo/highlights.scm": b"(identifier) @variable\n",
        "./themes/foo.json": b'{"name": "Foo", "themes": []}\n',
    }


@pytest.fixture
def install_extension_files(ext_paths: ExtensionPaths) -> Callable[..., Path]:
    """Lay out an installed extension directory from ``{relpath: text}``."""

    def _install(ext_id: str, files: dict[str, str]) -> Path:
        ext_dir = ext_paths.extension_dir(ext_id)
        for rel, content in files.items():
            target = ext_dir / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        ext_dir.mkdir(parents=True, exist_ok=True)
        return ext_dir

    return _install
