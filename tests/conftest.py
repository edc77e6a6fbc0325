import io
import tarfile
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    """Click CLI runner fixture."""
    return CliRunner()


@pytest.fixture
def dest(tmp_path: Path) -> Path:
    """Destination directory that does not exist yet."""
    return tmp_path / "out"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Keep the user's config and env files out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("TPLFETCH_CONFIG", raising=False)
    monkeypatch.delenv("TPLFETCH_ENV_FILE", raising=False)
    monkeypatch.delenv("TPLFETCH_NO_CLONE", raising=False)
    monkeypatch.delenv("TPLFETCH_GIT", raising=False)


@pytest.fixture
def mock_client():
    """Build an httpx.Client whose requests are answered by *handler*.

    Every requested URL is appended to ``client.requested``.
    """
    def _make(handler) -> httpx.Client:
        requested: list[str] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_record), follow_redirects=False)
        client.requested = requested
        return client

    return _make


@pytest.fixture
def make_tarball():
    """Build .tar.gz bytes from {path: content}.

    Content None makes a directory, a str makes a symlink pointing at it.
    """
    def _make(entries: dict[str, bytes | str | None]) -> bytes:
        buf = io.BytesIO()
        with tarfile.open(fileobj=buf, mode="w:gz") as tar:
            for name, content in entries.items():
                info = tarfile.TarInfo(name)
                if content is None:
                    info.type = tarfile.DIRTYPE
                    info.mode = 0o755
                    tar.addfile(info)
                elif isinstance(content, str):
                    info.type = tarfile.SYMTYPE
                    info.linkname = content
                    tar.addfile(info)
                else:
                    info.size = len(content)
                    info.mode = 0o644
                    tar.addfile(info, io.BytesIO(content))
        return buf.getvalue()

    return _make
