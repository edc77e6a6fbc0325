import httpx
import pytest

from tplfetch.core.errors import DestinationError, HttpStatus, NotFound
from tplfetch.core.models import Provider
from tplfetch.fetchers import codeberg, download_file, github


def test_raw_urls():
    assert github.raw_url("user", "repo", "dev", "src/a.js") == (
        "https://raw.githubusercontent.com/user/repo/dev/src/a.js"
    )
    assert codeberg.raw_url("user", "repo", "main", "README.md") == (
        "https://codeberg.org/api/v1/repos/user/repo/raw/README.md?ref=main"
    )
    assert codeberg.raw_url("user", "repo", "develop", "src/file.js") == (
        "https://codeberg.org/api/v1/repos/user/repo/raw/src/file.js?ref=develop"
    )


def test_archive_urls_and_roots():
    assert github.archive_url("user", "repo", "main") == "https://codeload.github.com/user/repo/tar.gz/main"
    assert github.archive_root("repo", "main") == "repo-main"
    assert codeberg.archive_url("user", "repo", "v1.0") == "https://codeberg.org/user/repo/archive/v1.0.tar.gz"
    assert codeberg.archive_root("repo", "v1.0") == "repo"


def test_downloads_into_destination_directory(mock_client, dest):
    client = mock_client(lambda request: httpx.Response(200, content=b"// file content"))
    path = download_file(Provider.CODEBERG, "user", "repo", "main", "path/to/test.js", dest, client=client)
    assert path == dest / "test.js"
    assert path.read_text() == "// file content"
    assert client.requested == [
        "https://codeberg.org/api/v1/repos/user/repo/raw/path/to/test.js?ref=main",
    ]


def test_creates_nested_destination(mock_client, tmp_path):
    nested = tmp_path / "nested" / "dir"
    client = mock_client(lambda request: httpx.Response(200, content=b"content"))
    download_file(Provider.GITHUB, "user", "repo", "main", "file.js", nested, client=client)
    assert (nested / "file.js").read_bytes() == b"content"


def test_existing_destination_is_reused(mock_client, dest):
    dest.mkdir()
    (dest / "other.txt").write_text("keep")
    client = mock_client(lambda request: httpx.Response(200, content=b"new"))
    download_file(Provider.GITHUB, "user", "repo", "main", "README.md", dest, client=client)
    assert sorted(p.name for p in dest.iterdir()) == ["README.md", "other.txt"]


def test_follows_redirect_to_final_body(mock_client, dest):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "raw.githubusercontent.com":
            return httpx.Response(301, headers={"Location": "https://new-location.test/file.js"})
        return httpx.Response(200, content=b"redirected content")

    client = mock_client(handler)
    download_file(Provider.GITHUB, "user", "repo", "main", "file.js", dest, client=client)
    assert (dest / "file.js").read_text() == "redirected content"
    assert len(client.requested) == 2


def test_404_is_not_found(mock_client, dest):
    client = mock_client(lambda request: httpx.Response(404))
    with pytest.raises(NotFound, match="File not found: https://raw.githubusercontent.com/user/repo/main/missing.js"):
        download_file(Provider.GITHUB, "user", "repo", "main", "missing.js", dest, client=client)
    assert not (dest / "missing.js").exists()


def test_other_status_is_http_status(mock_client, dest):
    client = mock_client(lambda request: httpx.Response(500))
    with pytest.raises(HttpStatus) as excinfo:
        download_file(Provider.CODEBERG, "user", "repo", "main", "file.js", dest, client=client)
    assert not isinstance(excinfo.value, NotFound)
    assert excinfo.value.status_code == 500


def test_destination_that_is_a_file(mock_client, dest):
    dest.write_text("x")
    client = mock_client(lambda request: httpx.Response(200, content=b"content"))
    with pytest.raises(DestinationError, match="Cannot write to"):
        download_file(Provider.GITHUB, "user", "repo", "main", "file.js", dest, client=client)
    assert client.requested == []


def test_unwritable_target_is_destination_error(mock_client, dest):
    (dest / "file.js").mkdir(parents=True)
    client = mock_client(lambda request: httpx.Response(200, content=b"content"))
    with pytest.raises(DestinationError) as excinfo:
        download_file(Provider.GITHUB, "user", "repo", "main", "file.js", dest, client=client)
    assert isinstance(excinfo.value.cause, IsADirectoryError)
