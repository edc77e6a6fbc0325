"""I/O layer — fetch template files from hosting providers.

Each provider module exposes the same three functions:
  raw_url(owner, repo, ref, filepath)   single-file content endpoint
  archive_url(owner, repo, ref)         .tar.gz of the tree at ref
  archive_root(repo, ref)               top-level directory in that archive

  github    raw.githubusercontent.com / codeload.github.com
  codeberg  codeberg.org raw API / archive
  git       primary clone collaborator (any host git can reach)
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import ModuleType

import httpx

from tplfetch.core.errors import DestinationError, HttpStatus, NotFound
from tplfetch.core.models import Provider
from tplfetch.fetchers import archive, codeberg, github
from tplfetch.fetchers.http import open_stream

logger = logging.getLogger(__name__)

PROVIDERS: dict[Provider, ModuleType] = {
    Provider.GITHUB: github,
    Provider.CODEBERG: codeberg,
}


def download_file(
    provider: Provider,
    owner: str,
    repo: str,
    ref: str,
    filepath: str,
    dest: Path,
    *,
    client: httpx.Client | None = None,
) -> Path:
    """Download one file into the *dest* directory. Returns the file path.

    The file keeps the final segment of *filepath* as its name; *dest* is
    always treated as a directory.
    """
    url = PROVIDERS[provider].raw_url(owner, repo, ref, filepath)
    _ensure_dir(dest)
    target = dest / filepath.rstrip("/").rsplit("/", 1)[-1]

    logger.debug("Downloading %s -> %s", url, target)
    try:
        with open_stream(url, client=client) as response:
            with target.open("wb") as fh:
                for chunk in response.iter_bytes():
                    fh.write(chunk)
    except HttpStatus as exc:
        if exc.status_code == 404:
            raise NotFound(url) from exc
        raise
    except OSError as exc:
        raise DestinationError(target, exc) from exc
    return target


def download_archive(
    provider: Provider,
    owner: str,
    repo: str,
    ref: str,
    subpath: str,
    dest: Path,
    *,
    client: httpx.Client | None = None,
) -> list[Path]:
    """Download the tarball at *ref* and extract *subpath* (or everything) into *dest*."""
    module = PROVIDERS[provider]
    url = module.archive_url(owner, repo, ref)
    prefix = archive.strip_prefix(module.archive_root(repo, ref), subpath)
    _ensure_dir(dest)

    logger.debug("Extracting %s (prefix %s) -> %s", url, prefix, dest)
    with open_stream(url, client=client) as response:
        return archive.extract_tar_gz(response.iter_bytes(), dest, prefix, detect_root=True)


def _ensure_dir(dest: Path) -> None:
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DestinationError(dest, exc) from exc
