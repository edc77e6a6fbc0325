"""GitHub endpoints: raw file content and codeload tarballs."""

from __future__ import annotations

from urllib.parse import quote

RAW_BASE = "https://raw.githubusercontent.com"
CODELOAD_BASE = "https://codeload.github.com"


def raw_url(owner: str, repo: str, ref: str, filepath: str) -> str:
    return f"{RAW_BASE}/{owner}/{repo}/{ref}/{quote(filepath)}"


def archive_url(owner: str, repo: str, ref: str) -> str:
    return f"{CODELOAD_BASE}/{owner}/{repo}/tar.gz/{ref}"


def archive_root(repo: str, ref: str) -> str:
    """Top-level directory codeload puts in the tarball (``repo-ref``).

    Slashes in branch names become dashes in the directory name. Tags with
    a leading ``v`` and short SHAs are named differently by codeload, so
    extraction checks this against the archive itself.
    """
    return f"{repo}-{ref.replace('/', '-')}"
