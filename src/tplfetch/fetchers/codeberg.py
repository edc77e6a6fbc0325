"""Codeberg (Forgejo) endpoints: raw file API and archive downloads."""

from __future__ import annotations

from urllib.parse import quote, urlencode

BASE = "https://codeberg.org"


def raw_url(owner: str, repo: str, ref: str, filepath: str) -> str:
    return f"{BASE}/api/v1/repos/{owner}/{repo}/raw/{quote(filepath)}?{urlencode({'ref': ref})}"


def archive_url(owner: str, repo: str, ref: str) -> str:
    return f"{BASE}/{owner}/{repo}/archive/{ref}.tar.gz"


def archive_root(repo: str, ref: str) -> str:
    """Forgejo archives use the bare repository name as the top directory."""
    return repo
