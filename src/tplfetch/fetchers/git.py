"""Primary clone collaborator — materialize a template with git.

Uses sparse checkout when a subpath is specified to avoid downloading
the entire repository, and a depth-1 clone otherwise. Works for any host
git can reach, not only the providers the HTTP fallbacks understand.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
import tempfile
from pathlib import Path

from tplfetch.core import refs
from tplfetch.core.models import DEFAULT_REF, Provider

logger = logging.getLogger(__name__)

_HOST_PREFIXES = {
    "gitlab": "https://gitlab.com",
    "bitbucket": "https://bitbucket.org",
}
_PROVIDER_HOSTS = {
    Provider.GITHUB: "https://github.com",
    Provider.CODEBERG: "https://codeberg.org",
}


class CloneError(RuntimeError):
    """git could not materialize the requested template."""


def resolve_remote(spec: str) -> tuple[str, str | None, str]:
    """Translate a normalized spec into (repo_url, ref, subpath).

    *ref* is None when the spec names no ref, meaning the remote's default
    branch.
    """
    text = spec.strip()
    parsed = refs.try_parse(text)
    if parsed is not None:
        explicit = "#" in text or parsed.ref != DEFAULT_REF
        explicit_ref = parsed.ref if explicit else None
        base = _PROVIDER_HOSTS[parsed.provider]
        return f"{base}/{parsed.owner}/{parsed.repo}.git", explicit_ref, parsed.subpath

    base_part, _, fragment = text.partition("#")
    prefixed = re.match(r"^([a-z]+):(?!//)(.+)$", base_part)
    if prefixed and prefixed.group(1) in _HOST_PREFIXES:
        parts = [p for p in prefixed.group(2).split("/") if p]
        if len(parts) >= 2:
            repo = parts[1].removesuffix(".git")
            url = f"{_HOST_PREFIXES[prefixed.group(1)]}/{parts[0]}/{repo}.git"
            return url, fragment or None, "/".join(parts[2:])

    if re.match(r"^(https?://|git@|ssh://)", base_part):
        return base_part, fragment or None, ""

    raise CloneError(f"Cannot clone template reference: {spec}")


def _run(args: list[str], **kwargs) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, text=True, **kwargs)


def _checked(args: list[str], what: str, *, verbose: bool) -> subprocess.CompletedProcess:
    try:
        r = _run(args)
    except FileNotFoundError as exc:
        raise CloneError(f"git executable not found: {args[0]}") from exc
    if verbose and r.stderr.strip():
        logger.debug("%s: %s", what, r.stderr.strip())
    if r.returncode != 0:
        raise CloneError(f"{what} failed: {r.stderr.strip()}")
    return r


def _clone_args(git: str, ref: str | None, *extra: str) -> list[str]:
    args = [git, "clone", *extra, "--depth", "1"]
    if ref:
        args += ["--branch", ref]
    return args


def _sparse_clone(
    git: str, repo_url: str, ref: str | None, subpath: str, tmp_repo: Path, *, verbose: bool,
) -> None:
    """Clone only the needed subpath using sparse checkout + treeless filter."""
    args = _clone_args(git, ref, "--filter=blob:none", "--no-checkout")
    _checked([*args, repo_url, str(tmp_repo)], "git clone", verbose=verbose)
    _checked(
        [git, "-C", str(tmp_repo), "sparse-checkout", "set", subpath],
        "git sparse-checkout", verbose=verbose,
    )
    _checked([git, "-C", str(tmp_repo), "checkout"], "git checkout", verbose=verbose)


def _shallow_clone(git: str, repo_url: str, ref: str | None, tmp_repo: Path, *, verbose: bool) -> None:
    """Depth-1 clone of the whole tree."""
    args = _clone_args(git, ref)
    _checked([*args, repo_url, str(tmp_repo)], "git clone", verbose=verbose)


def clone(spec: str, dest: Path, *, verbose: bool = False, git: str = "git") -> str:
    """Clone the template named by *spec* into *dest*. Returns the commit hash.

    The contents of the repository (or of its subpath) land directly in
    *dest*; the .git directory is not copied.
    """
    repo_url, ref, subpath = resolve_remote(spec)

    with tempfile.TemporaryDirectory() as tmp:
        tmp_repo = Path(tmp) / "repo"

        if subpath:
            _sparse_clone(git, repo_url, ref, subpath, tmp_repo, verbose=verbose)
        else:
            _shallow_clone(git, repo_url, ref, tmp_repo, verbose=verbose)

        source = tmp_repo / subpath if subpath else tmp_repo
        if not source.is_dir():
            raise CloneError(f"Path '{subpath}' not found in {repo_url}")

        shutil.copytree(
            source, dest, dirs_exist_ok=True, ignore=shutil.ignore_patterns(".git"),
        )

        r = _checked([git, "-C", str(tmp_repo), "rev-parse", "HEAD"], "git rev-parse", verbose=verbose)
        commit = r.stdout.strip()
        logger.debug("Cloned %s at %s into %s", repo_url, commit, dest)
        return commit
