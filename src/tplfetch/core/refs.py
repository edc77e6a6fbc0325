"""Template reference normalization and parsing.

Accepted forms, for GitHub:
  user/repo[/sub/path][#ref]
  github:user/repo...   gh:user/repo...
  git@github.com:user/repo.git
  https://github.com/user/repo[.git]
  https://github.com/user/repo/tree/<ref>/<path>
  https://github.com/user/repo/blob/<ref>/<file>
  https://raw.githubusercontent.com/user/repo/<ref>/<file>

and for Codeberg:
  codeberg:user/repo[/sub/path][#ref]
  git@codeberg.org:user/repo.git
  https://codeberg.org/user/repo[/src/branch/<ref>/<path>]

Everything normalizes to the canonical ``user/repo[/subpath][#ref]`` string,
prefixed with ``codeberg:`` for Codeberg. Unknown hosts and prefixes pass
through untouched so the clone collaborator can still try them.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from tplfetch.core.errors import InvalidReference
from tplfetch.core.models import DEFAULT_REF, Provider, TemplateSpec

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
_SSH_RE = re.compile(r"^git@([^:/\s]+):(.+)$")
_PREFIX_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.-]*):(?!//)(.*)$")

_PREFIXES = {
    "github": Provider.GITHUB,
    "gh": Provider.GITHUB,
    "codeberg": Provider.CODEBERG,
}
_HOSTS = {
    "github.com": Provider.GITHUB,
    "www.github.com": Provider.GITHUB,
    "codeberg.org": Provider.CODEBERG,
    "www.codeberg.org": Provider.CODEBERG,
}
_GITHUB_RAW_HOST = "raw.githubusercontent.com"
_GITHUB_VIEWS = {"tree", "blob"}
_CODEBERG_REF_KINDS = {"branch", "tag", "commit"}


def normalize(raw: str) -> str:
    """Rewrite any accepted reference form into its canonical spec string."""
    text = raw.strip()
    if not text:
        return raw

    if _URL_RE.match(text):
        return _normalize_url(text)

    ssh = _SSH_RE.match(text)
    if ssh:
        provider = _HOSTS.get(ssh.group(1).lower())
        if provider is None:
            return text
        return _normalize_shorthand(ssh.group(2), provider, text)

    prefixed = _PREFIX_RE.match(text)
    if prefixed:
        provider = _PREFIXES.get(prefixed.group(1).lower())
        if provider is None:
            return text
        return _normalize_shorthand(prefixed.group(2), provider, text)

    return _normalize_shorthand(text, Provider.GITHUB, text)


def detect_provider(spec: str) -> Provider | None:
    """Return the provider a canonical spec string belongs to, if any.

    Bare shorthand belongs to GitHub. URLs and SSH remotes that survived
    normalization are on hosts we do not handle.
    """
    text = spec.strip()
    if not text or _URL_RE.match(text) or _SSH_RE.match(text):
        return None
    prefixed = _PREFIX_RE.match(text)
    if prefixed:
        return _PREFIXES.get(prefixed.group(1).lower())
    return Provider.GITHUB


def parse_spec(spec: str, provider: Provider | None = None) -> TemplateSpec:
    """Parse a reference into a TemplateSpec.

    Raises InvalidReference when no supported provider matches or when the
    owner/repo segments are missing.
    """
    canonical = normalize(spec)
    provider = provider or detect_provider(canonical)
    if provider is None:
        raise InvalidReference(spec, "not a GitHub or Codeberg reference")

    base, _, fragment = _strip_prefix(canonical).partition("#")
    segments = _segments(base)
    if len(segments) < 2:
        raise InvalidReference(spec)

    owner, repo, rest = segments[0], _strip_git(segments[1]), segments[2:]
    ref = DEFAULT_REF

    # Codeberg web layout: owner/repo/src/branch/<ref>/<path>
    if (
        provider is Provider.CODEBERG
        and len(rest) >= 3
        and rest[0] == "src"
        and rest[1] in _CODEBERG_REF_KINDS
    ):
        ref, rest = rest[2], rest[3:]

    if fragment:
        ref = fragment

    return TemplateSpec(
        provider=provider,
        owner=owner,
        repo=repo,
        ref=ref,
        subpath="/".join(rest),
    )


def try_parse(spec: str) -> TemplateSpec | None:
    try:
        return parse_spec(spec)
    except InvalidReference:
        return None


# ── helpers ─────────────────────────────────────────────────────────


def _normalize_url(text: str) -> str:
    url, _, fragment = text.partition("#")
    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    segments = _segments(parts.path)

    if host == _GITHUB_RAW_HOST:
        # raw.githubusercontent.com/<owner>/<repo>/<ref>/<path>
        if len(segments) < 3:
            return text
        owner, repo, ref, rest = segments[0], segments[1], segments[2], segments[3:]
        return _compose(Provider.GITHUB, owner, repo, rest, fragment or ref)

    provider = _HOSTS.get(host)
    if provider is None or len(segments) < 2:
        return text

    owner, repo, rest = segments[0], segments[1], segments[2:]
    ref = ""
    if provider is Provider.GITHUB:
        if len(rest) >= 2 and rest[0] in _GITHUB_VIEWS:
            ref, rest = rest[1], rest[2:]
        else:
            # Other GitHub pages (issues, pulls, ...) resolve to the repo root.
            rest = []
    elif len(rest) >= 3 and rest[0] == "src" and rest[1] in _CODEBERG_REF_KINDS:
        ref, rest = rest[2], rest[3:]

    return _compose(provider, owner, repo, rest, fragment or ref)


def _normalize_shorthand(body: str, provider: Provider, original: str) -> str:
    base, _, fragment = body.partition("#")
    segments = _segments(base)
    if len(segments) < 2:
        return original
    return _compose(provider, segments[0], segments[1], segments[2:], fragment)


def _compose(provider: Provider, owner: str, repo: str, rest: list[str], ref: str) -> str:
    rest = list(rest)
    if "/" in ref:
        # "#<ref>/<path>" shorthand moves the path in front of the ref.
        ref, _, extra = ref.partition("/")
        rest.extend(_segments(extra))

    text = "/".join([owner, _strip_git(repo), *rest])
    if ref:
        text += f"#{ref}"
    if provider is Provider.GITHUB:
        return text
    return f"{provider.value}:{text}"


def _strip_prefix(spec: str) -> str:
    prefixed = _PREFIX_RE.match(spec)
    if prefixed and prefixed.group(1).lower() in _PREFIXES:
        return prefixed.group(2)
    return spec


def _strip_git(segment: str) -> str:
    return segment[: -len(".git")] if segment.endswith(".git") else segment


def _segments(path: str) -> list[str]:
    return [p for p in path.split("/") if p]
