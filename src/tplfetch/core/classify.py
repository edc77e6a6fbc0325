"""Single-file classification for template subpaths."""

from __future__ import annotations

# Only these extensions mark a subpath as a file; anything else (including
# dotted directory names such as "v1.0") is a directory.
SINGLE_FILE_EXTENSIONS = frozenset({
    ".js", ".ts", ".mjs", ".cjs", ".jsx", ".tsx",
    ".json", ".toml", ".yaml", ".yml", ".xml",
    ".html", ".htm", ".css", ".svg",
    ".glsl", ".vert", ".frag",
    ".md", ".markdown", ".mdx", ".txt",
    ".py",
    ".zip", ".tar", ".tgz", ".gz",
})


def is_single_file(subpath: str) -> bool:
    """Return True when *subpath* names a file by a known extension."""
    if not subpath:
        return False
    basename = subpath.rstrip("/").rsplit("/", 1)[-1]
    stem, dot, ext = basename.rpartition(".")
    if not dot or not stem or not ext:
        return False
    return f".{ext.lower()}" in SINGLE_FILE_EXTENSIONS
