"""Repository for the user config.toml."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import tomlkit

from tplfetch.core import paths
from tplfetch.core.env import env_flag
from tplfetch.fetchers.http import DEFAULT_USER_AGENT


@dataclass
class Settings:
    """Effective configuration: config file, then environment overrides."""
    user_agent: str = DEFAULT_USER_AGENT
    clone_enabled: bool = True
    git: str = "git"


# ── Serialization ───────────────────────────────────────────────────


def dump(settings: Settings) -> str:
    """Serialize Settings to a TOML string."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("tplfetch configuration"))
    doc.add(tomlkit.nl())

    http = tomlkit.table()
    http.add("user_agent", settings.user_agent)
    doc.add("http", http)

    clone = tomlkit.table()
    clone.add("enabled", settings.clone_enabled)
    clone.add("git", settings.git)
    doc.add("clone", clone)

    return tomlkit.dumps(doc)


def load(path: Path | None = None) -> Settings:
    """Read config.toml (if present) and apply TPLFETCH_* overrides."""
    path = path or paths.config_path()
    settings = Settings()

    if path.is_file():
        raw = tomlkit.loads(path.read_text())
        http_raw = raw.get("http", {})
        clone_raw = raw.get("clone", {})
        settings = Settings(
            user_agent=str(http_raw.get("user_agent", settings.user_agent)),
            clone_enabled=bool(clone_raw.get("enabled", settings.clone_enabled)),
            git=str(clone_raw.get("git", settings.git)),
        )

    if env_flag("TPLFETCH_NO_CLONE"):
        settings.clone_enabled = False
    git = os.environ.get("TPLFETCH_GIT", "").strip()
    if git:
        settings.git = git
    return settings


def save(settings: Settings, path: Path | None = None) -> None:
    """Write config to disk."""
    path = path or paths.config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump(settings))
