"""Data shapes for template references.

A reference resolves to a TemplateSpec:
    provider  github | codeberg
    owner     account or organisation
    repo      repository name (no .git suffix)
    ref       branch, tag or commit  (default "main")
    subpath   path inside the repository ("" for the root)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from tplfetch.core.classify import is_single_file
from tplfetch.core.errors import InvalidReference

DEFAULT_REF = "main"


class Provider(enum.Enum):
    """Supported hosting providers. The value doubles as the shorthand prefix."""

    GITHUB = "github"
    CODEBERG = "codeberg"


@dataclass(frozen=True)
class TemplateSpec:
    """Canonical parsed form of a template reference."""

    provider: Provider
    owner: str
    repo: str
    ref: str = DEFAULT_REF
    subpath: str = ""

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise InvalidReference(f"{self.owner}/{self.repo}")

    @property
    def shorthand(self) -> str:
        """``owner/repo[/subpath][#ref]`` with the default ref left implicit."""
        text = f"{self.owner}/{self.repo}"
        if self.subpath:
            text += f"/{self.subpath}"
        if self.ref != DEFAULT_REF:
            text += f"#{self.ref}"
        return text

    @property
    def canonical(self) -> str:
        if self.provider is Provider.GITHUB:
            return self.shorthand
        return f"{self.provider.value}:{self.shorthand}"


@dataclass(frozen=True)
class RetrievalTarget:
    spec: TemplateSpec
    is_single_file: bool
    destination: Path

    @classmethod
    def for_spec(cls, spec: TemplateSpec, destination: Path) -> RetrievalTarget:
        return cls(spec=spec, is_single_file=is_single_file(spec.subpath), destination=destination)


@dataclass
class FetchOutcome:
    """What a successful fetch did.

    *target* is None when the reference was handed to the clone
    collaborator without any provider understanding it.
    """
    reference: str
    normalized: str
    strategy: str
    target: RetrievalTarget | None = None
