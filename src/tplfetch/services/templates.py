"""Template retrieval service — resolve a reference and materialize it.

The strategies are an ordered table of (name, applies, run) rows. The rows
that apply to a reference form its attempt chain, tried strictly in order:

  codeberg-file      Codeberg single file (raw API)
  codeberg-archive   Codeberg directory (archive)
  github-file        GitHub single file (raw.githubusercontent.com)
  clone              primary clone collaborator (git by default)
  github-archive     GitHub directory (codeload), fallback after clone

At most one fallback follows a failed first attempt.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import httpx

from tplfetch import fetchers
from tplfetch.core import refs
from tplfetch.core.errors import (
    FallbackExhausted,
    InvalidReference,
    PrimaryMechanismFailure,
    TemplateFetchError,
)
from tplfetch.core.models import FetchOutcome, Provider, RetrievalTarget
from tplfetch.fetchers import git
from tplfetch.fetchers.http import new_client
from tplfetch.repo.config import Settings

logger = logging.getLogger(__name__)

# clone(normalized_spec, destination, *, verbose=False); raises on failure.
Cloner = Callable[..., object]


@dataclass
class _Attempt:
    """Per-invocation state shared by the strategies."""
    reference: str
    normalized: str
    provider: Provider | None
    target: RetrievalTarget | None
    destination: Path
    cloner: Cloner
    client: httpx.Client
    settings: Settings
    verbose: bool

    @property
    def single_file(self) -> bool:
        return self.target is not None and self.target.is_single_file

    def on(self, provider: Provider) -> bool:
        return self.target is not None and self.target.spec.provider is provider


def _download_file(a: _Attempt) -> None:
    spec = a.target.spec
    fetchers.download_file(
        spec.provider, spec.owner, spec.repo, spec.ref, spec.subpath, a.destination,
        client=a.client,
    )


def _download_archive(a: _Attempt) -> None:
    spec = a.target.spec
    fetchers.download_archive(
        spec.provider, spec.owner, spec.repo, spec.ref, spec.subpath, a.destination,
        client=a.client,
    )


def _clone(a: _Attempt) -> None:
    try:
        a.cloner(a.normalized, a.destination, verbose=a.verbose)
    except Exception as exc:
        raise PrimaryMechanismFailure(exc) from exc


def _wants_clone(a: _Attempt) -> bool:
    if a.provider is Provider.CODEBERG or a.single_file:
        return False
    return a.settings.clone_enabled


STRATEGIES: list[tuple[str, Callable[[_Attempt], bool], Callable[[_Attempt], None]]] = [
    ("codeberg-file", lambda a: a.on(Provider.CODEBERG) and a.single_file, _download_file),
    ("codeberg-archive", lambda a: a.on(Provider.CODEBERG) and not a.single_file, _download_archive),
    ("github-file", lambda a: a.on(Provider.GITHUB) and a.single_file, _download_file),
    ("clone", _wants_clone, _clone),
    ("github-archive", lambda a: a.on(Provider.GITHUB) and not a.single_file, _download_archive),
]


def resolve(reference: str, destination: str | Path = ".") -> tuple[str, RetrievalTarget | None]:
    """Normalize *reference* and, where a provider understands it, build its target.

    Codeberg references that do not parse raise InvalidReference; for
    everything else an unparseable reference yields a None target.
    """
    normalized = refs.normalize(reference)
    provider = refs.detect_provider(normalized)
    if provider is Provider.CODEBERG:
        spec = refs.parse_spec(normalized, provider)
    elif provider is Provider.GITHUB:
        spec = refs.try_parse(normalized)
    else:
        spec = None
    target = RetrievalTarget.for_spec(spec, Path(destination)) if spec else None
    return normalized, target


def fetch_template(
    reference: str,
    destination: str | Path,
    *,
    verbose: bool = False,
    cloner: Cloner | None = None,
    client: httpx.Client | None = None,
    settings: Settings | None = None,
    on_step: Callable[[str], None] | None = None,
) -> FetchOutcome:
    """Materialize the template named by *reference* into *destination*.

    Raises a TemplateFetchError subclass on failure. When the clone and its
    archive fallback both fail the error is FallbackExhausted, carrying
    both messages. Partial output is left in place.

    *on_step* is called with a short status line before each strategy runs.
    """
    settings = settings or Settings()
    destination = Path(destination)
    normalized, target = resolve(reference, destination)
    if cloner is None:
        cloner = functools.partial(git.clone, git=settings.git)

    owns_client = client is None
    if client is None:
        client = new_client(user_agent=settings.user_agent)
    try:
        attempt = _Attempt(
            reference=reference,
            normalized=normalized,
            provider=refs.detect_provider(normalized),
            target=target,
            destination=destination,
            cloner=cloner,
            client=client,
            settings=settings,
            verbose=verbose,
        )
        chain = [(name, run) for name, applies, run in STRATEGIES if applies(attempt)]
        if not chain:
            raise InvalidReference(reference, "not a GitHub or Codeberg reference and cloning is disabled")
        logger.debug("Fetching %s via %s", normalized, " -> ".join(name for name, _ in chain))

        failure: TemplateFetchError | None = None
        for name, run in chain:
            if on_step is not None:
                on_step(f"{name}: {normalized}")
            try:
                run(attempt)
            except TemplateFetchError as exc:
                if failure is not None:
                    raise FallbackExhausted(failure, exc) from exc
                logger.debug("%s failed: %s", name, exc)
                failure = exc
                continue
            return FetchOutcome(
                reference=reference, normalized=normalized, strategy=name, target=target,
            )
        raise failure
    finally:
        if owns_client:
            client.close()
