"""CLI commands — fetch, resolve, config."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from tplfetch.cli import cli
from tplfetch.cli.ui import Spinner
from tplfetch.core.errors import TemplateFetchError
from tplfetch.repo import config


# ── fetch ───────────────────────────────────────────────────────────


@cli.command()
@click.argument("reference")
@click.argument("dest", required=False, type=click.Path(file_okay=False))
@click.option("--force", is_flag=True, help="Write into a non-empty destination.")
@click.option("--verbose", "-v", is_flag=True, help="Log each retrieval step to stderr.")
def fetch(reference: str, dest: str | None, force: bool, verbose: bool) -> None:
    """Fetch a template into DEST.

    REFERENCE can be:

    \b
      user/repo                              GitHub repository
      user/repo/path#ref                     Subdirectory or file at a ref
      user/repo#ref/path                     Same, ref first
      https://github.com/u/r/tree/ref/path   Pasted browser URL
      codeberg:user/repo/path#ref            Codeberg shorthand
      https://codeberg.org/u/r/src/branch/ref/path

    DEST defaults to the repository name.
    """
    from tplfetch.services import templates

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        normalized, target = templates.resolve(reference)
    except TemplateFetchError as exc:
        raise click.ClickException(str(exc)) from exc

    dest_path = Path(dest) if dest else Path(_default_dest(normalized, target))
    if dest_path.is_dir() and any(dest_path.iterdir()) and not force:
        raise click.ClickException(
            f"Destination '{dest_path}' is not empty. Use --force to write into it."
        )

    settings = config.load()
    try:
        with Spinner(f"Fetching {normalized}…") as status:
            outcome = templates.fetch_template(
                reference, dest_path, verbose=verbose, settings=settings, on_step=status,
            )
    except TemplateFetchError as exc:
        raise click.ClickException(f"Failed to fetch template '{reference}': {exc}") from exc

    click.echo(f"✔ Fetched {reference} → {dest_path} ({outcome.strategy})")
    if outcome.target and outcome.target.is_single_file:
        name = outcome.target.spec.subpath.rsplit("/", 1)[-1]
        click.echo(f"  → {dest_path / name}")


# ── resolve ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("reference")
def resolve(reference: str) -> None:
    """Show how REFERENCE is normalized, parsed and where it would be fetched from."""
    from tplfetch import fetchers
    from tplfetch.services import templates

    try:
        normalized, target = templates.resolve(reference)
    except TemplateFetchError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"normalized: {normalized}")
    if target is None:
        click.echo("provider:   none, handed to git clone as-is")
        return

    spec = target.spec
    provider = fetchers.PROVIDERS[spec.provider]
    click.echo(f"provider:   {spec.provider.value}")
    click.echo(f"owner:      {spec.owner}")
    click.echo(f"repo:       {spec.repo}")
    click.echo(f"ref:        {spec.ref}")
    click.echo(f"subpath:    {spec.subpath or '(root)'}")
    click.echo(f"kind:       {'file' if target.is_single_file else 'directory'}")
    if target.is_single_file:
        click.echo(f"raw url:    {provider.raw_url(spec.owner, spec.repo, spec.ref, spec.subpath)}")
    else:
        click.echo(f"archive:    {provider.archive_url(spec.owner, spec.repo, spec.ref)}")


# ── config ──────────────────────────────────────────────────────────


@cli.command("config")
@click.option("--init", "init_file", is_flag=True, help="Write the defaults to the config file.")
def config_cmd(init_file: bool) -> None:
    """Print the effective configuration as TOML."""
    from tplfetch.core import paths

    path = paths.config_path()
    if init_file:
        if path.exists():
            raise click.ClickException(f"Config already exists: {path}")
        config.save(config.Settings(), path)
        click.echo(f"✔ Wrote {path}")
        return

    click.echo(f"# {path}")
    click.echo(config.dump(config.load(path)), nl=False)


# ── helpers ─────────────────────────────────────────────────────────


def _default_dest(normalized: str, target) -> str:
    if target is not None:
        return target.spec.repo
    tail = normalized.partition("#")[0].rstrip("/").rsplit("/", 1)[-1]
    return tail.removesuffix(".git") or "template"
