"""CLI entry point — Click command group."""

from __future__ import annotations

import click

from tplfetch import __version__
from tplfetch.core.env import load_user_env

load_user_env()


def _quick_start(root_name: str) -> str:
    lines = [
        "Quick start:",
        f"  {root_name} fetch user/repo my-project",
        f"  {root_name} fetch user/repo/examples#dev my-project",
        f"  {root_name} fetch codeberg:user/repo/README.md docs",
        f"  {root_name} resolve https://github.com/user/repo/tree/dev/examples",
    ]
    return "\n".join(lines)


def _render_index(root: click.Command, root_name: str) -> str:
    if not isinstance(root, click.Group):
        return f"  {root_name}"
    return "\n".join(f"  {root_name} {name}" for name in sorted(root.commands))


class TplGroup(click.Group):
    """Click group that appends quick-start examples and a command index to help."""

    def get_help(self, ctx: click.Context) -> str:
        base = super().get_help(ctx)
        root_ctx = ctx.find_root()
        root_name = root_ctx.info_name or "tplfetch"
        return (
            f"{base}\n\n{_quick_start(root_name)}\n\n"
            f"Command index:\n{_render_index(root_ctx.command, root_name)}"
        )


@click.group(name="tplfetch", cls=TplGroup)
@click.version_option(__version__, prog_name="tplfetch")
def cli() -> None:
    """tplfetch — fetch project templates from GitHub and Codeberg.

    Accepts shorthand (user/repo[/path][#ref]), provider prefixes,
    SSH remotes and pasted browser URLs.
    """


# Register all sub-commands on import
from tplfetch.cli import commands as _commands  # noqa: F401, E402
