"""Built-in CLI sub-commands for meshctl.

* :mod:`~meshctl.commands.token` -- create, delete, assign, list and view
  tokens.
* :mod:`~meshctl.commands.context` -- create, delete, switch and list
  contexts.

Each module exports a :class:`typer.Typer` sub-application registered on the
root app in :mod:`meshctl.app`.
"""

from __future__ import annotations

from pathlib import Path

import typer

from meshctl.config import resolve_config_path
from meshctl.output import debug


def config_path_from_context(ctx: typer.Context) -> Path:
    """Resolve the meshconfig path from the root ``--config`` option stored in ``ctx.obj``."""
    cli_path = ctx.obj.get("config") if ctx.obj else None
    path = resolve_config_path(cli_path)
    debug(f"Using config: {path}")
    return path
