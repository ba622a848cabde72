"""Context commands -- create, remove, switch, and list meshconfig contexts.

A context is a named connection profile (endpoint and platform) that can
have one token assigned with ``meshctl token set``. ``context create`` is
the only command that creates the meshconfig file when it does not exist;
every other command expects it to be there.

Typical workflow::

    meshctl context create local --set
    meshctl context create staging --endpoint https://staging.example.com
    meshctl context switch staging
    meshctl context list
"""

from __future__ import annotations

import typer

from meshctl.commands import config_path_from_context as _config_path
from meshctl.config import (
    add_context_to_config,
    delete_context_from_config,
    load_or_default,
    read_config,
    switch_context,
    write_config,
)
from meshctl.exceptions import MeshctlError
from meshctl.models import DEFAULT_ENDPOINT, DEFAULT_PLATFORM, Context
from meshctl.output import error, info, print_table, success, suggest


context_app = typer.Typer(no_args_is_help=True)


@context_app.command("create")
def context_create(
    ctx: typer.Context,
    name: str = typer.Argument(help="Context name."),
    endpoint: str = typer.Option(DEFAULT_ENDPOINT, "--endpoint", "-e", help="Server endpoint URL."),
    platform: str = typer.Option(DEFAULT_PLATFORM, "--platform", "-p", help="Deployment platform."),
    set_current: bool = typer.Option(False, "--set", help="Make it the current context."),
) -> None:
    """Create a context, creating the meshconfig file if needed.

    The first context added to a config without a ``current-context``
    becomes current automatically.

    Example::

        meshctl context create local
        meshctl context create staging -e https://staging.example.com --set
    """
    path = _config_path(ctx)
    try:
        config = load_or_default(path)
        add_context_to_config(name, Context(endpoint=endpoint, platform=platform), config)
        if set_current or not config.current_context:
            switch_context(name, config)
        write_config(config, path)
    except MeshctlError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Context {name} created.")
    if config.current_context == name:
        info(f"Current context: {name}")
    suggest(f"Assign a token: meshctl token set <token-name> --context {name}")


@context_app.command("delete")
def context_delete(
    ctx: typer.Context,
    name: str = typer.Argument(help="Context name."),
) -> None:
    """Delete a context from your meshconfig.

    Clears ``current-context`` when it pointed at the deleted context.

    Example::

        meshctl context delete staging
    """
    path = _config_path(ctx)
    try:
        config = read_config(path)
        was_current = config.current_context == name
        delete_context_from_config(name, config)
        write_config(config, path)
    except MeshctlError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Context {name} deleted.")
    if was_current:
        info("No current context is set.")
        suggest("Pick one: meshctl context switch <context-name>")


@context_app.command("switch")
def context_switch(
    ctx: typer.Context,
    name: str = typer.Argument(help="Context name."),
) -> None:
    """Make a context the current context.

    Example::

        meshctl context switch staging
    """
    path = _config_path(ctx)
    try:
        config = read_config(path)
        switch_context(name, config)
        write_config(config, path)
    except MeshctlError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Switched to context {name}.")


@context_app.command("list")
def context_list(ctx: typer.Context) -> None:
    """List all contexts with their endpoint, platform, and assigned token.

    Example::

        meshctl context list
        meshctl --json context list
    """
    path = _config_path(ctx)
    try:
        config = read_config(path)
    except MeshctlError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not config.contexts:
        info("No contexts configured.")
        suggest("Create one: meshctl context create <context-name>")
        return

    rows: list[list[str]] = []
    for name, context in config.contexts.items():
        rows.append([
            name,
            context.endpoint,
            context.platform,
            context.token or "-",
            "*" if name == config.current_context else "",
        ])
    print_table(
        ["Name", "Endpoint", "Platform", "Token", "Current"],
        rows,
        title="Contexts",
    )

