"""Token commands -- manage user tokens and their context assignments.

Provides the ``meshctl token`` sub-command group. Each command is split in
two layers:

* a handler (:func:`create_token`, :func:`delete_token`, :func:`set_token`,
  :func:`list_tokens`, :func:`view_token`) that takes an options object and
  the meshconfig path, performs one read-modify-write against the config,
  and raises :class:`~meshctl.exceptions.MeshctlError` on failure;
* a thin Typer function that builds the options from CLI arguments, calls
  the handler, prints the result and turns errors into an exit code.

Typical workflow::

    meshctl token create ci -f ~/.meshery/ci-auth.json
    meshctl token set ci --context staging
    meshctl token view            # token of the current context
    meshctl token delete ci
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn, Optional

import typer
from typer.core import TyperGroup

from meshctl.commands import config_path_from_context as _config_path
from meshctl.config import (
    add_token,
    delete_token_from_config,
    read_config,
    resolve_context,
    set_token_to_config,
    write_config,
)
from meshctl.exceptions import MeshctlError, NotFoundError, wrap_error
from meshctl.models import DEFAULT_TOKEN_LOCATION, Token
from meshctl.output import (
    OutputFormat,
    debug,
    error,
    get_output,
    info,
    print_data,
    print_json,
    success,
    suggest,
    warning,
)


AVAILABLE_SUBCOMMANDS = ("create", "delete", "set", "list", "view")


def is_valid_subcommand(available: list[str] | tuple[str, ...], name: str) -> bool:
    """Return True if *name* is one of the *available* subcommand names."""
    return name in available


class _TokenGroup(TyperGroup):
    """Command group that reports unknown subcommands as ``invalid command``."""

    def resolve_command(self, ctx: typer.Context, args: list[str]):
        if args and not args[0].startswith("-"):
            if not is_valid_subcommand(AVAILABLE_SUBCOMMANDS, args[0]):
                ctx.fail(f'invalid command: "{args[0]}"')
        return super().resolve_command(ctx, args)


token_app = typer.Typer(
    cls=_TokenGroup,
    no_args_is_help=True,
    help="Manipulate user tokens and their context assignments in your meshconfig.",
)


# ------------------------------------------------------------------ #
# Options
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class CreateTokenOptions:
    name: str
    filepath: str = DEFAULT_TOKEN_LOCATION


@dataclass(frozen=True)
class DeleteTokenOptions:
    name: str


@dataclass(frozen=True)
class SetTokenOptions:
    name: str
    context: Optional[str] = None


@dataclass(frozen=True)
class ViewTokenOptions:
    name: Optional[str] = None
    all: bool = False


@dataclass
class DeleteResult:
    """Outcome of :func:`delete_token`.

    ``stale_contexts`` lists contexts that still have the deleted token
    assigned; the assignment is not cleared.
    """

    token: Token
    stale_contexts: list[str] = field(default_factory=list)


@dataclass
class ViewResult:
    """Tokens selected by :func:`view_token`.

    ``context`` is set only when the token was resolved through the current
    context because no name was given.
    """

    tokens: list[Token]
    all: bool = False
    context: Optional[str] = None


# ------------------------------------------------------------------ #
# Handlers
# ------------------------------------------------------------------ #


def create_token(opts: CreateTokenOptions, config_path: Path) -> Token:
    """Add a token named ``opts.name`` pointing at ``opts.filepath``.

    An empty ``filepath`` falls back to ``auth.json``.

    Raises:
        MeshctlError: If the config cannot be loaded or written, or the
            name is already taken.
    """
    token = Token(name=opts.name, location=opts.filepath or DEFAULT_TOKEN_LOCATION)
    try:
        add_token(token, config_path)
    except MeshctlError as exc:
        raise wrap_error(exc, "Could not create specified token to config") from exc
    return token


def delete_token(opts: DeleteTokenOptions, config_path: Path) -> DeleteResult:
    """Remove the token called ``opts.name``.

    Raises:
        MeshctlError: If the config cannot be loaded or written.
        NotFoundError: If the token does not exist. The file is not written.
    """
    config = read_config(config_path)
    token = config.get_token(opts.name)
    try:
        delete_token_from_config(opts.name, config)
    except MeshctlError as exc:
        raise wrap_error(exc, f'Could not delete token "{opts.name}" from config') from exc
    write_config(config, config_path)
    assert token is not None  # delete_token_from_config checked it
    return DeleteResult(token=token, stale_contexts=config.contexts_using_token(opts.name))


def set_token(opts: SetTokenOptions, config_path: Path) -> str:
    """Assign ``opts.name`` to ``opts.context`` or the resolved current context.

    Returns:
        The name of the context the token was assigned to.

    Raises:
        MeshctlError: If the config cannot be loaded or written, no context
            can be resolved, or the token or context does not exist.
    """
    config = read_config(config_path)
    try:
        context_name = resolve_context(opts.context, config)
    except MeshctlError as exc:
        raise wrap_error(exc, f'Could not set token "{opts.name}"') from exc
    debug(f"Resolved context: {context_name}")
    try:
        set_token_to_config(opts.name, config, context_name)
    except MeshctlError as exc:
        raise wrap_error(
            exc, f'Could not set token "{opts.name}" on context {context_name}'
        ) from exc
    write_config(config, config_path)
    return context_name


def list_tokens(config_path: Path) -> list[Token]:
    """Return every token in the config, in file order."""
    return list(read_config(config_path).tokens)


def view_token(opts: ViewTokenOptions, config_path: Path) -> ViewResult:
    """Select the token(s) to display.

    ``opts.all`` wins over ``opts.name``; with neither, the token assigned to
    the current context is returned.

    Raises:
        NotFoundError: If a named token does not exist.
        MeshctlError: If the current context cannot be resolved or has no
            usable token assigned.
    """
    config = read_config(config_path)
    if opts.all:
        return ViewResult(tokens=list(config.tokens), all=True)

    if opts.name is None:
        try:
            context_name = resolve_context(None, config)
            token = config.get_token_for_context(context_name)
        except MeshctlError as exc:
            raise wrap_error(exc, "Could not get token for the current context") from exc
        return ViewResult(tokens=[token], context=context_name)

    token = config.get_token(opts.name)
    if token is None:
        raise NotFoundError(f"Token {opts.name} could not be found.")
    return ViewResult(tokens=[token])


# ------------------------------------------------------------------ #
# CLI
# ------------------------------------------------------------------ #


def _fail(exc: MeshctlError) -> NoReturn:
    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def _is_json() -> bool:
    return get_output().format == OutputFormat.JSON


@token_app.command("create")
def token_create(
    ctx: typer.Context,
    name: str = typer.Argument(help="Token name."),
    filepath: str = typer.Option(
        DEFAULT_TOKEN_LOCATION, "--filepath", "-f", help="Add the token location."
    ),
) -> None:
    """Create a token in your meshconfig.

    Example::

        meshctl token create <token-name> -f <token-path>
        meshctl token create <token-name>   (default path is auth.json)
    """
    try:
        token = create_token(CreateTokenOptions(name=name, filepath=filepath), _config_path(ctx))
    except MeshctlError as exc:
        _fail(exc)
    success(f"Token {token.name} created.")


@token_app.command("delete")
def token_delete(
    ctx: typer.Context,
    name: str = typer.Argument(help="Token name."),
) -> None:
    """Delete a token from your meshconfig.

    Contexts that had the token assigned keep the assignment; a warning
    names each of them.

    Example::

        meshctl token delete <token-name>
    """
    try:
        result = delete_token(DeleteTokenOptions(name=name), _config_path(ctx))
    except MeshctlError as exc:
        _fail(exc)
    success(f"Token {name} deleted.")
    for context_name in result.stale_contexts:
        warning(f'Context "{context_name}" still has deleted token "{name}" assigned.')
        suggest(f"Assign another: meshctl token set <token-name> --context {context_name}")


@token_app.command("set")
def token_set(
    ctx: typer.Context,
    name: str = typer.Argument(help="Token name."),
    context: Optional[str] = typer.Option(None, "--context", help="Pass the context."),
) -> None:
    """Set token for the current context or the context given with --context.

    Example::

        meshctl token set <token-name>
        meshctl token set <token-name> --context <context-name>
    """
    try:
        context_name = set_token(SetTokenOptions(name=name, context=context), _config_path(ctx))
    except MeshctlError as exc:
        _fail(exc)
    success(f"Token {name} set for context {context_name}")


@token_app.command("list")
def token_list(ctx: typer.Context) -> None:
    """List all the tokens in your meshconfig.

    Example::

        meshctl token list
    """
    try:
        tokens = list_tokens(_config_path(ctx))
    except MeshctlError as exc:
        _fail(exc)
    if _is_json():
        print_json([t.name for t in tokens])
        return
    info("Available tokens: ")
    for t in tokens:
        print_data(t.name)


@token_app.command("view")
def token_view(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Token name (default: current context's token)."),
    all_tokens: bool = typer.Option(False, "--all", help="View all the tokens."),
) -> None:
    """View a specific token in your meshconfig.

    Example::

        meshctl token view <token-name>
        meshctl token view          (show token of current context)
        meshctl token view --all
    """
    try:
        result = view_token(ViewTokenOptions(name=name, all=all_tokens), _config_path(ctx))
    except MeshctlError as exc:
        _fail(exc)

    if result.all:
        if _is_json():
            print_json([t.model_dump(mode="json") for t in result.tokens])
            return
        info("Listing all available tokens...")
        for t in result.tokens:
            print_data(f"-> token: {t.name}")
            print_data(f"   location: {t.location}")
        return

    if result.context is not None:
        warning(f'Token unspecified. Displaying token for current context "{result.context}"')
    token = result.tokens[0]
    if _is_json():
        print_json(token.model_dump(mode="json"))
        return
    print_data(f"token: {token.name}")
    print_data(f"location: {token.location}")
