"""Meshconfig persistence with XDG paths, atomic writes, and precedence resolution.

This module owns every read and write of the meshconfig file:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.meshctl/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Path resolution** -- :func:`resolve_config_path` picks the meshconfig
  file from the ``--config`` flag, ``MESHCTL_CONFIG``, or the default.
* **Load / save** -- :func:`read_config` and :func:`write_config` convert
  between the YAML file and :class:`~meshctl.models.MeshConfig`.
* **Mutations** -- :func:`add_token_to_config`,
  :func:`delete_token_from_config`, :func:`set_token_to_config` and the
  context equivalents change a loaded config in memory only. Callers write
  the result back explicitly, so every command is a single
  read-modify-write sequence.
* **Context resolution** -- :func:`resolve_context` applies the
  flag > environment > ``current-context`` precedence.

There is no locking: two concurrent invocations may race on the
read-modify-write of the same file, and the last writer wins.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from meshctl.exceptions import ConfigError, DuplicateError, NotFoundError
from meshctl.models import Context, MeshConfig, Token

_APP_NAME = "meshctl"
_CONFIG_FILENAME = "config.yaml"

CONFIG_ENV_VAR = "MESHCTL_CONFIG"
CONTEXT_ENV_VAR = "MESHCTL_CONTEXT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/meshctl/`` (default ``~/.config/meshctl/``).
    On macOS/Windows: ``~/.meshctl/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory, creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/meshctl/`` (default ``~/.local/share/meshctl/``).
    On macOS/Windows: ``~/.meshctl/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_logs_dir() -> Path:
    """Return ``<data_dir>/logs/`` (crash logs), creating it if necessary."""
    path = get_data_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def default_config_path() -> Path:
    """Path to the meshconfig file inside :func:`get_config_dir`."""
    return get_config_dir() / _CONFIG_FILENAME


def resolve_config_path(cli_path: Optional[str] = None) -> Path:
    """Resolve which meshconfig file a command should use.

    Precedence (high to low):
        1. ``--config`` CLI flag (``cli_path``)
        2. ``MESHCTL_CONFIG`` environment variable
        3. ``<config_dir>/config.yaml``

    Returns:
        The resolved path. The file is not required to exist.
    """
    if cli_path:
        return Path(cli_path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return default_config_path()


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the original file is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Load / save ---


def read_config(path: Path) -> MeshConfig:
    """Load and validate the meshconfig at *path*.

    An empty file is read as an empty :class:`~meshctl.models.MeshConfig`.

    Raises:
        ConfigError: If the file does not exist, cannot be read, is not a
            YAML mapping, or fails model validation.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found at {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config at {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config at {path}: {exc}") from exc
    if data is None:
        return MeshConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a mapping at top level")
    try:
        return MeshConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def load_or_default(path: Path) -> MeshConfig:
    """Like :func:`read_config`, but return an empty config when *path* is absent."""
    if not path.exists():
        return MeshConfig()
    return read_config(path)


def write_config(config: MeshConfig, path: Path) -> None:
    """Persist *config* atomically to *path* as YAML.

    Raises:
        ConfigError: If the file cannot be written.
    """
    data = config.model_dump(mode="json", by_alias=True)
    # Unset optional fields are omitted; unknown keys are written as loaded.
    if data.get("current-context") is None:
        data.pop("current-context", None)
    for context in data.get("contexts", {}).values():
        if context.get("token") is None:
            context.pop("token", None)
    text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    try:
        _atomic_write(path, text)
    except OSError as exc:
        raise ConfigError(f"Cannot write config to {path}: {exc}") from exc


# --- Token mutations ---


def add_token_to_config(token: Token, config: MeshConfig) -> MeshConfig:
    """Append *token* to ``config.tokens``.

    Raises:
        DuplicateError: If a token with the same name already exists.
    """
    if config.get_token(token.name) is not None:
        raise DuplicateError(f'a token named "{token.name}" already exists')
    config.tokens.append(token)
    return config


def delete_token_from_config(name: str, config: MeshConfig) -> MeshConfig:
    """Remove the token called *name* from ``config.tokens``.

    Context assignments that reference the token are left as they are;
    :meth:`~meshctl.models.MeshConfig.contexts_using_token` lists them.

    Raises:
        NotFoundError: If no token with that name exists.
    """
    if config.get_token(name) is None:
        raise NotFoundError(f'token "{name}" does not exist')
    config.tokens = [t for t in config.tokens if t.name != name]
    return config


def set_token_to_config(name: str, config: MeshConfig, context_name: str) -> MeshConfig:
    """Assign the token called *name* to *context_name*.

    Raises:
        NotFoundError: If the context or the token does not exist.
    """
    context = config.get_context(context_name)
    if config.get_token(name) is None:
        raise NotFoundError(f'token "{name}" does not exist')
    context.token = name
    return config


def add_token(token: Token, path: Path) -> MeshConfig:
    """Read the config at *path*, add *token*, and write it back."""
    config = read_config(path)
    add_token_to_config(token, config)
    write_config(config, path)
    return config


# --- Context mutations ---


def add_context_to_config(name: str, context: Context, config: MeshConfig) -> MeshConfig:
    """Add *context* under *name*.

    Raises:
        DuplicateError: If a context with the same name already exists.
    """
    if name in config.contexts:
        raise DuplicateError(f'a context named "{name}" already exists')
    config.contexts[name] = context
    return config


def delete_context_from_config(name: str, config: MeshConfig) -> MeshConfig:
    """Remove the context called *name*, clearing ``current-context`` if it pointed there.

    Raises:
        NotFoundError: If the context does not exist.
    """
    config.get_context(name)
    del config.contexts[name]
    if config.current_context == name:
        config.current_context = None
    return config


def switch_context(name: str, config: MeshConfig) -> MeshConfig:
    """Make *name* the ``current-context``.

    Raises:
        NotFoundError: If the context does not exist.
    """
    config.get_context(name)
    config.current_context = name
    return config


# --- Context resolution ---


def resolve_context(explicit: Optional[str], config: MeshConfig) -> str:
    """Resolve the context a command should act on.

    Precedence (high to low):
        1. ``explicit`` (the ``--context`` flag)
        2. ``MESHCTL_CONTEXT`` environment variable
        3. ``current-context`` from the meshconfig

    The returned name is not checked against ``config.contexts``; callers
    that need the context itself look it up and report a missing one.

    Raises:
        ConfigError: If none of the sources yields a context name.
    """
    if explicit:
        return explicit
    env_context = os.environ.get(CONTEXT_ENV_VAR)
    if env_context:
        return env_context
    if config.current_context:
        return config.current_context
    raise ConfigError(
        "No context specified and no current-context set "
        "(use --context or 'meshctl context switch <name>')"
    )
