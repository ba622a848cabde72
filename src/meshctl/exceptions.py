"""Exception hierarchy for meshctl.

All exceptions inherit from :class:`MeshctlError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`meshctl.exit_codes`.
Command functions catch ``MeshctlError``, print the message and exit with
the error's code; :func:`meshctl.app.main` does the same for anything that
escapes, and writes a crash log for unexpected exceptions.

Subclass hierarchy::

    MeshctlError (exit 1)
    +-- NotFoundError       (exit 4)
    +-- DuplicateError      (exit 9)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

from meshctl.exit_codes import (
    EXIT_CONFLICT,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
)


class MeshctlError(Exception):
    """Base exception for all meshctl errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class NotFoundError(MeshctlError):
    """Raised when a named token or context is not present in the meshconfig."""

    exit_code = EXIT_NOT_FOUND


class DuplicateError(MeshctlError):
    """Raised when adding a token or context whose name is already taken."""

    exit_code = EXIT_CONFLICT


class ConfigError(MeshctlError):
    """Raised for configuration problems (missing file, invalid YAML, failed writes)."""

    exit_code = EXIT_GENERIC_FAILURE


def wrap_error(exc: MeshctlError, message: str) -> MeshctlError:
    """Return a copy of *exc* with *message* prefixed to its text.

    The returned error keeps the class and exit code of *exc*, so a
    :class:`NotFoundError` raised deep in the config layer still exits
    with :data:`~meshctl.exit_codes.EXIT_NOT_FOUND` after a command adds
    its own context to the message.

    Example::

        >>> err = wrap_error(NotFoundError('token "foo" not found'), "Could not delete")
        >>> str(err)
        'Could not delete: token "foo" not found'
    """
    wrapped = type(exc)(f"{message}: {exc}", exit_code=exc.exit_code)
    wrapped.__cause__ = exc
    return wrapped
