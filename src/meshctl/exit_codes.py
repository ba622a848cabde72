"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~meshctl.exceptions.MeshctlError` subclass.
Shell scripts wrapping ``meshctl`` can inspect the exit code to tell a
missing token apart from a broken config file without parsing stderr.

Example::

    $ meshctl token view missing
    $ echo $?
    4   # EXIT_NOT_FOUND -- no token with that name
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including config read/write failures)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unknown subcommand."""

EXIT_NOT_FOUND = 4
"""The requested token or context does not exist in the meshconfig."""

EXIT_CONFLICT = 9
"""A token or context with the same name already exists."""

EXIT_INTERRUPTED = 130
"""The user cancelled the command with Ctrl-C."""
