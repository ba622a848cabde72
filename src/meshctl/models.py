"""Pydantic models describing the meshconfig file.

The meshconfig is a single YAML document with three top-level keys::

    contexts:
      local:
        endpoint: http://localhost:9081
        token: default
        platform: docker
    current-context: local
    tokens:
      - name: default
        location: auth.json

:class:`MeshConfig` is the in-memory aggregate. It is loaded and saved by
:func:`~meshctl.config.read_config` and :func:`~meshctl.config.write_config`;
the token mutation helpers in :mod:`meshctl.config` operate on it without
touching the disk. Unknown keys are preserved via ``extra="allow"`` so that
files written by other tools survive a read-modify-write cycle.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from meshctl.exceptions import NotFoundError

DEFAULT_TOKEN_LOCATION = "auth.json"
DEFAULT_ENDPOINT = "http://localhost:9081"
DEFAULT_PLATFORM = "docker"


class Token(BaseModel):
    """A named reference to credential material on disk.

    Only the path is stored; the credential itself is never read by meshctl.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Unique token name")
    location: str = Field(
        default=DEFAULT_TOKEN_LOCATION,
        description="Filesystem path to the credential file",
    )


class Context(BaseModel):
    """A named connection profile that can have one token assigned to it."""

    model_config = ConfigDict(extra="allow")

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Server endpoint URL")
    token: Optional[str] = Field(
        default=None, description="Name of the token assigned to this context"
    )
    platform: str = Field(default=DEFAULT_PLATFORM, description="Deployment platform")


class MeshConfig(BaseModel):
    """The persisted meshconfig: contexts, the current context, and tokens.

    ``current_context`` is stored under the ``current-context`` key to stay
    compatible with existing meshconfig files.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    contexts: dict[str, Context] = Field(default_factory=dict)
    current_context: Optional[str] = Field(default=None, alias="current-context")
    tokens: list[Token] = Field(default_factory=list)

    def get_token(self, name: str) -> Optional[Token]:
        """Return the token called *name*, or ``None``."""
        for token in self.tokens:
            if token.name == name:
                return token
        return None

    def get_context(self, name: str) -> Context:
        """Return the context called *name*.

        Raises:
            NotFoundError: If no such context exists.
        """
        context = self.contexts.get(name)
        if context is None:
            raise NotFoundError(f'context "{name}" does not exist')
        return context

    def get_token_for_context(self, context_name: str) -> Token:
        """Resolve the token assigned to *context_name*.

        Raises:
            NotFoundError: If the context does not exist, has no token
                assigned, or its assigned token is missing from ``tokens``.
        """
        context = self.get_context(context_name)
        if not context.token:
            raise NotFoundError(f'no token assigned to context "{context_name}"')
        token = self.get_token(context.token)
        if token is None:
            raise NotFoundError(
                f'token "{context.token}" assigned to context "{context_name}" '
                "does not exist"
            )
        return token

    def contexts_using_token(self, token_name: str) -> list[str]:
        """Return the sorted names of contexts whose assigned token is *token_name*."""
        return sorted(
            name for name, ctx in self.contexts.items() if ctx.token == token_name
        )
