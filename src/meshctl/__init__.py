"""meshctl -- manage named authentication tokens and contexts in a local meshconfig.

The meshconfig is a YAML file holding named *contexts* (connection
profiles), the ``current-context``, and a list of named *tokens* (references
to credential files). ``meshctl`` creates, deletes, lists and views tokens
and assigns them to contexts.

Typical workflow::

    meshctl context create local          # create the meshconfig
    meshctl token create default          # location defaults to auth.json
    meshctl token set default             # assign to the current context
    meshctl token view                    # show the current context's token

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the meshconfig file.
    config: Meshconfig paths, load/save, mutations and context resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
