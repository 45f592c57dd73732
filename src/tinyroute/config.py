"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(namespace="app.controllers")
    """

    # Convention dispatch: prefix for qualified controller names
    namespace: str = ""

    # Argument binding: pass matched placeholders by position instead of by name.
    # Positional mode skips unmatched parameters without padding, so later
    # arguments shift left.
    positional_binding: bool = False

    # Reject malformed placeholders when a pattern is registered
    validate_patterns: bool = True

    # Allow ``_``-prefixed controller methods to be dispatched
    allow_private_methods: bool = False
