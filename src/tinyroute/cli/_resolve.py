"""Locate the Router a CLI command operates on.

Both ``tinyroute routes`` and ``tinyroute resolve`` take a
``"module:attribute"`` import string. ``load_router`` is the entry the
commands use: it resolves the string and turns any failure into an
``Error:`` line on stderr and exit status 1.
"""

import importlib
import sys
from typing import NoReturn

from tinyroute.routing.router import Router

DEFAULT_ATTRIBUTE = "router"


def resolve_router(import_string: str) -> Router:
    """Resolve ``"module:attribute"`` to a Router.

    The attribute defaults to ``router``. It may also name a
    zero-argument function that builds the router (``myapp:create_router``),
    which is called once.

    Raises:
        ModuleNotFoundError: The module cannot be imported.
        AttributeError: The module has no such attribute.
        TypeError: The attribute is neither a Router nor a function
            returning one, or that function raised.
    """
    module_name, _, attribute = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attribute or DEFAULT_ATTRIBUTE)

    if not isinstance(target, Router) and callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"Building the router from {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(target, Router):
        msg = f"{import_string!r} is a {type(target).__name__}, not a tinyroute.Router instance"
        raise TypeError(msg)
    return target


def load_router(import_string: str) -> Router:
    """``resolve_router`` for CLI commands: report failures and exit 1."""
    try:
        return resolve_router(import_string)
    except (ImportError, AttributeError, TypeError) as exc:
        fail(exc)


def fail(exc: Exception) -> NoReturn:
    """Print *exc* as a CLI error and exit with status 1."""
    print(f"Error: {exc}", file=sys.stderr)
    raise SystemExit(1) from exc
