"""Shared type aliases used across tinyroute modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — user-defined function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Controller factory — called with no arguments to obtain a controller instance
ControllerFactory: TypeAlias = Callable[[], Any]
