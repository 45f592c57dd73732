"""Route, MethodTarget, and RouteMatch frozen dataclasses."""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class MethodTarget:
    """A handler given as a controller plus the name of one of its methods.

    ``target`` is a class, instantiated with no arguments on every
    dispatch, an already-built instance that is reused, or the name of
    a controller in the router's registry.
    """

    target: Any
    method: str

    @property
    def label(self) -> str:
        if isinstance(self.target, str):
            return f"{self.target}.{self.method}"
        owner = self.target if isinstance(self.target, type) else type(self.target)
        return f"{owner.__qualname__}.{self.method}"


# What a route stores per verb before it is resolved
HandlerRef: TypeAlias = Callable[..., Any] | MethodTarget


@dataclass(frozen=True, slots=True)
class Route:
    """A registered pattern and its verb → handler table.

    Replaced, never mutated: adding a verb to an existing pattern
    produces a new Route with a new ``handlers`` mapping.
    """

    pattern: str
    handlers: Mapping[str, HandlerRef]
    matcher: re.Pattern[str]

    @property
    def methods(self) -> frozenset[str]:
        return frozenset(self.handlers)

    def with_handler(self, verb: str, handler: HandlerRef) -> "Route":
        """Return a copy of this route with ``handler`` bound to ``verb``."""
        return Route(
            pattern=self.pattern,
            handlers={**self.handlers, verb: handler},
            matcher=self.matcher,
        )


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful pattern match."""

    index: int
    route: Route
    placeholders: dict[str, str]


def handler_label(handler: HandlerRef) -> str:
    """Human-readable name for a handler reference."""
    if isinstance(handler, MethodTarget):
        return handler.label
    return getattr(handler, "__qualname__", None) or repr(handler)
