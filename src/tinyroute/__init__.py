"""tinyroute — a small HTTP request router.

Explicit patterns for the routes you name, convention dispatch for
the rest, and argument binding from path placeholders.

Basic usage::

    from tinyroute import Request, Router

    router = Router()

    @router.get("users/{id}")
    def show_user(id: str) -> str:
        return f"user {id}"

    router.dispatch(Request("GET", "/users/42"))  -> "user 42"
"""

import importlib

__version__ = "0.1.0"

# Public name -> defining module, imported on first access
_LAZY_IMPORTS: dict[str, str] = {
    "Router": "tinyroute.routing.router",
    "Resolution": "tinyroute.routing.router",
    "RouterConfig": "tinyroute.config",
    "Request": "tinyroute.http.request",
    "RequestLike": "tinyroute.http.request",
    "RouteModel": "tinyroute.routing.binding",
    "MethodTarget": "tinyroute.routing.route",
    "ControllerRegistry": "tinyroute.routing.reflect",
    "TinyRouteError": "tinyroute.errors",
    "ConfigurationError": "tinyroute.errors",
    "MalformedPatternError": "tinyroute.errors",
    "NoHandlerForMethodError": "tinyroute.errors",
    "RouteModelConstructionError": "tinyroute.errors",
    "TargetResolutionError": "tinyroute.errors",
}

__all__ = [
    "ConfigurationError",
    "ControllerRegistry",
    "MalformedPatternError",
    "MethodTarget",
    "NoHandlerForMethodError",
    "Request",
    "RequestLike",
    "Resolution",
    "RouteModel",
    "RouteModelConstructionError",
    "Router",
    "RouterConfig",
    "TargetResolutionError",
    "TinyRouteError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tinyroute`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(importlib.import_module(module_name), name)
