"""tinyroute exception hierarchy.

Shared across the rule store, reflector, binder, and router so every
module raises and catches the same types.
"""


class TinyRouteError(Exception):
    """Base for all tinyroute-specific errors."""


class ConfigurationError(TinyRouteError):
    """Raised when a route registration or router setting is invalid.

    Detected at registration time, before any request is dispatched.
    """


class MalformedPatternError(ConfigurationError):
    """A route pattern has a broken, duplicate, or misplaced placeholder."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Malformed route pattern {pattern!r}: {reason}")


class TargetResolutionError(TinyRouteError):
    """A controller could not be built or lacks the requested method.

    Raised for both convention-resolved targets and explicit
    ``(target, method_name)`` handler references.
    """

    def __init__(self, target: str, method: str, reason: str) -> None:
        self.target = target
        self.method = method
        self.reason = reason
        super().__init__(f"Cannot resolve {target}.{method or '<empty>'}: {reason}")


class NoHandlerForMethodError(TinyRouteError):
    """A pattern matched but has no handler for the request's verb.

    Carries the verbs that *are* registered on the pattern so callers
    can build an ``Allow`` header.
    """

    def __init__(self, method: str, pattern: str, allowed: frozenset[str]) -> None:
        self.method = method
        self.pattern = pattern
        self.allowed = allowed
        allow_value = ", ".join(sorted(v.upper() for v in allowed))
        super().__init__(
            f"No handler for {method.upper()} on {pattern!r}. Allowed methods: {allow_value}"
        )


class RouteModelConstructionError(TinyRouteError):
    """The constructor of a route-model parameter type raised."""

    def __init__(self, model: type, arguments: dict[str, str]) -> None:
        self.model = model
        self.arguments = arguments
        super().__init__(
            f"Could not construct route model {model.__qualname__} from {arguments!r}"
        )
