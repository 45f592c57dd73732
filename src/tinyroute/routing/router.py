"""Router façade — registration API and the dispatch pipeline.

Per request:

1. normalize the request path;
2. find the first registered pattern that matches it;
3. matched: pick the handler for the request verb, extract placeholders;
   not matched: derive a controller and method from the path itself;
4. bind placeholders onto the handler's parameters;
5. call the handler and return whatever it returns.

Errors from any step reach the caller unchanged, and so do exceptions
raised by the handler. There is no retry and no fallback.
"""

import dataclasses
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from tinyroute._internal.invoke import invoke
from tinyroute._internal.types import ControllerFactory, Handler
from tinyroute.config import RouterConfig
from tinyroute.errors import ConfigurationError, NoHandlerForMethodError
from tinyroute.http.request import RequestLike
from tinyroute.routing.binding import BoundArguments, bind_arguments
from tinyroute.routing.convention import (
    NAMESPACE_SEPARATOR,
    ConventionTarget,
    qualify,
    resolve_convention,
)
from tinyroute.routing.pattern import normalize_path
from tinyroute.routing.reflect import (
    ControllerRegistry,
    HandlerDescriptor,
    describe_callable,
    reflect_convention,
    reflect_handler,
)
from tinyroute.routing.route import HandlerRef, MethodTarget, Route, RouteMatch
from tinyroute.routing.store import RuleStore

logger = logging.getLogger("tinyroute.routing")


@dataclass(frozen=True, slots=True)
class Resolution:
    """Everything dispatch decided for one request, short of calling the handler."""

    handler: HandlerDescriptor
    placeholders: dict[str, str]
    arguments: BoundArguments
    route: Route | None = None
    convention: ConventionTarget | None = None

    @property
    def explicit(self) -> bool:
        """True if a registered pattern matched; False for convention dispatch."""
        return self.route is not None

    def invoke(self) -> Any:
        return self.arguments.apply(self.handler)


class Router:
    """Pattern router with convention-based fallback.

    Usage::

        router = Router(RouterConfig(namespace="app.controllers"))

        @router.get("users/{id}")
        def show_user(id: str) -> dict:
            return {"id": id}

        router.post("users", (UserController, "store"))

        @router.controller
        class BlogPost:
            def show(self) -> str: ...

        router.dispatch(Request("GET", "/users/42"))   -> {"id": "42"}
        router.dispatch(Request("GET", "/blog_post/show"))  # BlogPost().show()

    Thread safety:
        Registration may run while other threads dispatch. The rule
        store and controller registry swap in new immutable snapshots
        under a lock; dispatch only ever reads a snapshot.
    """

    __slots__ = ("_config", "_controllers", "_store")

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        controllers: ControllerRegistry | None = None,
    ) -> None:
        self._config: RouterConfig = config or RouterConfig()
        self._controllers = controllers if controllers is not None else ControllerRegistry()
        self._store = RuleStore(validate=self._config.validate_patterns)
        if self._config.namespace != self._config.namespace.strip(NAMESPACE_SEPARATOR):
            self.set_namespace(self._config.namespace)

    # -- Configuration --

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def namespace(self) -> str:
        return self._config.namespace

    def set_namespace(self, namespace: str) -> None:
        """Set the root namespace prepended to convention-derived controller names.

        Controllers registered through ``controller()`` are qualified with
        the namespace current at registration time, so set it first.
        """
        self._config = dataclasses.replace(
            self._config, namespace=namespace.strip(NAMESPACE_SEPARATOR)
        )

    @property
    def controllers(self) -> ControllerRegistry:
        return self._controllers

    def controller(
        self,
        name: str | type | None = None,
        factory: ControllerFactory | None = None,
    ) -> Any:
        """Register a controller for convention dispatch.

        The name is relative to the namespace and uses ``.`` between
        levels (``"Admin.UserRole"`` serves ``/admin/user_role/<method>``).
        It defaults to the class name. Works bare, with a name, or
        with an explicit factory::

            @router.controller
            class BlogPost: ...

            @router.controller("Admin.UserRole")
            class UserRoleController: ...

            router.controller("Reports", make_reports_controller)
        """
        if isinstance(name, type):
            self._register_controller(name.__name__, name)
            return name

        if factory is not None:
            self._register_controller(name or factory.__name__, factory)
            return factory

        def decorator(cls: type) -> type:
            self._register_controller(name or cls.__name__, cls)
            return cls

        return decorator

    def _register_controller(self, name: str, factory: ControllerFactory) -> None:
        self._controllers.register(qualify(self._config.namespace, name), factory)

    # -- Registration --

    def add(self, verb: str, pattern: str, handler: Any) -> Route:
        """Bind *handler* to *verb* on *pattern*.

        *handler* is a callable, a ``MethodTarget``, or a
        ``(controller, "method_name")`` tuple. The controller may be a
        class, an instance, or a name looked up in ``controllers`` at
        dispatch. Any verb name is accepted and compared
        case-insensitively, ignoring surrounding whitespace.
        """
        key = _normalize_verb(verb)
        return self._store.register(pattern, key, _normalize_handler(handler))

    def route(
        self,
        pattern: str,
        handler: Any = None,
        *,
        methods: Iterable[str] = ("get",),
    ) -> Any:
        """Bind one handler to several verbs. Usable as a decorator."""
        verbs = list(methods)
        if not verbs:
            msg = f"No methods given for route {pattern!r}"
            raise ConfigurationError(msg)

        def register(target: Any) -> Any:
            for verb in verbs:
                self.add(verb, pattern, target)
            return target

        if handler is not None:
            return register(handler)
        return register

    def get(self, pattern: str, handler: Any = None) -> Any:
        return self._verb("get", pattern, handler)

    def post(self, pattern: str, handler: Any = None) -> Any:
        return self._verb("post", pattern, handler)

    def put(self, pattern: str, handler: Any = None) -> Any:
        return self._verb("put", pattern, handler)

    def patch(self, pattern: str, handler: Any = None) -> Any:
        return self._verb("patch", pattern, handler)

    def delete(self, pattern: str, handler: Any = None) -> Any:
        return self._verb("delete", pattern, handler)

    def head(self, pattern: str, handler: Any = None) -> Any:
        return self._verb("head", pattern, handler)

    def options(self, pattern: str, handler: Any = None) -> Any:
        return self._verb("options", pattern, handler)

    def _verb(self, verb: str, pattern: str, handler: Any) -> Any:
        return self.route(pattern, handler, methods=(verb,))

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in registration (and matching) order."""
        return self._store.routes

    def match(self, uri: str) -> RouteMatch | None:
        return self._store.match(uri)

    # -- Dispatch --

    def resolve(self, method: str, uri: str) -> Resolution:
        """Run the dispatch pipeline up to, but not including, the handler call.

        Raises:
            NoHandlerForMethodError: A pattern matched but not for *method*.
            TargetResolutionError: The controller or method cannot be resolved.
            RouteModelConstructionError: A route-model argument failed to build.
        """
        path = normalize_path(uri)
        match = self._store.match(path)

        if match is None:
            target = resolve_convention(path, self._config.namespace)
            logger.debug(
                "No pattern matched %r, dispatching by convention to %s.%s",
                path,
                target.qualified_name,
                target.method,
            )
            handler = reflect_convention(
                target,
                self._controllers,
                allow_private=self._config.allow_private_methods,
            )
            return Resolution(
                handler=handler,
                placeholders={},
                arguments=self._bind(handler, {}),
                convention=target,
            )

        route = match.route
        verb = method.strip().lower()
        ref = route.handlers.get(verb)
        if ref is None:
            raise NoHandlerForMethodError(method, route.pattern, route.methods)

        logger.debug("Matched %r to pattern %r (%s)", path, route.pattern, verb)
        handler = reflect_handler(
            ref,
            registry=self._controllers,
            namespace=self._config.namespace,
            allow_private=self._config.allow_private_methods,
        )
        return Resolution(
            handler=handler,
            placeholders=match.placeholders,
            arguments=self._bind(handler, match.placeholders),
            route=route,
        )

    def dispatch(self, request: RequestLike) -> Any:
        """Route *request* to its handler and return the handler's result."""
        resolution = self.resolve(request.http_method(), request.path_of_request_uri())
        return resolution.invoke()

    async def adispatch(self, request: RequestLike) -> Any:
        """Async ``dispatch()``: coroutine handlers are awaited, sync ones run in a thread."""
        resolution = self.resolve(request.http_method(), request.path_of_request_uri())
        arguments = resolution.arguments
        return await invoke(resolution.handler.func, *arguments.args, **arguments.kwargs)

    def _bind(self, handler: HandlerDescriptor, placeholders: dict[str, str]) -> BoundArguments:
        return bind_arguments(
            handler,
            placeholders,
            positional=self._config.positional_binding,
        )


def _normalize_verb(verb: str) -> str:
    key = verb.strip().lower() if isinstance(verb, str) else ""
    if not key or any(ch.isspace() for ch in key):
        msg = f"Invalid HTTP method {verb!r}"
        raise ConfigurationError(msg)
    return key


def _normalize_handler(handler: Any) -> HandlerRef:
    if isinstance(handler, MethodTarget):
        if isinstance(handler.target, str) and not handler.target:
            msg = f"Controller name must not be empty in {handler!r}"
            raise ConfigurationError(msg)
        return handler
    if isinstance(handler, tuple):
        if len(handler) == 2 and isinstance(handler[1], str):
            return _normalize_handler(MethodTarget(target=handler[0], method=handler[1]))
        msg = f"Handler tuple must be (controller, 'method_name'), got {handler!r}"
        raise ConfigurationError(msg)

    func: Handler = handler
    # Describing up front rejects non-callables and warms the signature cache
    describe_callable(func)
    return func
