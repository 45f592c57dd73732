"""Handler reflection — turn a stored handler reference into something callable.

Two kinds of references reach the router:

- a plain callable, described directly;
- a controller plus a method name, either from an explicit
  ``MethodTarget`` or from convention dispatch. The controller is built
  (or reused, for an instance), the method is looked up, and the bound
  method is described.

Controllers for convention dispatch, and explicit targets given by name
(``("BlogPost", "show")``), come from a ``ControllerRegistry`` populated
at startup. Names in the registry are fully qualified
(``"app.controllers.BlogPost"``); nothing is imported by name at
request time.

Parameter introspection is memoized per function, so repeated
dispatches to the same handler reuse one ``inspect.signature`` call.
"""

import functools
import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tinyroute._internal.types import ControllerFactory
from tinyroute.errors import ConfigurationError, TargetResolutionError
from tinyroute.routing.convention import NAMESPACE_SEPARATOR, ConventionTarget, qualify
from tinyroute.routing.route import HandlerRef, MethodTarget

logger = logging.getLogger("tinyroute.routing")

_UNBINDABLE = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """One formal parameter of a handler."""

    name: str
    annotation: Any
    kind: inspect._ParameterKind
    has_default: bool

    @property
    def bindable(self) -> bool:
        """False for ``*args`` / ``**kwargs``, which never receive placeholders."""
        return self.kind not in _UNBINDABLE

    @property
    def declared_type(self) -> Any:
        """The annotation, or ``None`` when the parameter is unannotated."""
        if self.annotation is inspect.Parameter.empty:
            return None
        return self.annotation


@dataclass(frozen=True, slots=True)
class HandlerDescriptor:
    """A resolved, invocable handler and its formal parameters."""

    func: Callable[..., Any]
    parameters: tuple[ParameterSpec, ...]
    name: str

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)


class ControllerRegistry:
    """Qualified controller name -> zero-argument factory.

    Usage::

        registry = ControllerRegistry()
        registry.register("app.controllers.BlogPost", BlogPost)
        registry.get("app.controllers.BlogPost")  -> BlogPost
    """

    __slots__ = ("_factories", "_lock")

    def __init__(self) -> None:
        self._factories: dict[str, ControllerFactory] = {}
        self._lock = threading.Lock()

    def register(self, name: str, factory: ControllerFactory) -> None:
        if not name:
            msg = "Controller name must not be empty."
            raise ConfigurationError(msg)
        if not callable(factory):
            msg = f"Controller factory for {name!r} must be callable, got {factory!r}"
            raise ConfigurationError(msg)
        with self._lock:
            self._factories = {**self._factories, name: factory}
        logger.debug("Registered controller %r", name)

    def get(self, name: str) -> ControllerFactory | None:
        return self._factories.get(name)

    @property
    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def parameters_of(func: Callable[..., Any]) -> tuple[ParameterSpec, ...]:
    """Describe the formal parameters of *func* as seen by a caller.

    Bound methods drop their ``self``/``cls`` parameter. Annotations are
    evaluated, so a string annotation naming something that does not
    exist raises ``NameError``.
    """
    if inspect.ismethod(func):
        return _function_parameters(func.__func__)[1:]
    if inspect.isfunction(func):
        return _function_parameters(func)
    return _signature_parameters(func)


@functools.cache
def _function_parameters(func: Callable[..., Any]) -> tuple[ParameterSpec, ...]:
    return _signature_parameters(func)


def _signature_parameters(func: Callable[..., Any]) -> tuple[ParameterSpec, ...]:
    sig = inspect.signature(func, eval_str=True)
    return tuple(
        ParameterSpec(
            name=param.name,
            annotation=param.annotation,
            kind=param.kind,
            has_default=param.default is not inspect.Parameter.empty,
        )
        for param in sig.parameters.values()
    )


def describe_callable(func: Callable[..., Any], name: str | None = None) -> HandlerDescriptor:
    """Describe a plain callable handler.

    Raises ``ConfigurationError`` if *func* is not callable, its
    signature cannot be inspected, or one of its annotations names
    something that cannot be resolved.
    """
    if not callable(func):
        msg = f"Handler must be callable, got {func!r}"
        raise ConfigurationError(msg)
    try:
        parameters = parameters_of(func)
    except NameError as exc:
        msg = f"Cannot resolve an annotation in the signature of {func!r}: {exc}"
        raise ConfigurationError(msg) from exc
    except (TypeError, ValueError) as exc:
        msg = f"Cannot inspect handler signature of {func!r}: {exc}"
        raise ConfigurationError(msg) from exc
    return HandlerDescriptor(
        func=func,
        parameters=parameters,
        name=name or getattr(func, "__qualname__", None) or repr(func),
    )


def reflect_handler(
    ref: HandlerRef,
    *,
    registry: ControllerRegistry | None = None,
    namespace: str = "",
    allow_private: bool = False,
) -> HandlerDescriptor:
    """Resolve an explicitly registered handler reference."""
    if isinstance(ref, MethodTarget):
        return reflect_target(
            ref, registry=registry, namespace=namespace, allow_private=allow_private
        )
    return describe_callable(ref)


def reflect_target(
    ref: MethodTarget,
    *,
    registry: ControllerRegistry | None = None,
    namespace: str = "",
    allow_private: bool = False,
) -> HandlerDescriptor:
    """Build (or reuse) the controller of *ref* and bind its method.

    A ``str`` target names a controller in *registry*. The name is
    tried qualified with *namespace* first, then as given.
    """
    if isinstance(ref.target, str):
        return _reflect_named(ref.target, ref.method, registry, namespace, allow_private)

    owner = ref.target if isinstance(ref.target, type) else type(ref.target)
    label = owner.__qualname__
    _check_method_name(label, ref.method, allow_private=allow_private)

    if isinstance(ref.target, type):
        instance = _build_controller(ref.target, label, ref.method)
    else:
        instance = ref.target
    return _bind_member(instance, label, ref.method)


def reflect_convention(
    target: ConventionTarget,
    registry: ControllerRegistry,
    *,
    allow_private: bool = False,
) -> HandlerDescriptor:
    """Look up a convention-derived controller in *registry* and bind its method."""
    name = target.qualified_name
    _check_method_name(name, target.method, allow_private=allow_private)

    # Nesting comes only from '/' in the path, never from a '.' inside a segment
    if any(NAMESPACE_SEPARATOR in segment for segment in target.segments):
        raise TargetResolutionError(name, target.method, "path segment contains '.'")

    factory = registry.get(name)
    if factory is None:
        raise TargetResolutionError(name, target.method, "no controller registered under this name")

    instance = _build_controller(factory, name, target.method)
    return _bind_member(instance, name, target.method)


def _reflect_named(
    name: str,
    method: str,
    registry: ControllerRegistry | None,
    namespace: str,
    allow_private: bool,
) -> HandlerDescriptor:
    qualified = qualify(namespace, name)
    _check_method_name(qualified, method, allow_private=allow_private)

    factory = None
    if registry is not None:
        factory = registry.get(qualified) or registry.get(name)
    if factory is None:
        raise TargetResolutionError(qualified, method, "no controller registered under this name")

    instance = _build_controller(factory, qualified, method)
    return _bind_member(instance, qualified, method)


def _check_method_name(label: str, method: str, *, allow_private: bool) -> None:
    if not method:
        raise TargetResolutionError(label, method, "no method name in the request path")
    if method.startswith("_") and not allow_private:
        raise TargetResolutionError(label, method, "method is not public")


def _build_controller(factory: ControllerFactory, label: str, method: str) -> Any:
    try:
        return factory()
    except Exception as exc:
        raise TargetResolutionError(label, method, f"controller construction failed: {exc}") from exc


def _bind_member(instance: Any, label: str, method: str) -> HandlerDescriptor:
    try:
        member = getattr(instance, method)
    except AttributeError as exc:
        raise TargetResolutionError(label, method, "no such method") from exc

    if not callable(member):
        raise TargetResolutionError(label, method, "attribute is not callable")

    return describe_callable(member, name=f"{label}.{method}")
