"""Argument binding — map extracted placeholders onto a handler's parameters.

Policy, evaluated once per dispatch:

1. No parameters: call with nothing.
2. Exactly one parameter annotated with a ``RouteModel`` subclass:
   build that model from the placeholders whose names match its
   constructor parameters and pass the instance.
3. Otherwise pass each parameter whose name is a placeholder key.

Parameters with no matching placeholder are omitted, never filled with
``None``. Values stay strings; handlers parse them.

By default matched values are passed by keyword, so a missing earlier
parameter cannot shift later ones. ``positional=True`` passes them
positionally without padding, matching the historical behavior.
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tinyroute.errors import RouteModelConstructionError
from tinyroute.routing.reflect import HandlerDescriptor, ParameterSpec, parameters_of


class RouteModel:
    """Marker base for value objects built from path placeholders.

    Subclass it and declare the placeholders as constructor parameters.
    A handler whose only parameter is annotated with the subclass
    receives one instance per request::

        @dataclass(frozen=True)
        class PostRef(RouteModel):
            id: str
            post_id: str

        @router.get("users/{id}/posts/{post_id}")
        def show(ref: PostRef): ...
    """

    __slots__ = ()


def is_route_model(annotation: Any) -> bool:
    """Return True if *annotation* is a ``RouteModel`` subclass."""
    return isinstance(annotation, type) and issubclass(annotation, RouteModel)


@dataclass(frozen=True, slots=True)
class BoundArguments:
    """Arguments ready to be applied to a handler."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def apply(self, handler: HandlerDescriptor) -> Any:
        return handler(*self.args, **self.kwargs)


def bind_arguments(
    handler: HandlerDescriptor,
    placeholders: Mapping[str, str],
    *,
    positional: bool = False,
) -> BoundArguments:
    """Build the call arguments for *handler* from *placeholders*."""
    parameters = handler.parameters
    if not parameters:
        return BoundArguments()

    if len(parameters) == 1 and is_route_model(parameters[0].declared_type):
        model = build_route_model(
            parameters[0].declared_type, placeholders, positional=positional
        )
        return BoundArguments(args=(model,))

    return _bind_plain(parameters, placeholders, positional=positional)


def build_route_model(
    model: type[RouteModel],
    placeholders: Mapping[str, str],
    *,
    positional: bool = False,
) -> RouteModel:
    """Construct *model* from the placeholders named by its constructor.

    Constructor parameters with no matching placeholder are left out of
    the call entirely. With *positional*, matched values are passed in
    declaration order without padding, as for plain handlers. Any
    exception raised by the constructor (including a ``TypeError`` for a
    missing required argument) is re-raised as
    ``RouteModelConstructionError``.
    """
    try:
        constructor = parameters_of(model)
    except (NameError, TypeError, ValueError) as exc:
        raise RouteModelConstructionError(model, dict(placeholders)) from exc

    bound = _bind_plain(constructor, placeholders, positional=positional)
    try:
        return model(*bound.args, **bound.kwargs)
    except Exception as exc:
        matched = {p.name: placeholders[p.name] for p in constructor if p.name in placeholders}
        raise RouteModelConstructionError(model, matched) from exc


def _bind_plain(
    parameters: tuple[ParameterSpec, ...],
    placeholders: Mapping[str, str],
    *,
    positional: bool,
) -> BoundArguments:
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    for param in parameters:
        if not param.bindable or param.name not in placeholders:
            continue
        value = placeholders[param.name]
        if param.kind is inspect.Parameter.POSITIONAL_ONLY or (
            positional and param.kind is not inspect.Parameter.KEYWORD_ONLY
        ):
            args.append(value)
        else:
            kwargs[param.name] = value

    return BoundArguments(args=tuple(args), kwargs=kwargs)
