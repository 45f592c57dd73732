"""Convention dispatch — derive a controller and method from the URI itself.

When no registered pattern matches, the path is read as
``<controller segments...>/<method>``::

    "blog_post/show"        -> BlogPost.show
    "admin/user_role/edit"  -> Admin.UserRole.edit

The derivation is purely syntactic. Whether the controller is
registered and has the method is checked later by the reflector.
"""

from dataclasses import dataclass

from tinyroute.routing.pattern import normalize_path

NAMESPACE_SEPARATOR = "."


@dataclass(frozen=True, slots=True)
class ConventionTarget:
    """A controller name and method derived from URI segments."""

    namespace: str
    segments: tuple[str, ...]
    method: str

    @property
    def qualified_name(self) -> str:
        """Fully qualified controller name, e.g. ``"app.controllers.BlogPost"``."""
        return qualify(self.namespace, NAMESPACE_SEPARATOR.join(self.segments))


def class_segment(segment: str) -> str:
    """Turn one URI segment into a class-name segment.

    ``foo_bar`` -> ``FooBar`` (every part lower-cased then capitalized);
    ``fooBar`` -> ``FooBar`` (only the first character is touched).
    """
    if "_" in segment:
        return "".join(part.capitalize() for part in segment.split("_"))
    return segment[:1].upper() + segment[1:]


def resolve_convention(uri: str, namespace: str = "") -> ConventionTarget:
    """Split *uri* into controller segments and a trailing method name.

    An empty path yields an empty method name, which the reflector
    rejects with ``TargetResolutionError``.
    """
    path = normalize_path(uri)
    if not path:
        return ConventionTarget(namespace=namespace, segments=(), method="")

    *segments, method = path.split("/")
    return ConventionTarget(
        namespace=namespace,
        segments=tuple(class_segment(s) for s in segments),
        method=method,
    )


def qualify(namespace: str, name: str) -> str:
    """Join a root namespace and a relative name, skipping empty parts."""
    return NAMESPACE_SEPARATOR.join(part for part in (namespace, name) if part)
