"""Ordered rule store — registered patterns and their verb tables.

Routes are kept in registration order and the first pattern that
matches a path wins. Writers are serialized by a lock; readers work
on an immutable tuple snapshot, so dispatch never waits on
registration.
"""

import logging
import threading

from tinyroute.routing.pattern import (
    compile_pattern,
    extract_placeholders,
    normalize_path,
    validate_pattern,
)
from tinyroute.routing.route import HandlerRef, Route, RouteMatch

logger = logging.getLogger("tinyroute.routing")


class RuleStore:
    """Append-only sequence of routes keyed by their trimmed pattern.

    Usage::

        store = RuleStore()
        store.register("/users/{id}", "get", show_user)
        store.register("/users/{id}", "delete", delete_user)
        match = store.match("users/42")
        match.route.handlers["get"]  -> show_user
        match.placeholders           -> {"id": "42"}
    """

    __slots__ = ("_lock", "_routes", "_validate")

    def __init__(self, *, validate: bool = True) -> None:
        self._routes: tuple[Route, ...] = ()
        self._lock = threading.Lock()
        self._validate = validate

    def register(self, pattern: str, verb: str, handler: HandlerRef) -> Route:
        """Bind *handler* to *verb* on *pattern*.

        An identical (trimmed, case-sensitive) pattern reuses its
        existing entry and position; the last handler registered for
        a verb wins. Otherwise a new route is appended.
        """
        rule = normalize_path(pattern)
        if self._validate:
            validate_pattern(rule)

        with self._lock:
            routes = self._routes
            for index, route in enumerate(routes):
                if route.pattern == rule:
                    if verb in route.handlers:
                        logger.debug("Replacing %s handler on %r", verb, rule)
                    updated = route.with_handler(verb, handler)
                    self._routes = (*routes[:index], updated, *routes[index + 1 :])
                    return updated

            created = Route(pattern=rule, handlers={verb: handler}, matcher=compile_pattern(rule))
            self._routes = (*routes, created)
            logger.debug("Registered %s %r", verb, rule)
            return created

    def find_matching_index(self, uri: str) -> int | None:
        """Index of the first route whose pattern fully matches *uri*, else None."""
        path = normalize_path(uri)
        for index, route in enumerate(self._routes):
            if route.matcher.fullmatch(path) is not None:
                return index
        return None

    def match(self, uri: str) -> RouteMatch | None:
        """Find the first matching route and extract its placeholders."""
        path = normalize_path(uri)
        for index, route in enumerate(self._routes):
            if route.matcher.fullmatch(path) is not None:
                return RouteMatch(
                    index=index,
                    route=route,
                    placeholders=extract_placeholders(route.pattern, path),
                )
        return None

    @property
    def routes(self) -> tuple[Route, ...]:
        """Snapshot of all routes in registration order."""
        return self._routes

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]

    def __len__(self) -> int:
        return len(self._routes)
