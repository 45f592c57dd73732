"""Immutable request metadata for dispatch.

The router needs only two facts about a request: the path of its URI
and its HTTP verb. Anything with those two methods can be dispatched;
``Request`` is the bundled implementation, built from WSGI/CGI server
params or an ASGI scope.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable
from urllib.parse import urlsplit


@runtime_checkable
class RequestLike(Protocol):
    """The minimal request interface the router dispatches on."""

    def path_of_request_uri(self) -> str: ...
    def http_method(self) -> str: ...


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable request: verb plus raw request URI.

    ``uri`` may carry a query string or even a full URL; only its path
    takes part in routing::

        Request("GET", "/users/42?tab=posts").path_of_request_uri()  -> "/users/42"
    """

    method: str
    uri: str

    def path_of_request_uri(self) -> str:
        return urlsplit(self.uri).path

    def http_method(self) -> str:
        return self.method

    @property
    def query_string(self) -> str:
        return urlsplit(self.uri).query

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "Request":
        """Build from WSGI/CGI server params.

        Prefers ``REQUEST_URI`` when the server sets it, otherwise
        rebuilds the URI from ``PATH_INFO`` and ``QUERY_STRING``.
        """
        uri = environ.get("REQUEST_URI")
        if not uri:
            uri = environ.get("PATH_INFO") or "/"
            query = environ.get("QUERY_STRING")
            if query:
                uri = f"{uri}?{query}"
        return cls(method=environ.get("REQUEST_METHOD", "GET"), uri=uri)

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> "Request":
        """Build from an ASGI HTTP scope."""
        uri = scope["path"]
        query = scope.get("query_string", b"")
        if query:
            uri = f"{uri}?{query.decode('latin-1')}"
        return cls(method=scope["method"], uri=uri)
