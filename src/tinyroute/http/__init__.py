"""Request abstraction consumed by ``Router.dispatch()``."""

from tinyroute.http.request import Request, RequestLike

__all__ = ["Request", "RequestLike"]
