"""``tinyroute resolve`` — trace how a request would be dispatched.

Runs matching, reflection, and argument binding for a method and URI
without calling the handler. Exits with code 1 when resolution fails.
"""

import argparse

from tinyroute.cli._resolve import fail, load_router
from tinyroute.errors import TinyRouteError
from tinyroute.http.request import Request


def run_resolve(args: argparse.Namespace) -> None:
    """Print the dispatch decision for ``args.method`` ``args.uri``."""
    router = load_router(args.router)

    request = Request(method=args.method, uri=args.uri)
    try:
        resolution = router.resolve(request.http_method(), request.path_of_request_uri())
    except TinyRouteError as exc:
        fail(exc)

    if resolution.route is not None:
        print(f"Matched:      /{resolution.route.pattern} (explicit)")
    elif resolution.convention is not None:
        target = resolution.convention
        print(f"Matched:      {target.qualified_name}.{target.method} (convention)")

    print(f"Handler:      {resolution.handler.name}")
    params = ", ".join(p.name for p in resolution.handler.parameters)
    print(f"Parameters:   ({params})")
    print(f"Placeholders: {resolution.placeholders}")

    arguments = resolution.arguments
    bound = [repr(a) for a in arguments.args]
    bound.extend(f"{k}={v!r}" for k, v in arguments.kwargs.items())
    print(f"Arguments:    ({', '.join(bound)})")
