"""``tinyroute routes`` — list registered routes.

Prints every pattern in matching order with its verbs and handlers,
followed by the controllers available to convention dispatch.
"""

import argparse

from tinyroute.cli._resolve import load_router
from tinyroute.routing.route import handler_label


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a tinyroute Router.

    Resolves ``args.router`` and prints a table of METHOD, PATTERN,
    and HANDLER, one row per verb.
    """
    router = load_router(args.router)

    rows: list[tuple[str, str, str]] = []
    for route in router.routes:
        for verb, handler in route.handlers.items():
            rows.append((verb.upper(), "/" + route.pattern, handler_label(handler)))

    if not rows:
        print("No routes registered.")
    else:
        max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
        max_pattern = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

        fmt = f"{{:<{max_method}}}  {{:<{max_pattern}}}  {{}}"
        print(fmt.format("METHOD", "PATTERN", "HANDLER"))
        sep_len = max_method + max_pattern + 4 + max(len(r[2]) for r in rows)
        print("-" * min(sep_len, 80))
        for method, pattern, handler in rows:
            print(fmt.format(method, pattern, handler))

    controllers = router.controllers.names
    if controllers:
        print()
        print("Convention controllers:")
        for name in controllers:
            print(f"  {name}")
