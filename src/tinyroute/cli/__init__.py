"""tinyroute CLI — inspect a router's rule table and trace dispatch decisions.

Entry point registered as ``tinyroute`` in ``pyproject.toml``::

    [project.scripts]
    tinyroute = "tinyroute.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``tinyroute`` command."""
    parser = argparse.ArgumentParser(
        prog="tinyroute",
        description="tinyroute — pattern routing with convention-based fallback.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log routing decisions to stderr",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- tinyroute routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )

    # -- tinyroute resolve ------------------------------------------------
    resolve_parser = subparsers.add_parser(
        "resolve", help="Show which handler a request would reach"
    )
    resolve_parser.add_argument(
        "router",
        help="Import string (e.g. myapp:router)",
    )
    resolve_parser.add_argument("method", help="HTTP method (e.g. GET)")
    resolve_parser.add_argument("uri", help="Request URI (e.g. /users/42)")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from tinyroute.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from tinyroute.cli._lookup import run_resolve

        run_resolve(args)
