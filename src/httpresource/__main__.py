"""
=============================================================================
HTTPRESOURCE CLI ENTRY POINT
=============================================================================

Inspect or serve an application's route table from the command line.

=============================================================================
USAGE
=============================================================================

    # Print the route table, in priority order
    python -m httpresource shop.app:dispatcher --routes

    # Serve it with the wsgiref development server
    python -m httpresource shop.app:dispatcher --port 3000

    # Verbose: every dispatch state transition is logged
    python -m httpresource shop.app:dispatcher --log-level DEBUG

APP is "module:attribute". The attribute may be a Dispatcher, a RouteTable,
or a list of Resource classes; the latter two get a Dispatcher built from
RouterConfig.from_env().

=============================================================================
"""

from importlib import import_module
from typing import Any, List, Optional
from wsgiref.simple_server import make_server
import argparse
import logging
import sys

from . import __version__
from .access_log import configure_logging
from .config import RouterConfig
from .dispatcher import Dispatcher
from .wsgi import WSGIApplication


logger = logging.getLogger(__name__)


def load_app(app_path: str) -> Any:
    """
    Import "module:attribute".

    Raises:
        ValueError: If `app_path` has no ":".
    """
    module_name, sep, attribute = app_path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Expected 'module:attribute', got {app_path!r}")
    target: Any = import_module(module_name)
    for part in attribute.split("."):
        target = getattr(target, part)
    return target


def build_dispatcher(target: Any, config: RouterConfig) -> Dispatcher:
    if isinstance(target, Dispatcher):
        return target
    return Dispatcher(target, config=config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m httpresource",
        description="Declarative HTTP resource router",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m httpresource shop.app:dispatcher --routes      # Show routes
  python -m httpresource shop.app:dispatcher               # Serve on :8080
  python -m httpresource shop.app:RESOURCES --port 3000    # From a list
        """,
    )

    parser.add_argument("app", help="Application as module:attribute")

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8080,
        help="Port to listen on (default: 8080)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # OTHER ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--routes",
        action="store_true",
        help="Print the route table and exit",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: HTTPRESOURCE_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"httpresource {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = RouterConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    config.validate()
    configure_logging(config)

    try:
        dispatcher = build_dispatcher(load_app(args.app), config)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error: cannot load {args.app}: {e}", file=sys.stderr)
        return 1

    if args.routes:
        print(dispatcher.routes.describe())
        return 0

    app = WSGIApplication(dispatcher)
    with make_server(args.host, args.port, app) as server:
        logger.info("Serving %d routes on http://%s:%d", len(dispatcher.routes), args.host, args.port)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
