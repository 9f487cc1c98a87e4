"""Command-line entry point: ``python -m dirindex [ROOT]``."""

import argparse
import logging

import uvicorn

from .config import DIRINDEX_CONFIG
from .main import create_app

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dirindex",
        description="Serve a directory tree with generated index pages.",
    )
    parser.add_argument("root", nargs="?", default=DIRINDEX_CONFIG["root"])
    parser.add_argument("--host", default=DIRINDEX_CONFIG["host"])
    parser.add_argument("--port", type=int, default=DIRINDEX_CONFIG["port"])
    parser.add_argument(
        "--show-hidden",
        action="store_true",
        default=DIRINDEX_CONFIG["show_hidden"],
        help="list entries whose names start with a dot",
    )
    parser.add_argument("--log-level", default=DIRINDEX_CONFIG["log_level"])
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    app = create_app(args.root, show_hidden=args.show_hidden)
    logger.info("Serving %s on http://%s:%d", app.state.resolver.root, args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
