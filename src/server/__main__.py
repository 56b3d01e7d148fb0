"""Run the course reader with ``python -m server``."""

from __future__ import annotations

import argparse
import os
from pathlib import Path

import uvicorn

from coursebook.config import COURSEBOOK_LOG_LEVEL, COURSEBOOK_ROOT
from coursebook.utils.logging_config import configure_logging, get_logger
from server.main import create_app
from server.server_config import DEFAULT_HOST, DEFAULT_PORT

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m server", description="Serve a markdown textbook over HTTP.")
    parser.add_argument("--root", type=Path, default=COURSEBOOK_ROOT, help="Course checkout directory")
    parser.add_argument("--host", default=os.getenv("HOST", DEFAULT_HOST))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", str(DEFAULT_PORT))))
    parser.add_argument(
        "--reload",
        action="store_true",
        default=os.getenv("RELOAD", "false").lower() == "true",
        help="Restart on code changes",
    )
    parser.add_argument("--log-level", default=COURSEBOOK_LOG_LEVEL)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    root = args.root.expanduser().resolve()

    if args.reload:
        # The reloader imports the app in a new process that reads COURSEBOOK_ROOT.
        os.environ["COURSEBOOK_ROOT"] = str(root)
        target: object = "server.main:app"
    else:
        target = create_app(root)

    logger.info(
        "Serving course",
        extra={"root": str(root), "host": args.host, "port": args.port, "reload": args.reload},
    )
    uvicorn.run(
        target,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
