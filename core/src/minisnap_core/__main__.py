from __future__ import annotations

import argparse
import logging
import os
import sys

import uvicorn
from pydantic import ValidationError

from minisnap_core.app import LOG_FORMAT, create_app
from minisnap_core.config import apply_overrides, load_config
from minisnap_core.content.store import EntryStore
from minisnap_core.errors import PersistenceFailure

logger = logging.getLogger("minisnap_core")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="minisnap", description="Serve minisnap.")
    parser.add_argument("--bind", default="", help="override bind address, e.g. :9090")
    parser.add_argument("--content-dir", default="", help="override content directory path")
    parser.add_argument(
        "--admin-password",
        default="",
        help="override admin password (for development only)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )

    environ = apply_overrides(
        os.environ,
        bind=args.bind,
        content_dir=args.content_dir,
        admin_password=args.admin_password,
    )
    try:
        config = load_config(environ)
    except (ValidationError, ValueError) as exc:
        logger.error("load config: %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(config.logging.level)

    try:
        store = EntryStore(config.content_dir)
    except PersistenceFailure as exc:
        logger.error("init store: %s (%s)", exc, exc.__cause__)
        sys.exit(1)

    host, port = config.network.bind_host, config.network.port
    logger.info("starting server on %s:%d", host, port)
    uvicorn.run(create_app(config, store=store), host=host, port=port)


if __name__ == "__main__":
    main()
