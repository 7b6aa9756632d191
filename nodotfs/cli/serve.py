"""Serve a directory over HTTP with dot files and dot directories hidden.

Usage: python -m nodotfs [--dir PATH]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from nodotfs.api.server import create_app
from nodotfs.config import LOG, SERVER
from nodotfs.logging import configure_logging, create_logger

logger = logging.getLogger("nodotfs.serve")

_UVICORN_LEVELS = {"critical", "error", "warning", "info", "debug", "trace"}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="nodotfs", description="Serve a directory over HTTP with dot files hidden.")
    ap.add_argument("--dir", default=SERVER.root_dir, help="the dir to serve")
    return ap


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(LOG.level)

    import uvicorn

    events = create_logger("server")
    app = create_app(args.dir, events=events)
    root = app.state.root
    if not Path(root).is_dir():
        logger.warning("serving directory %s does not exist yet", root)
        events.warning("root_missing", dir=str(root))

    addr = f":{SERVER.port}"
    logger.info('serving "%s" on %s', args.dir, addr)
    events.info("server_start", dir=str(args.dir), addr=addr, host=SERVER.host)
    try:
        level = LOG.level.lower()
        uvicorn.run(
            app,
            host=SERVER.host,
            port=SERVER.port,
            log_level=level if level in _UVICORN_LEVELS else "info",
        )
    finally:
        events.info("server_stop")
        events.close()


if __name__ == "__main__":
    main()
