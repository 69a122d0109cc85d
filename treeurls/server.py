"""
tree-urls server entry point.

Usage:
  tree-urls [--port ADDR] [--config PATH]
  tree-urls --version

ADDR is a port ("60000") or host:port ("127.0.0.1:60000"). The database is picked
from TREE_URLS_DB_URI or `db.uri` in the YAML config (see treeurls.db).
"""
from __future__ import annotations

import argparse
import logging
import os

import uvicorn

from . import __version__
from .api import create_app
from .db import DEFAULT_CONFIG_PATH, get_db_uri, get_log_level, read_config
from .errors import ConfigError
from .storage import create_store

logger = logging.getLogger(__name__)

DEFAULT_PORT = "60000"


def fix_addr(addr: str) -> str:
    if not addr.startswith(":") and ":" not in addr:
        return f":{addr}"
    return addr


def split_addr(addr: str) -> tuple[str, int]:
    host, _, port = fix_addr(addr).rpartition(":")
    try:
        return (host or "0.0.0.0"), int(port)
    except ValueError:
        raise ConfigError(f"invalid listen address: {addr!r}") from None


def version_string() -> str:
    gitref = os.environ.get("TREE_URLS_GIT_REF", "unknown")
    return f"App-Version: {__version__}\nGit-Ref: {gitref}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tree-urls", description="CRUD service for SHA1-keyed tree URLs")
    parser.add_argument("--port", default=DEFAULT_PORT, help="listen address: port or host:port (default 60000)")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML config file (default config.yaml)")
    parser.add_argument("--version", action="version", version=version_string())
    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = read_config(args.config)
    logging.basicConfig(
        level=get_log_level(cfg),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        host, port = split_addr(args.port)
        store = create_store(get_db_uri(cfg))
    except ConfigError as e:
        parser.error(str(e))
    app = create_app(store)
    logger.info(f"Listening on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
