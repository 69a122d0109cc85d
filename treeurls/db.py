from __future__ import annotations

# treeurls/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

from .errors import ConfigError

# DB URI resolution order:
# 1) env TREE_URLS_DB_URI (highest)
# 2) db.uri in the YAML config
# 3) fallback: sqlite file tree_urls.db in the working directory
DEFAULT_DB_URI = "sqlite:///tree_urls.db"
DEFAULT_CONFIG_PATH = "config.yaml"
_SCHEMES = ("postgres", "postgresql", "sqlite", "memory")


def read_config(path: str | None = None) -> dict:
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return cfg if isinstance(cfg, dict) else {}


def get_db_uri(cfg: dict | None = None) -> str:
    env_uri = os.environ.get("TREE_URLS_DB_URI")
    if env_uri:
        return env_uri
    db_cfg = (cfg or {}).get("db") or {}
    v = db_cfg.get("uri") if isinstance(db_cfg, dict) else None
    if isinstance(v, str) and v.strip():
        return v.strip()
    return DEFAULT_DB_URI


def get_log_level(cfg: dict | None = None) -> str:
    level = (cfg or {}).get("log_level") or "INFO"
    return str(level).upper()


def parse_db_uri(uri: str) -> tuple[str, str]:
    """
    Split a DB URI into (scheme, target).

    postgres(ql)://... keeps the whole URI as the target (psycopg takes it as-is),
    sqlite:///path/to.db yields the file path, memory:// yields "".
    """
    scheme, sep, rest = uri.partition("://")
    scheme = scheme.lower()
    if not sep or scheme not in _SCHEMES:
        raise ConfigError(f"unsupported database uri: {uri!r}")
    if scheme in ("postgres", "postgresql"):
        return "postgres", uri
    if scheme == "sqlite":
        # sqlite:///relative.db -> "relative.db", sqlite:////abs/x.db -> "/abs/x.db"
        path = rest[1:] if rest.startswith("/") else rest
        if not path:
            raise ConfigError("sqlite uri needs a file path")
        return "sqlite", path
    return "memory", ""


@contextmanager
def get_conn(db_path: str) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection in autocommit mode with Row as row_factory.
    The parent directory is created when missing.
    """
    dirn = os.path.dirname(db_path) or "."
    os.makedirs(dirn, exist_ok=True)
    conn = sqlite3.connect(
        db_path,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()
