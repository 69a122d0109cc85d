"""Storage backends for tree URL records.

``TreeURLStore`` is the interface the HTTP layer talks to. Three variants:

- ``PostgresStore``: the production adapter, draws from a psycopg connection pool.
- ``SQLiteStore``: local/dev adapter on a SQLite file (see repository.tree_urls_repo).
- ``MemoryStore``: dict-backed double used by tests and ``memory://``.

Adapters do not translate driver errors; callers decide how to surface them.
"""
from __future__ import annotations

import abc
import logging
from typing import Any

from .db import get_conn, parse_db_uri
from .repository import tree_urls_repo

logger = logging.getLogger(__name__)


class TreeURLStore(abc.ABC):
    @abc.abstractmethod
    def has_sha1(self, sha1: str) -> bool:
        """True iff a record exists for sha1."""

    @abc.abstractmethod
    def get_tree_urls(self, sha1: str) -> list[str]:
        """All payloads stored for sha1 (normally zero or one)."""

    @abc.abstractmethod
    def insert_tree_urls(self, sha1: str, tree_urls: str) -> None:
        """Create a record. Fails if sha1 is already stored."""

    @abc.abstractmethod
    def update_tree_urls(self, sha1: str, tree_urls: str) -> None:
        """Replace the payload of an existing record."""

    @abc.abstractmethod
    def delete_tree_urls(self, sha1: str) -> None:
        """Remove the record if present."""

    def close(self) -> None:
        pass


def uri_host(uri: str) -> str:
    """The part of a DB URI after the credentials; the password may itself contain @."""
    return uri.rpartition("@")[2] if "@" in uri else "..."


class PostgresStore(TreeURLStore):
    EXISTS_SQL = "SELECT EXISTS(SELECT 1 FROM tree_urls WHERE sha1 = %s)"
    SELECT_SQL = "SELECT tree_urls FROM tree_urls WHERE sha1 = %s"
    INSERT_SQL = "INSERT INTO tree_urls (sha1, tree_urls) VALUES (%s, %s)"
    # ONLY keeps the update off any tables inheriting from tree_urls
    UPDATE_SQL = "UPDATE ONLY tree_urls SET tree_urls = %s WHERE sha1 = %s"
    DELETE_SQL = "DELETE FROM tree_urls WHERE sha1 = %s"

    def __init__(self, pool: Any):
        self.pool = pool

    @classmethod
    def connect(cls, uri: str) -> "PostgresStore":
        from psycopg_pool import ConnectionPool

        logger.info(f"Connecting to PostgreSQL: {uri_host(uri)}")
        # broken connections are checked and replaced before being handed out
        pool = ConnectionPool(
            uri,
            kwargs={"autocommit": True},
            check=ConnectionPool.check_connection,
            open=True,
        )
        return cls(pool)

    def has_sha1(self, sha1: str) -> bool:
        with self.pool.connection() as conn:
            row = conn.execute(self.EXISTS_SQL, (sha1,)).fetchone()
        return bool(row[0]) if row else False

    def get_tree_urls(self, sha1: str) -> list[str]:
        with self.pool.connection() as conn:
            rows = conn.execute(self.SELECT_SQL, (sha1,)).fetchall()
        return [r[0] for r in rows]

    def insert_tree_urls(self, sha1: str, tree_urls: str) -> None:
        with self.pool.connection() as conn:
            conn.execute(self.INSERT_SQL, (sha1, tree_urls))

    def update_tree_urls(self, sha1: str, tree_urls: str) -> None:
        with self.pool.connection() as conn:
            conn.execute(self.UPDATE_SQL, (tree_urls, sha1))

    def delete_tree_urls(self, sha1: str) -> None:
        with self.pool.connection() as conn:
            conn.execute(self.DELETE_SQL, (sha1,))

    def close(self) -> None:
        self.pool.close()


class SQLiteStore(TreeURLStore):
    def __init__(self, db_path: str):
        self.db_path = db_path

    def ensure_schema(self):
        with get_conn(self.db_path) as conn:
            tree_urls_repo.ensure_schema(conn)

    def has_sha1(self, sha1: str) -> bool:
        with get_conn(self.db_path) as conn:
            return tree_urls_repo.exists(conn, sha1)

    def get_tree_urls(self, sha1: str) -> list[str]:
        with get_conn(self.db_path) as conn:
            return tree_urls_repo.list_for(conn, sha1)

    def insert_tree_urls(self, sha1: str, tree_urls: str) -> None:
        with get_conn(self.db_path) as conn:
            tree_urls_repo.insert(conn, sha1, tree_urls)

    def update_tree_urls(self, sha1: str, tree_urls: str) -> None:
        with get_conn(self.db_path) as conn:
            tree_urls_repo.update(conn, sha1, tree_urls)

    def delete_tree_urls(self, sha1: str) -> None:
        with get_conn(self.db_path) as conn:
            tree_urls_repo.delete(conn, sha1)


class MemoryStore(TreeURLStore):
    def __init__(self):
        self.records: dict[str, str] = {}

    def has_sha1(self, sha1: str) -> bool:
        return sha1 in self.records

    def get_tree_urls(self, sha1: str) -> list[str]:
        if sha1 not in self.records:
            return []
        return [self.records[sha1]]

    def insert_tree_urls(self, sha1: str, tree_urls: str) -> None:
        if sha1 in self.records:
            raise ValueError(f"duplicate sha1: {sha1}")
        self.records[sha1] = tree_urls

    def update_tree_urls(self, sha1: str, tree_urls: str) -> None:
        self.records[sha1] = tree_urls

    def delete_tree_urls(self, sha1: str) -> None:
        self.records.pop(sha1, None)


def create_store(uri: str) -> TreeURLStore:
    """Build the backend named by a DB URI (postgres://, sqlite:///path, memory://)."""
    kind, target = parse_db_uri(uri)
    if kind == "postgres":
        return PostgresStore.connect(target)
    if kind == "sqlite":
        store = SQLiteStore(target)
        store.ensure_schema()
        logger.info(f"Using SQLite database at {target}")
        return store
    logger.warning("Using in-memory storage; records are lost on exit")
    return MemoryStore()
