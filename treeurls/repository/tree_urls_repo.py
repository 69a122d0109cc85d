from sqlite3 import Connection
from typing import List


def ensure_schema(conn: Connection):
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS tree_urls (
            sha1 TEXT PRIMARY KEY,
            tree_urls TEXT NOT NULL
        )
        """
    )


def exists(conn: Connection, sha1: str) -> bool:
    row = conn.execute(
        "SELECT EXISTS(SELECT 1 FROM tree_urls WHERE sha1 = ?)", (sha1,)
    ).fetchone()
    return bool(row[0])


def list_for(conn: Connection, sha1: str) -> List[str]:
    rows = conn.execute("SELECT tree_urls FROM tree_urls WHERE sha1 = ?", (sha1,)).fetchall()
    return [r["tree_urls"] for r in rows]


def insert(conn: Connection, sha1: str, tree_urls: str):
    conn.execute(
        "INSERT INTO tree_urls (sha1, tree_urls) VALUES (?, ?)",
        (sha1, tree_urls),
    )


def update(conn: Connection, sha1: str, tree_urls: str):
    conn.execute("UPDATE tree_urls SET tree_urls = ? WHERE sha1 = ?", (tree_urls, sha1))


def delete(conn: Connection, sha1: str):
    conn.execute("DELETE FROM tree_urls WHERE sha1 = ?", (sha1,))
