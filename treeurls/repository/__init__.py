"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so the storage adapters avoid SQL strings.
"""
from __future__ import annotations
