"""SQLite row store for running without the managed backend."""

import sqlite3
from pathlib import Path
from typing import Any
from uuid import uuid4

import aiosqlite

from memgrid.core.errors import StoreError
from memgrid.core.logging import get_logger
from memgrid.memory.base import Row, RowStore
from memgrid.memory.mapping import COLUMNS

logger = get_logger("memory.store")

SCHEMA = """
CREATE TABLE IF NOT EXISTS memories (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    category TEXT NOT NULL,
    content TEXT NOT NULL,
    visibility TEXT NOT NULL DEFAULT 'private',
    user_id TEXT,
    author_email TEXT,
    timestamp INTEGER NOT NULL,
    date_added TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_memories_visibility
    ON memories(visibility, timestamp DESC);

CREATE INDEX IF NOT EXISTS idx_memories_owner
    ON memories(user_id, visibility, timestamp DESC);
"""

TABLES = {"memories": COLUMNS}


class SQLiteRowStore(RowStore):
    """aiosqlite-backed row store with the same table layout as the managed schema."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()
        logger.info(f"Connected to memory store: {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Memory store not connected. Call connect() first.")
        return self._conn

    def _columns(self, table: str, names: list[str]) -> tuple[str, ...]:
        """Known columns of table; rejects unknown tables and column names."""
        columns = TABLES.get(table)
        if columns is None:
            raise StoreError(f"access {table}", "unknown table")
        unknown = [name for name in names if name not in columns]
        if unknown:
            raise StoreError(f"access {table}", f"unknown column(s): {', '.join(unknown)}")
        return columns

    async def select(
        self,
        table: str,
        filters: dict[str, Any],
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[Row]:
        names = list(filters)
        if order_by:
            names.append(order_by)
        columns = self._columns(table, names)

        # Identifiers are checked against the schema above; values are bound
        sql = f"SELECT {', '.join(columns)} FROM {table}"
        if filters:
            sql += " WHERE " + " AND ".join(f"{name} = ?" for name in filters)
        if order_by:
            sql += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"

        try:
            async with self.conn.execute(sql, tuple(filters.values())) as cursor:
                rows = [dict(row) async for row in cursor]
        except sqlite3.Error as e:
            raise StoreError(f"select {table}", str(e)) from e

        logger.debug(f"select {table} {filters} -> {len(rows)} rows")
        return rows

    async def insert(self, table: str, row: Row) -> Row:
        row = dict(row)
        if not row.get("id"):
            row["id"] = str(uuid4())
        self._columns(table, list(row))

        names = list(row)
        sql = f"INSERT INTO {table} ({', '.join(names)}) VALUES ({', '.join('?' for _ in names)})"
        try:
            await self.conn.execute(sql, tuple(row.values()))
            await self.conn.commit()
            stored = await self.select(table, {"id": row["id"]}, order_by=None)
        except sqlite3.Error as e:
            raise StoreError(f"insert {table}", str(e)) from e

        if not stored:
            raise StoreError(f"insert {table}", "row not found after insert")
        return stored[0]
