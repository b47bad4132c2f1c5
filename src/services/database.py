import aiosqlite
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterable, Optional, Tuple
import logging
import os

logger = logging.getLogger(__name__)


class Database:
    """
    Stores the modification times seen during the last build, keyed by
    (kind, identifier), e.g. ('item', '/about/') or ('code', 'lib/helpers.py').
    """

    def __init__(self, path: str):
        self.path = path

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = await aiosqlite.connect(self.path)
        await conn.execute("PRAGMA journal_mode=WAL;")
        try:
            yield conn
        finally:
            await conn.close()

    async def fetchone(self, query: str, params: tuple = ()):
        async with self.connect() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchone()

    async def fetchall(self, query: str, params: tuple = ()):
        async with self.connect() as conn:
            cursor = await conn.execute(query, params)
            return await cursor.fetchall()

    async def init_tables(self) -> None:
        """Initialize the mtime table."""
        async with self.connect() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS mtimes (
                    kind TEXT NOT NULL,
                    identifier TEXT NOT NULL,
                    mtime REAL,
                    recorded_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (kind, identifier)
                )
            """)
            await conn.commit()
            logger.info("Database tables initialized")

    async def get_mtime(self, kind: str, identifier: str) -> Optional[float]:
        row = await self.fetchone(
            "SELECT mtime FROM mtimes WHERE kind = ? AND identifier = ?",
            (kind, identifier)
        )
        return row[0] if row else None

    async def get_mtimes(self, kind: Optional[str] = None) -> Dict[Tuple[str, str], Optional[float]]:
        """All recorded mtimes, optionally restricted to one kind."""
        if kind:
            rows = await self.fetchall(
                "SELECT kind, identifier, mtime FROM mtimes WHERE kind = ?",
                (kind,)
            )
        else:
            rows = await self.fetchall("SELECT kind, identifier, mtime FROM mtimes")
        return {(row[0], row[1]): row[2] for row in rows}

    async def record_mtimes(self, entries: Iterable[Tuple[str, str, Optional[float]]]) -> int:
        """Insert or replace (kind, identifier, mtime) rows."""
        entries = list(entries)
        async with self.connect() as conn:
            await conn.executemany(
                """
                INSERT OR REPLACE INTO mtimes (kind, identifier, mtime)
                VALUES (?, ?, ?)
                """,
                entries
            )
            await conn.commit()
        return len(entries)

    async def clear(self, kind: Optional[str] = None) -> int:
        async with self.connect() as conn:
            if kind:
                cursor = await conn.execute("DELETE FROM mtimes WHERE kind = ?", (kind,))
            else:
                cursor = await conn.execute("DELETE FROM mtimes")
            await conn.commit()
            return cursor.rowcount
