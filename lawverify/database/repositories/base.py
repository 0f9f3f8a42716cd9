"""Base class for the SQLite repositories and their shared commit scope."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiosqlite


class Transaction:
    """
    Commit scope shared by every repository on one connection.

    Outside `begin()` each write commits on its own. Inside it, writes from
    all repositories on the connection are committed together when the block
    exits, or rolled back if it raises. Nested blocks join the outer one.
    """

    def __init__(self, conn: aiosqlite.Connection):
        self.conn = conn
        self.depth = 0

    @property
    def active(self) -> bool:
        return self.depth > 0

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[None]:
        if self.active:
            self.depth += 1
            try:
                yield
            finally:
                self.depth -= 1
            return

        self.depth = 1
        try:
            yield
        except BaseException:
            self.depth = 0
            await self.conn.rollback()
            raise
        self.depth = 0
        await self.conn.commit()


class BaseRepository:
    """Base repository over a shared aiosqlite connection."""

    def __init__(self, conn: aiosqlite.Connection, tx: Optional[Transaction] = None):
        """
        :param conn: Database connection.
        :param tx: Commit scope shared with the other repositories on `conn`.
        """
        self.conn = conn
        self.tx = tx if tx is not None else Transaction(conn)

    def transaction(self):
        """Group the writes made inside the block into one commit."""
        return self.tx.begin()

    async def execute(self, query: str, parameters=None) -> aiosqlite.Cursor:
        """Run a write query. Commits unless a transaction is open."""
        async with self.conn.execute(query, parameters or ()) as cursor:
            if not self.tx.active:
                await self.conn.commit()
            return cursor

    async def fetchone(self, query: str, parameters=None):
        async with self.conn.execute(query, parameters or ()) as cursor:
            return await cursor.fetchone()

    async def fetchall(self, query: str, parameters=None):
        async with self.conn.execute(query, parameters or ()) as cursor:
            return await cursor.fetchall()
