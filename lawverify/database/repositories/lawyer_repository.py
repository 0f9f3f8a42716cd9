"""Repository for the lawyers table."""

import sqlite3
from typing import List, Optional

from ...errors import ConflictError
from ..models.lawyer import LawyerRecord
from ..stores import DUPLICATE_LAWYER_MESSAGE, utcnow
from .base import BaseRepository


class LawyerRepository(BaseRepository):
    """SQLite-backed registry of verified lawyers."""

    async def get_by_id(self, lawyer_id: int) -> Optional[LawyerRecord]:
        query = "SELECT * FROM lawyers WHERE id = ?"
        row = await self.fetchone(query, (lawyer_id,))
        return LawyerRecord(**row) if row else None

    async def get_by_national_id(self, national_id: str) -> Optional[LawyerRecord]:
        """Verified record with this national ID, if any."""
        query = "SELECT * FROM lawyers WHERE national_id = ? AND verified = 1"
        row = await self.fetchone(query, (national_id,))
        return LawyerRecord(**row) if row else None

    async def get_by_letter_id(self, letter_id: str) -> Optional[LawyerRecord]:
        """Verified record with this letter ID, if any."""
        query = "SELECT * FROM lawyers WHERE letter_id = ? AND verified = 1"
        row = await self.fetchone(query, (letter_id,))
        return LawyerRecord(**row) if row else None

    async def get_by_credentials(self, national_id: str, letter_id: str) -> Optional[LawyerRecord]:
        """Verified record matching both identifiers exactly."""
        query = "SELECT * FROM lawyers WHERE national_id = ? AND letter_id = ? AND verified = 1"
        row = await self.fetchone(query, (national_id, letter_id))
        return LawyerRecord(**row) if row else None

    async def create(self, national_id: str, letter_id: str, full_name: str) -> LawyerRecord:
        """
        Insert a verified lawyer.

        Uniqueness is enforced by the table constraints, so check and insert
        happen in one statement.
        """
        query = """
            INSERT INTO lawyers (national_id, letter_id, full_name, verified, created_at)
            VALUES (?, ?, ?, 1, ?)
        """
        try:
            cursor = await self.execute(query, (national_id, letter_id, full_name, utcnow().isoformat()))
        except sqlite3.IntegrityError as e:
            if not self.tx.active:
                await self.conn.rollback()
            raise ConflictError(DUPLICATE_LAWYER_MESSAGE) from e
        return await self.get_by_id(cursor.lastrowid)

    async def delete(self, lawyer_id: int) -> bool:
        query = "DELETE FROM lawyers WHERE id = ?"
        cursor = await self.execute(query, (lawyer_id,))
        return cursor.rowcount > 0

    async def get_all(self) -> List[LawyerRecord]:
        query = "SELECT * FROM lawyers ORDER BY id"
        rows = await self.fetchall(query)
        return [LawyerRecord(**row) for row in rows]
