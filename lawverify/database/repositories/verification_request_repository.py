"""Repository for the verification_requests table."""

from typing import List, Optional

from ..models.verification_request import RequestStatus, VerificationRequest
from ..stores import utcnow
from .base import BaseRepository


class VerificationRequestRepository(BaseRepository):
    """SQLite-backed queue of manual-review requests."""

    async def get_by_id(self, request_id: int) -> Optional[VerificationRequest]:
        query = "SELECT * FROM verification_requests WHERE id = ?"
        row = await self.fetchone(query, (request_id,))
        return VerificationRequest(**row) if row else None

    async def create(self, national_id: str, letter_id: str) -> VerificationRequest:
        """Queue a new pending request."""
        query = """
            INSERT INTO verification_requests (national_id, letter_id, status, submitted_at)
            VALUES (?, ?, ?, ?)
        """
        cursor = await self.execute(
            query,
            (national_id, letter_id, RequestStatus.PENDING.value, utcnow().isoformat()),
        )
        return await self.get_by_id(cursor.lastrowid)

    async def find_pending(self, national_id: str, letter_id: str) -> Optional[VerificationRequest]:
        """Oldest pending request for this pair, if any."""
        query = """
            SELECT * FROM verification_requests
            WHERE national_id = ? AND letter_id = ? AND status = ?
            ORDER BY id
            LIMIT 1
        """
        row = await self.fetchone(query, (national_id, letter_id, RequestStatus.PENDING.value))
        return VerificationRequest(**row) if row else None

    async def get_by_status(self, status: RequestStatus) -> List[VerificationRequest]:
        query = "SELECT * FROM verification_requests WHERE status = ? ORDER BY id"
        rows = await self.fetchall(query, (status.value,))
        return [VerificationRequest(**row) for row in rows]

    async def update_status(
        self, request_id: int, status: RequestStatus, reviewed_by: Optional[str] = None
    ) -> Optional[VerificationRequest]:
        """Record a disposition. Returns None when the request does not exist."""
        query = """
            UPDATE verification_requests
            SET status = ?, reviewed_at = ?, reviewed_by = ?
            WHERE id = ?
        """
        reviewed_at = None if status == RequestStatus.PENDING else utcnow().isoformat()
        cursor = await self.execute(query, (status.value, reviewed_at, reviewed_by, request_id))
        if cursor.rowcount == 0:
            return None
        return await self.get_by_id(request_id)

    async def delete(self, request_id: int) -> bool:
        query = "DELETE FROM verification_requests WHERE id = ?"
        cursor = await self.execute(query, (request_id,))
        return cursor.rowcount > 0

    async def get_all(self) -> List[VerificationRequest]:
        query = "SELECT * FROM verification_requests ORDER BY id"
        rows = await self.fetchall(query)
        return [VerificationRequest(**row) for row in rows]
