"""
Store ports for the registry and the request queue, plus in-memory backends.

The services depend only on the two protocols below, so the SQLite
repositories and the in-memory stores are interchangeable. Key generation is
the store's job.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from ..errors import ConflictError
from .models import LawyerRecord, RequestStatus, VerificationRequest

DUPLICATE_LAWYER_MESSAGE = "Lawyer with these credentials already exists"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RegistryStore(Protocol):
    """Verified-lawyer records, queried by exact match."""

    async def get_by_id(self, lawyer_id: int) -> Optional[LawyerRecord]: ...

    async def get_by_national_id(self, national_id: str) -> Optional[LawyerRecord]: ...

    async def get_by_letter_id(self, letter_id: str) -> Optional[LawyerRecord]: ...

    async def get_by_credentials(self, national_id: str, letter_id: str) -> Optional[LawyerRecord]: ...

    async def create(self, national_id: str, letter_id: str, full_name: str) -> LawyerRecord:
        """Insert a verified record. Raises ConflictError if either identifier is taken."""
        ...

    async def delete(self, lawyer_id: int) -> bool: ...

    async def get_all(self) -> List[LawyerRecord]: ...


class RequestStore(Protocol):
    """Manual-review requests in insertion order."""

    async def get_by_id(self, request_id: int) -> Optional[VerificationRequest]: ...

    async def create(self, national_id: str, letter_id: str) -> VerificationRequest: ...

    async def find_pending(self, national_id: str, letter_id: str) -> Optional[VerificationRequest]: ...

    async def get_by_status(self, status: RequestStatus) -> List[VerificationRequest]: ...

    async def update_status(
        self, request_id: int, status: RequestStatus, reviewed_by: Optional[str] = None
    ) -> Optional[VerificationRequest]: ...

    async def delete(self, request_id: int) -> bool: ...

    async def get_all(self) -> List[VerificationRequest]: ...


class MemoryRegistryStore:
    """Registry kept in a dict with auto-incrementing ids."""

    def __init__(self):
        self._data: Dict[int, LawyerRecord] = {}
        self._next_id = 1

    async def get_by_id(self, lawyer_id: int) -> Optional[LawyerRecord]:
        rec = self._data.get(lawyer_id)
        return rec.model_copy() if rec else None

    async def get_by_national_id(self, national_id: str) -> Optional[LawyerRecord]:
        return self._find(lambda rec: rec.national_id == national_id)

    async def get_by_letter_id(self, letter_id: str) -> Optional[LawyerRecord]:
        return self._find(lambda rec: rec.letter_id == letter_id)

    async def get_by_credentials(self, national_id: str, letter_id: str) -> Optional[LawyerRecord]:
        return self._find(lambda rec: rec.national_id == national_id and rec.letter_id == letter_id)

    async def create(self, national_id: str, letter_id: str, full_name: str) -> LawyerRecord:
        # No await between the check and the insert, so this is atomic on the event loop.
        for rec in self._data.values():
            if rec.national_id == national_id or rec.letter_id == letter_id:
                raise ConflictError(DUPLICATE_LAWYER_MESSAGE)

        rec = LawyerRecord(
            id=self._next_id,
            national_id=national_id,
            letter_id=letter_id,
            full_name=full_name,
            verified=True,
            created_at=utcnow(),
        )
        self._data[rec.id] = rec
        self._next_id += 1
        return rec.model_copy()

    async def delete(self, lawyer_id: int) -> bool:
        return self._data.pop(lawyer_id, None) is not None

    async def get_all(self) -> List[LawyerRecord]:
        return [rec.model_copy() for rec in self._data.values()]

    def _find(self, predicate) -> Optional[LawyerRecord]:
        for rec in self._data.values():
            if rec.verified and predicate(rec):
                return rec.model_copy()
        return None


class MemoryRequestStore:
    """Request queue kept in an insertion-ordered dict."""

    def __init__(self):
        self._data: Dict[int, VerificationRequest] = {}
        self._next_id = 1

    async def get_by_id(self, request_id: int) -> Optional[VerificationRequest]:
        req = self._data.get(request_id)
        return req.model_copy() if req else None

    async def create(self, national_id: str, letter_id: str) -> VerificationRequest:
        req = VerificationRequest(
            id=self._next_id,
            national_id=national_id,
            letter_id=letter_id,
            status=RequestStatus.PENDING,
            submitted_at=utcnow(),
        )
        self._data[req.id] = req
        self._next_id += 1
        return req.model_copy()

    async def find_pending(self, national_id: str, letter_id: str) -> Optional[VerificationRequest]:
        for req in self._data.values():
            if req.is_pending and req.national_id == national_id and req.letter_id == letter_id:
                return req.model_copy()
        return None

    async def get_by_status(self, status: RequestStatus) -> List[VerificationRequest]:
        return [req.model_copy() for req in self._data.values() if req.status == status]

    async def update_status(
        self, request_id: int, status: RequestStatus, reviewed_by: Optional[str] = None
    ) -> Optional[VerificationRequest]:
        req = self._data.get(request_id)
        if not req:
            return None
        updated = req.model_copy(update={
            "status": status,
            "reviewed_at": None if status == RequestStatus.PENDING else utcnow(),
            "reviewed_by": reviewed_by,
        })
        self._data[request_id] = updated
        return updated.model_copy()

    async def delete(self, request_id: int) -> bool:
        return self._data.pop(request_id, None) is not None

    async def get_all(self) -> List[VerificationRequest]:
        return [req.model_copy() for req in self._data.values()]
