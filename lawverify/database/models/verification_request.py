"""
Models for manual-review verification requests.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class RequestStatus(str, Enum):
    """Review status of a verification request."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationRequest(BaseModel):
    """
    Pydantic model for a verification request, matching the verification_requests table.
    """
    id: Optional[int] = None
    national_id: str
    letter_id: str
    status: RequestStatus = RequestStatus.PENDING
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
