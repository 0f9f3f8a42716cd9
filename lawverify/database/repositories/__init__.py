from .base import BaseRepository, Transaction
from .lawyer_repository import LawyerRepository
from .verification_request_repository import VerificationRequestRepository

__all__ = ["BaseRepository", "LawyerRepository", "Transaction", "VerificationRequestRepository"]
