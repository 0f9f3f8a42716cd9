from .review_service import ReviewService
from .verification_service import VerificationService

__all__ = ["ReviewService", "VerificationService"]
