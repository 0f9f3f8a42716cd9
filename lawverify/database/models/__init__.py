from .lawyer import LawyerRecord
from .verification_request import RequestStatus, VerificationRequest

__all__ = ["LawyerRecord", "RequestStatus", "VerificationRequest"]
