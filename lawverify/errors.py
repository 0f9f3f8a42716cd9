"""Error taxonomy for verification and review operations."""
from typing import Optional


class VerificationError(Exception):
    """Base class for errors reported back to the caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FormatError(VerificationError):
    """Client input violates a literal identifier pattern."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ValidationError(VerificationError):
    """A required admin-supplied field is missing."""

    status_code = 400


class NotFoundError(VerificationError):
    """The referenced verification request does not exist."""

    status_code = 404


class ConflictError(VerificationError):
    """A registry record with these credentials already exists."""

    status_code = 400


class InternalError(VerificationError):
    """Store-layer failure. The message is never shown to clients."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
