"""
Classification results returned by the verification engine.
"""
from typing import Literal, Optional, Union

from pydantic import BaseModel

LETTER_ID_MISMATCH_MESSAGE = (
    "CNIC is correct, but Letter ID is incorrect. Please verify your Letter ID and try again."
)
NATIONAL_ID_MISMATCH_MESSAGE = (
    "Letter ID is correct, but CNIC is incorrect. Please verify your CNIC and try again."
)
PENDING_MESSAGE = (
    "Your credentials are not in our database. "
    "Your request has been submitted for manual verification by our admin team."
)


class Matched(BaseModel):
    """Both identifiers belong to the same verified record."""
    kind: Literal["matched"] = "matched"
    full_name: str


class PartialMismatch(BaseModel):
    """Exactly one identifier is known; `field` names the wrong one."""
    kind: Literal["partial_mismatch"] = "partial_mismatch"
    field: Literal["national_id", "letter_id"]
    reason: str
    message: str

    @classmethod
    def letter_id_incorrect(cls) -> "PartialMismatch":
        return cls(field="letter_id", reason="letterId incorrect", message=LETTER_ID_MISMATCH_MESSAGE)

    @classmethod
    def national_id_incorrect(cls) -> "PartialMismatch":
        return cls(field="national_id", reason="nationalId incorrect", message=NATIONAL_ID_MISMATCH_MESSAGE)


class Pending(BaseModel):
    """No usable match; the pair goes to manual review."""
    kind: Literal["pending"] = "pending"
    message: str = PENDING_MESSAGE
    request_id: Optional[int] = None


Outcome = Union[Matched, PartialMismatch, Pending]
