"""Validators for verification and admin input."""
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator
from pydantic_core import PydanticCustomError

from lawverify.errors import FormatError, ValidationError

NATIONAL_ID_PATTERN = re.compile(r"^[0-9]{5}-[0-9]{7}-[0-9]{1}$")
LETTER_ID_PATTERN = re.compile(r"^LTR-[0-9]{5}$")

NATIONAL_ID_FORMAT_ERROR = "CNIC format is incorrect. Please use format: 12345-1234567-1"
LETTER_ID_FORMAT_ERROR = "Letter ID format is incorrect. Please use format: LTR-12345"
NATIONAL_ID_SCHEMA_ERROR = "CNIC must be in format: 12345-1234567-1"
LETTER_ID_SCHEMA_ERROR = "Letter ID must be in format: LTR-12345"
FULL_NAME_REQUIRED = "Full name is required"

_FIELD_LABELS = {
    "national_id": "CNIC",
    "letter_id": "Letter ID",
    "full_name": "Full name",
}


def _matches(pattern: re.Pattern, value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def validate_national_id(national_id: Any) -> tuple[bool, str]:
    """Check the 5-7-1 digit-group national ID format."""
    if not _matches(NATIONAL_ID_PATTERN, national_id):
        return False, NATIONAL_ID_FORMAT_ERROR
    return True, ""


def validate_letter_id(letter_id: Any) -> tuple[bool, str]:
    """Check the LTR-NNNNN letter ID format."""
    if not _matches(LETTER_ID_PATTERN, letter_id):
        return False, LETTER_ID_FORMAT_ERROR
    return True, ""


def validate_full_name(full_name: Any) -> tuple[bool, str]:
    if not isinstance(full_name, str) or not full_name.strip():
        return False, FULL_NAME_REQUIRED
    return True, ""


class VerificationInput(BaseModel):
    """Canonical schema for a credential pair."""

    model_config = ConfigDict(strict=True)

    national_id: str
    letter_id: str

    @field_validator("national_id")
    def check_national_id(cls, value: str) -> str:
        if not NATIONAL_ID_PATTERN.fullmatch(value):
            raise PydanticCustomError("national_id_format", NATIONAL_ID_SCHEMA_ERROR)
        return value

    @field_validator("letter_id")
    def check_letter_id(cls, value: str) -> str:
        if not LETTER_ID_PATTERN.fullmatch(value):
            raise PydanticCustomError("letter_id_format", LETTER_ID_SCHEMA_ERROR)
        return value


class LawyerInput(VerificationInput):
    """Schema for direct registry insertion."""

    full_name: str

    @field_validator("full_name")
    def check_full_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise PydanticCustomError("full_name_required", FULL_NAME_REQUIRED)
        return value


def first_error(exc: PydanticValidationError) -> tuple[Optional[str], str]:
    """Field name and readable message of the first schema violation."""
    err = exc.errors()[0]
    field = str(err["loc"][0]) if err.get("loc") else None
    if err["type"] == "missing":
        return field, f"{_FIELD_LABELS.get(field, field)} is required"
    if err["type"].endswith("_type"):
        return field, f"{_FIELD_LABELS.get(field, field)} must be a string"
    return field, err["msg"]


def check_credentials(national_id: Any, letter_id: Any) -> VerificationInput:
    """
    Validate a credential pair, failing fast on the first problem.

    Present fields are checked individually first, then the pair is
    re-validated against the canonical schema, which also catches missing
    fields. Raises FormatError.
    """
    if national_id:
        ok, message = validate_national_id(national_id)
        if not ok:
            raise FormatError(message, field="national_id")

    if letter_id:
        ok, message = validate_letter_id(letter_id)
        if not ok:
            raise FormatError(message, field="letter_id")

    # None is reported as a missing field rather than a wrong type.
    data = {
        key: value
        for key, value in (("national_id", national_id), ("letter_id", letter_id))
        if value is not None
    }
    try:
        return VerificationInput(**data)
    except PydanticValidationError as e:
        field, message = first_error(e)
        raise FormatError(message, field=field) from e


def check_lawyer_input(national_id: Any, letter_id: Any, full_name: Any) -> LawyerInput:
    """Validate a direct registry insertion. Raises FormatError or ValidationError."""
    check_credentials(national_id, letter_id)
    ok, message = validate_full_name(full_name)
    if not ok:
        raise ValidationError(message)
    return LawyerInput(national_id=national_id, letter_id=letter_id, full_name=full_name)
