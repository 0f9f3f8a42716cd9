"""
Transport-agnostic request handlers.

Each handler takes a decoded JSON body, calls the services and returns an
ApiResponse. Every error is turned into a payload here; nothing raised by the
services escapes to the caller.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from lawverify.database.models.lawyer import LawyerRecord
from lawverify.database.models.verification_request import VerificationRequest
from lawverify.errors import InternalError, NotFoundError, ValidationError, VerificationError
from lawverify.services.outcomes import Matched, Outcome, PartialMismatch, Pending
from lawverify.services.review_service import REQUEST_NOT_FOUND, ReviewService
from lawverify.services.verification_service import VerificationService
from lawverify.utils.validators import validate_full_name

# Steps of the client-side verification wizard.
STEP_ENTER_CREDENTIALS = 1
STEP_PENDING_REVIEW = 4
STEP_VERIFIED = 5

Body = Union[Dict[str, Any], List[Dict[str, Any]]]


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: Body

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def _as_dict(payload: Any) -> Dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def _parse_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None


def error_response(error: Exception, step: Optional[int] = None) -> ApiResponse:
    """Convert any exception into an error payload."""
    if not isinstance(error, VerificationError):
        logger.opt(exception=error).error(f"Unhandled error while serving request: {error}")
        return ApiResponse(500, {"error": InternalError().message})
    if isinstance(error, InternalError):
        return ApiResponse(500, {"error": InternalError().message})

    body: Dict[str, Any] = {"error": error.message}
    if step is not None:
        body["step"] = step
    return ApiResponse(error.status_code, body)


def outcome_payload(outcome: Outcome) -> Dict[str, Any]:
    if isinstance(outcome, Matched):
        return {"verified": True, "fullName": outcome.full_name, "step": STEP_VERIFIED}
    if isinstance(outcome, PartialMismatch):
        return {"verified": False, "error": outcome.message, "step": STEP_ENTER_CREDENTIALS}
    if isinstance(outcome, Pending):
        return {
            "verified": False,
            "pending": True,
            "message": outcome.message,
            "step": STEP_PENDING_REVIEW,
        }
    raise TypeError(f"unknown outcome {outcome!r}")


def request_payload(request: VerificationRequest) -> Dict[str, Any]:
    return {
        "id": request.id,
        "nationalId": request.national_id,
        "letterId": request.letter_id,
        "submittedAt": _isoformat(request.submitted_at),
    }


def lawyer_payload(lawyer: LawyerRecord) -> Dict[str, Any]:
    return {
        "id": lawyer.id,
        "nationalId": lawyer.national_id,
        "letterId": lawyer.letter_id,
        "fullName": lawyer.full_name,
        "verified": lawyer.verified,
        "createdAt": _isoformat(lawyer.created_at),
    }


async def verify_lawyer(service: VerificationService, payload: Any) -> ApiResponse:
    """Input `{nationalId, letterId}`."""
    data = _as_dict(payload)
    try:
        outcome = await service.verify(data.get("nationalId"), data.get("letterId"))
    except Exception as e:
        return error_response(e, step=STEP_ENTER_CREDENTIALS)
    return ApiResponse(200, outcome_payload(outcome))


async def list_verification_requests(service: ReviewService) -> ApiResponse:
    try:
        pending = await service.list_pending()
    except Exception as e:
        return error_response(e)
    return ApiResponse(200, [request_payload(r) for r in pending])


async def approve_verification(service: ReviewService, payload: Any) -> ApiResponse:
    """Input `{id, fullName}`."""
    data = _as_dict(payload)
    try:
        ok, message = validate_full_name(data.get("fullName"))
        if not ok:
            raise ValidationError(message)
        request_id = _parse_id(data.get("id"))
        if request_id is None:
            raise NotFoundError(REQUEST_NOT_FOUND)
        await service.approve(request_id, data.get("fullName"))
    except Exception as e:
        return error_response(e)
    return ApiResponse(200, {"success": True, "message": "Lawyer approved and added to database"})


async def reject_verification(service: ReviewService, payload: Any) -> ApiResponse:
    """Input `{id}`."""
    data = _as_dict(payload)
    try:
        request_id = _parse_id(data.get("id"))
        if request_id is None:
            raise NotFoundError(REQUEST_NOT_FOUND)
        await service.reject(request_id)
    except Exception as e:
        return error_response(e)
    return ApiResponse(200, {"success": True, "message": "Verification request rejected"})


async def add_lawyer(service: ReviewService, payload: Any) -> ApiResponse:
    """Input `{nationalId, letterId, fullName}`."""
    data = _as_dict(payload)
    try:
        lawyer = await service.add_lawyer(data.get("nationalId"), data.get("letterId"), data.get("fullName"))
    except Exception as e:
        return error_response(e)
    return ApiResponse(200, {"success": True, "lawyer": lawyer_payload(lawyer)})


async def list_lawyers(service: ReviewService) -> ApiResponse:
    try:
        lawyers = await service.list_lawyers()
    except Exception as e:
        return error_response(e)
    return ApiResponse(200, [lawyer_payload(lawyer) for lawyer in lawyers])
