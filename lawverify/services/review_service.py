"""Admin review of queued verification requests."""

import asyncio
from typing import Any, AsyncContextManager, Callable, List, Optional

from loguru import logger

from lawverify.database.models.lawyer import LawyerRecord
from lawverify.database.models.verification_request import RequestStatus, VerificationRequest
from lawverify.database.stores import RegistryStore, RequestStore
from lawverify.errors import InternalError, NotFoundError, ValidationError, VerificationError
from lawverify.utils.validators import check_lawyer_input, validate_full_name

REQUEST_NOT_FOUND = "Verification request not found"


class ReviewService:
    """
    Admin operations on the request queue and the registry.

    Every store access runs under `lock`. Share it with the VerificationService
    on the same stores so lookups never see an approve or reject half done.

    With `transaction` (the SQLite backend) a disposition's writes commit
    together or not at all. Without it (the memory backend) a failed
    disposition is undone step by step before the lock is released.
    """

    def __init__(
        self,
        registry: RegistryStore,
        requests: RequestStore,
        reviewer: str = "admin",
        lock: Optional[asyncio.Lock] = None,
        transaction: Optional[Callable[[], AsyncContextManager]] = None,
    ):
        self.registry = registry
        self.requests = requests
        self.reviewer = reviewer
        self._lock = lock if lock is not None else asyncio.Lock()
        self._transaction = transaction

    async def list_pending(self) -> List[VerificationRequest]:
        """Pending requests in submission order."""
        try:
            async with self._lock:
                return await self.requests.get_by_status(RequestStatus.PENDING)
        except Exception as e:
            logger.exception(f"Failed to list pending requests: {e}")
            raise InternalError() from e

    async def list_lawyers(self) -> List[LawyerRecord]:
        """All registry records in insertion order."""
        try:
            async with self._lock:
                return await self.registry.get_all()
        except Exception as e:
            logger.exception(f"Failed to list lawyers: {e}")
            raise InternalError() from e

    async def approve(self, request_id: int, full_name: Any) -> LawyerRecord:
        """
        Approve a pending request.

        Creates a verified registry record from the request's credentials and
        the supplied name, records the disposition, then drops the request.
        On any failure the registry and the queue are left as they were.

        :raises ValidationError: the name is empty.
        :raises NotFoundError: no pending request with this id.
        :raises ConflictError: the credentials are already registered.
        """
        ok, message = validate_full_name(full_name)
        if not ok:
            raise ValidationError(message)
        full_name = full_name.strip()

        async with self._lock:
            request = await self._get_pending(request_id)
            if self._transaction is not None:
                lawyer = await self._approve_in_transaction(request, full_name)
            else:
                lawyer = await self._approve_with_undo(request, full_name)

        logger.info(
            f"✅ Request {request_id} approved by {self.reviewer}: registry record {lawyer.id} created"
        )
        return lawyer

    async def reject(self, request_id: int) -> None:
        """
        Reject a pending request and drop it from the queue.

        :raises NotFoundError: no pending request with this id.
        """
        async with self._lock:
            request = await self._get_pending(request_id)
            try:
                if self._transaction is not None:
                    async with self._transaction():
                        await self._resolve(request, RequestStatus.REJECTED)
                else:
                    try:
                        await self._resolve(request, RequestStatus.REJECTED)
                    except Exception:
                        await self._restore(request)
                        raise
            except Exception as e:
                logger.exception(f"Failed to reject request {request_id}: {e}")
                raise InternalError() from e

        logger.info(f"❌ Request {request_id} rejected by {self.reviewer}")

    async def add_lawyer(self, national_id: Any, letter_id: Any, full_name: Any) -> LawyerRecord:
        """
        Insert a lawyer directly, bypassing the request queue.

        :raises FormatError: an identifier is malformed.
        :raises ValidationError: the name is empty.
        :raises ConflictError: the credentials are already registered.
        """
        data = check_lawyer_input(national_id, letter_id, full_name)

        async with self._lock:
            try:
                lawyer = await self.registry.create(data.national_id, data.letter_id, data.full_name)
            except VerificationError as e:
                logger.warning(f"Lawyer {data.letter_id} not added: {e.message}")
                raise
            except Exception as e:
                logger.exception(f"Registry insert failed for {data.letter_id}: {e}")
                raise InternalError() from e

        logger.info(f"Lawyer {lawyer.id} ({lawyer.letter_id}) added to registry by {self.reviewer}")
        return lawyer

    async def _get_pending(self, request_id: int) -> VerificationRequest:
        try:
            request = await self.requests.get_by_id(request_id)
        except Exception as e:
            logger.exception(f"Failed to load request {request_id}: {e}")
            raise InternalError() from e

        if not request or not request.is_pending:
            logger.warning(f"Verification request {request_id} not found")
            raise NotFoundError(REQUEST_NOT_FOUND)
        return request

    async def _approve_in_transaction(self, request: VerificationRequest, full_name: str) -> LawyerRecord:
        try:
            async with self._transaction():
                lawyer = await self.registry.create(request.national_id, request.letter_id, full_name)
                await self._resolve(request, RequestStatus.APPROVED)
        except VerificationError as e:
            logger.warning(f"Cannot approve request {request.id}: {e.message}")
            raise
        except Exception as e:
            logger.exception(f"Approval of request {request.id} rolled back: {e}")
            raise InternalError() from e
        return lawyer

    async def _approve_with_undo(self, request: VerificationRequest, full_name: str) -> LawyerRecord:
        try:
            lawyer = await self.registry.create(request.national_id, request.letter_id, full_name)
        except VerificationError as e:
            logger.warning(f"Cannot approve request {request.id}: {e.message}")
            raise
        except Exception as e:
            logger.exception(f"Registry insert failed for request {request.id}: {e}")
            raise InternalError() from e

        try:
            await self._resolve(request, RequestStatus.APPROVED)
        except Exception as e:
            await self._undo_lawyer(lawyer)
            await self._restore(request)
            logger.exception(f"Failed to resolve request {request.id}, approval rolled back: {e}")
            raise InternalError() from e
        return lawyer

    async def _resolve(self, request: VerificationRequest, status: RequestStatus) -> None:
        """Record the terminal status, then remove the request from the live set."""
        updated = await self.requests.update_status(request.id, status, self.reviewer)
        if updated is None:
            raise RuntimeError(f"request {request.id} vanished while being resolved")
        logger.debug(f"Request {request.id} marked {status.value} at {updated.reviewed_at}")
        await self.requests.delete(request.id)

    async def _undo_lawyer(self, lawyer: LawyerRecord) -> None:
        try:
            await self.registry.delete(lawyer.id)
        except Exception as e:
            logger.error(f"Could not remove registry record {lawyer.id} after failed approval: {e}")

    async def _restore(self, request: VerificationRequest) -> None:
        """Put a request back to pending if a disposition was half applied."""
        try:
            current = await self.requests.get_by_id(request.id)
            if current and not current.is_pending:
                await self.requests.update_status(request.id, RequestStatus.PENDING, None)
        except Exception as e:
            logger.error(f"Could not restore request {request.id} to pending: {e}")
