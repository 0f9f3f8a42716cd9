"""Lawyer credential verification service."""

import asyncio
from typing import Any, Optional

from loguru import logger

from lawverify.database.stores import RegistryStore, RequestStore
from lawverify.errors import InternalError, VerificationError
from lawverify.services.outcomes import Matched, Outcome, PartialMismatch, Pending
from lawverify.utils.validators import check_credentials


class VerificationService:
    """
    Classifies a (national ID, letter ID) pair against the registry.

    `classify` only reads. `record_pending_request` is the single write and
    is called for the Pending branch; `verify` does both.

    Store access runs under `lock`, the same lock the ReviewService on these
    stores holds while it approves or rejects.
    """

    def __init__(
        self,
        registry: RegistryStore,
        requests: RequestStore,
        deduplicate_pending: bool = False,
        lock: Optional[asyncio.Lock] = None,
    ):
        self.registry = registry
        self.requests = requests
        self.deduplicate_pending = deduplicate_pending
        self._lock = lock if lock is not None else asyncio.Lock()

    async def classify(self, national_id: Any, letter_id: Any) -> Outcome:
        """
        Validate the pair and look it up without side effects.

        Raises FormatError before touching the registry, InternalError if the
        registry fails.
        """
        data = check_credentials(national_id, letter_id)

        try:
            async with self._lock:
                lawyer = await self.registry.get_by_credentials(data.national_id, data.letter_id)
                if lawyer and lawyer.verified:
                    logger.info(f"✅ Credentials matched registry record {lawyer.id}")
                    return Matched(full_name=lawyer.full_name)

                national_id_match = await self.registry.get_by_national_id(data.national_id)
                letter_id_match = await self.registry.get_by_letter_id(data.letter_id)
        except VerificationError:
            raise
        except Exception as e:
            logger.exception(f"Registry lookup failed: {e}")
            raise InternalError() from e

        if national_id_match and not letter_id_match:
            logger.info(f"Partial match for letter {data.letter_id}: letter ID incorrect")
            return PartialMismatch.letter_id_incorrect()

        if letter_id_match and not national_id_match:
            logger.info(f"Partial match for letter {data.letter_id}: CNIC incorrect")
            return PartialMismatch.national_id_incorrect()

        # Both unknown, or each identifier belongs to a different record.
        return Pending()

    async def record_pending_request(self, national_id: str, letter_id: str) -> Pending:
        """Queue the pair for manual review and return the Pending outcome."""
        try:
            async with self._lock:
                if self.deduplicate_pending:
                    existing = await self.requests.find_pending(national_id, letter_id)
                    if existing:
                        logger.info(f"Pair already queued as request {existing.id}, not creating another")
                        return Pending(request_id=existing.id)

                request = await self.requests.create(national_id, letter_id)
        except VerificationError:
            raise
        except Exception as e:
            logger.exception(f"Failed to queue verification request: {e}")
            raise InternalError() from e

        logger.info(f"⏳ Verification request {request.id} queued for manual review")
        return Pending(request_id=request.id)

    async def verify(self, national_id: Any, letter_id: Any) -> Outcome:
        """Classify the pair and queue it for review when nothing matches."""
        outcome = await self.classify(national_id, letter_id)
        if isinstance(outcome, Pending):
            return await self.record_pending_request(national_id, letter_id)
        return outcome
