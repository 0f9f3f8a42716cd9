from __future__ import annotations

import asyncio

import aiosqlite
import pytest

from lawverify.database.manager import DEMO_LAWYERS, DatabaseManager, seed_demo_lawyers
from lawverify.database.models.verification_request import RequestStatus
from lawverify.database.repositories import VerificationRequestRepository
from lawverify.errors import ConflictError, InternalError, NotFoundError
from lawverify.services.outcomes import Matched, PartialMismatch, Pending
from lawverify.services.review_service import ReviewService
from lawverify.services.verification_service import VerificationService

pytestmark = pytest.mark.anyio


def _services(db: DatabaseManager, requests=None, deduplicate_pending=False):
    requests = requests or db.requests
    lock = asyncio.Lock()
    return (
        VerificationService(db.lawyers, requests, deduplicate_pending=deduplicate_pending, lock=lock),
        ReviewService(db.lawyers, requests, reviewer="admin", lock=lock, transaction=db.transaction),
    )


async def test_lawyer_repository_roundtrip(db_manager):
    created = await db_manager.lawyers.create("12345-1234567-1", "LTR-12345", "Jane Doe")

    assert created.id is not None
    assert created.verified is True
    assert created.created_at is not None
    assert await db_manager.lawyers.get_by_credentials("12345-1234567-1", "LTR-12345") == created
    assert await db_manager.lawyers.get_by_national_id("12345-1234567-1") == created
    assert await db_manager.lawyers.get_by_letter_id("LTR-12345") == created
    assert await db_manager.lawyers.get_by_credentials("12345-1234567-1", "LTR-00000") is None


async def test_unique_constraints_raise_conflict(db_manager):
    await db_manager.lawyers.create("12345-1234567-1", "LTR-12345", "Jane Doe")

    with pytest.raises(ConflictError):
        await db_manager.lawyers.create("12345-1234567-1", "LTR-12345", "Jane Doe")
    with pytest.raises(ConflictError):
        await db_manager.lawyers.create("12345-1234567-1", "LTR-99999", "Someone Else")

    # The connection is still usable after the failed inserts.
    other = await db_manager.lawyers.create("98765-7654321-9", "LTR-54321", "John Doe")
    assert [rec.id for rec in await db_manager.lawyers.get_all()] == [1, other.id]


async def test_request_repository_lifecycle(db_manager):
    repo = db_manager.requests
    first = await repo.create("22222-2222222-2", "LTR-22222")
    second = await repo.create("22222-2222222-2", "LTR-22222")

    assert first.status == RequestStatus.PENDING
    assert first.submitted_at is not None
    assert first.reviewed_at is None
    assert (await repo.find_pending("22222-2222222-2", "LTR-22222")).id == first.id

    updated = await repo.update_status(first.id, RequestStatus.APPROVED, "admin")
    assert updated.status == RequestStatus.APPROVED
    assert updated.reviewed_by == "admin"
    assert updated.reviewed_at is not None
    assert [r.id for r in await repo.get_by_status(RequestStatus.PENDING)] == [second.id]

    assert await repo.delete(first.id) is True
    assert await repo.get_by_id(first.id) is None
    assert await repo.update_status(first.id, RequestStatus.REJECTED) is None


async def test_seed_demo_data_once(db_manager):
    assert await seed_demo_lawyers(db_manager.lawyers) == len(DEMO_LAWYERS)
    assert await seed_demo_lawyers(db_manager.lawyers) == 0
    assert len(await db_manager.lawyers.get_all()) == len(DEMO_LAWYERS)


async def test_full_workflow_on_sqlite(db_manager):
    verification, review = _services(db_manager)
    await seed_demo_lawyers(db_manager.lawyers)

    assert await verification.verify("12345-1234567-1", "LTR-12345") == Matched(full_name="Advocate Ayesha Siddiqi")
    mismatch = await verification.verify("12345-1234567-1", "LTR-99999")
    assert isinstance(mismatch, PartialMismatch) and mismatch.field == "letter_id"

    queued = await verification.verify("22222-2222222-2", "LTR-22222")
    rejected = await verification.verify("33333-3333333-3", "LTR-33333")
    assert isinstance(queued, Pending) and isinstance(rejected, Pending)
    assert [r.id for r in await review.list_pending()] == [queued.request_id, rejected.request_id]

    await review.approve(queued.request_id, "Jane Doe")
    await review.reject(rejected.request_id)

    assert await review.list_pending() == []
    assert await verification.verify("22222-2222222-2", "LTR-22222") == Matched(full_name="Jane Doe")
    again = await verification.verify("33333-3333333-3", "LTR-33333")
    assert isinstance(again, Pending) and again.request_id != rejected.request_id
    with pytest.raises(NotFoundError):
        await review.reject(rejected.request_id)


async def test_state_survives_reopen(tmp_path):
    path = str(tmp_path / "lawyers.db")

    first = DatabaseManager(path)
    await first.init_database(seed_demo_data=True)
    verification, _ = _services(first)
    pending = await verification.verify("22222-2222222-2", "LTR-22222")
    await first.close()

    second = DatabaseManager(path)
    await second.init_database(seed_demo_data=True)
    try:
        _, review = _services(second)
        assert [r.id for r in await review.list_pending()] == [pending.request_id]
        assert len(await review.list_lawyers()) == len(DEMO_LAWYERS)
    finally:
        await second.close()


async def _count(path: str, table: str) -> int:
    async with aiosqlite.connect(path) as other:
        async with other.execute(f"SELECT COUNT(*) FROM {table}") as cursor:
            return (await cursor.fetchone())[0]


async def test_transaction_commits_both_repositories_together(db_manager):
    with pytest.raises(RuntimeError):
        async with db_manager.transaction():
            await db_manager.lawyers.create("12345-1234567-1", "LTR-12345", "Jane Doe")
            await db_manager.requests.create("22222-2222222-2", "LTR-22222")
            raise RuntimeError("abort")

    assert await db_manager.lawyers.get_all() == []
    assert await db_manager.requests.get_all() == []

    async with db_manager.transaction():
        await db_manager.lawyers.create("12345-1234567-1", "LTR-12345", "Jane Doe")
        await db_manager.requests.create("22222-2222222-2", "LTR-22222")

    assert await _count(db_manager.db_path, "lawyers") == 1
    assert await _count(db_manager.db_path, "verification_requests") == 1


class SlowFailingDeleteRepository(VerificationRequestRepository):
    async def delete(self, request_id):
        await asyncio.sleep(0.05)
        raise RuntimeError("disk I/O error")


async def test_failed_approval_is_never_visible(db_manager):
    requests = SlowFailingDeleteRepository(db_manager.conn, db_manager.tx)
    verification, review = _services(db_manager, requests=requests)
    queued = await verification.verify("22222-2222222-2", "LTR-22222")

    async def lookup_midway():
        await asyncio.sleep(0.02)
        return await verification.classify("22222-2222222-2", "LTR-22222")

    failed, seen = await asyncio.gather(
        review.approve(queued.request_id, "Jane Doe"), lookup_midway(), return_exceptions=True
    )

    assert isinstance(failed, InternalError)
    assert isinstance(seen, Pending)
    assert await db_manager.lawyers.get_all() == []
    assert await _count(db_manager.db_path, "lawyers") == 0
    restored = await db_manager.requests.get_by_id(queued.request_id)
    assert restored.status == RequestStatus.PENDING
    assert restored.reviewed_at is None
    assert restored.reviewed_by is None


async def test_conflicting_approval_leaves_request_pending(db_manager):
    verification, review = _services(db_manager)
    first = await verification.verify("22222-2222222-2", "LTR-22222")
    second = await verification.verify("22222-2222222-2", "LTR-22222")

    await review.approve(first.request_id, "Jane Doe")
    with pytest.raises(ConflictError):
        await review.approve(second.request_id, "Jane Doe")

    assert [r.id for r in await review.list_pending()] == [second.request_id]
    assert len(await review.list_lawyers()) == 1


async def test_concurrent_duplicate_submissions_queue_one_request(db_manager):
    verification, _ = _services(db_manager, deduplicate_pending=True)

    outcomes = await asyncio.gather(
        *(verification.verify("22222-2222222-2", "LTR-22222") for _ in range(5))
    )

    assert {outcome.request_id for outcome in outcomes} == {outcomes[0].request_id}
    assert len(await db_manager.requests.get_all()) == 1
