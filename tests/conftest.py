"""
Shared fixtures.

AnyIO runs the async tests on the asyncio backend only.
"""
import asyncio

import pytest

from lawverify.database.manager import DatabaseManager
from lawverify.database.stores import MemoryRegistryStore, MemoryRequestStore
from lawverify.services.review_service import ReviewService
from lawverify.services.verification_service import VerificationService


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def registry():
    return MemoryRegistryStore()


@pytest.fixture
def queue():
    return MemoryRequestStore()


@pytest.fixture
def store_lock():
    return asyncio.Lock()


@pytest.fixture
def verification(registry, queue, store_lock):
    return VerificationService(registry, queue, lock=store_lock)


@pytest.fixture
def review(registry, queue, store_lock):
    return ReviewService(registry, queue, reviewer="admin", lock=store_lock)


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseManager(str(tmp_path / "lawyers.db"))
    await manager.init_database()
    yield manager
    await manager.close()
