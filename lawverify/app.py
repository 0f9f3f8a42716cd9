"""Application wiring: stores, services and their lifecycle."""

import asyncio
from typing import Optional

from loguru import logger

from lawverify.config.settings import Settings
from lawverify.database.manager import DatabaseManager, seed_demo_lawyers
from lawverify.database.stores import MemoryRegistryStore, MemoryRequestStore, RegistryStore, RequestStore
from lawverify.services.review_service import ReviewService
from lawverify.services.verification_service import VerificationService


class VerificationApp:
    """
    Builds the configured store backend and the services on top of it.

    Use as an async context manager, or call `setup()` / `shutdown()`.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.db_manager: Optional[DatabaseManager] = None
        self.registry: Optional[RegistryStore] = None
        self.requests: Optional[RequestStore] = None
        self.verification: Optional[VerificationService] = None
        self.review: Optional[ReviewService] = None

    async def _setup_storage(self):
        """Initialise the configured backend."""
        if self.settings.uses_memory_storage:
            self.registry = MemoryRegistryStore()
            self.requests = MemoryRequestStore()
            if self.settings.SEED_DEMO_DATA:
                await seed_demo_lawyers(self.registry)
            logger.info("In-memory stores initialised.")
            return

        self.db_manager = DatabaseManager(self.settings.DATABASE_PATH)
        await self.db_manager.init_database(seed_demo_data=self.settings.SEED_DEMO_DATA)
        self.registry = self.db_manager.lawyers
        self.requests = self.db_manager.requests

    def _setup_services(self):
        """Build both services on one store lock."""
        lock = asyncio.Lock()
        self.verification = VerificationService(
            self.registry,
            self.requests,
            deduplicate_pending=self.settings.DEDUPLICATE_PENDING_REQUESTS,
            lock=lock,
        )
        self.review = ReviewService(
            self.registry,
            self.requests,
            reviewer=self.settings.REVIEWER_NAME,
            lock=lock,
            transaction=self.db_manager.transaction if self.db_manager else None,
        )
        logger.debug("Services configured.")

    async def setup(self) -> "VerificationApp":
        await self._setup_storage()
        self._setup_services()
        logger.info(f"Verification app ready ({self.settings.STORAGE_BACKEND} backend).")
        return self

    async def shutdown(self):
        """Release the database connection, if any."""
        if self.db_manager:
            await self.db_manager.close()
            self.db_manager = None
        logger.info("Verification app stopped.")

    async def __aenter__(self) -> "VerificationApp":
        return await self.setup()

    async def __aexit__(self, exc_type, exc, tb):
        await self.shutdown()
