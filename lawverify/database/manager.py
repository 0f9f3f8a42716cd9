from pathlib import Path
from typing import Optional

from loguru import logger
import aiosqlite

from lawverify.database.repositories.base import Transaction
from lawverify.database.repositories.lawyer_repository import LawyerRepository
from lawverify.database.repositories.verification_request_repository import VerificationRequestRepository
from lawverify.errors import ConflictError

DEMO_LAWYERS = [
    ("12345-1234567-1", "LTR-12345", "Advocate Ayesha Siddiqi"),
    ("98765-7654321-9", "LTR-54321", "Barrister Khalid Mehmood"),
    ("11111-1111111-1", "LTR-11111", "Advocate Sarah Khan"),
]


class DatabaseManager:
    """
    Manages the SQLite database and its repositories.

    Opens the connection, creates the tables and exposes the registry and
    request repositories to the services.
    """

    def __init__(self, db_path: str):
        """Initialise the database manager."""
        self.db_path = db_path
        self.conn: Optional[aiosqlite.Connection] = None
        self.tx: Optional[Transaction] = None
        self.lawyers: Optional[LawyerRepository] = None
        self.requests: Optional[VerificationRequestRepository] = None

    async def init_database(self, seed_demo_data: bool = False) -> None:
        """Open the connection, create the tables and the repositories."""
        self.conn = await aiosqlite.connect(self.db_path)
        self.conn.row_factory = aiosqlite.Row
        await self._run_sql_scripts()
        await self._init_repositories()

        if seed_demo_data:
            await seed_demo_lawyers(self.lawyers)

        logger.info(f"Database {self.db_path} and repositories initialised")

    async def _init_repositories(self) -> None:
        """Build all repositories on the shared connection and commit scope."""
        self.tx = Transaction(self.conn)
        self.lawyers = LawyerRepository(self.conn, self.tx)
        self.requests = VerificationRequestRepository(self.conn, self.tx)

    def transaction(self):
        """Commit the registry and queue writes made inside the block together."""
        return self.tx.begin()

    async def _run_sql_scripts(self) -> None:
        """
        Run the table creation scripts.

        Scripts are read from lawverify/database/sql and executed in
        alphabetical order, one statement per file.
        """
        sql_dir = Path(__file__).parent / "sql"
        scripts = sorted(sql_dir.glob("*.sql"))

        async with self.conn.cursor() as cursor:
            for script_path in scripts:
                try:
                    sql_query = script_path.read_text(encoding="utf-8").strip()
                    await cursor.execute(sql_query)
                except Exception as e:
                    logger.error(f"Failed to run SQL script {script_path.name}: {e}")
                    raise

        await self.conn.commit()
        logger.debug(f"Schema ready: ran {len(scripts)} SQL scripts")

    async def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            await self.conn.close()
            self.conn = None
            self.tx = None
            logger.info("Database connection closed")


async def seed_demo_lawyers(registry) -> int:
    """Insert the demo lawyers into an empty registry. Returns the number inserted."""
    if await registry.get_all():
        logger.debug("Registry already populated, demo data skipped")
        return 0

    inserted = 0
    for national_id, letter_id, full_name in DEMO_LAWYERS:
        try:
            await registry.create(national_id, letter_id, full_name)
            inserted += 1
        except ConflictError:
            logger.warning(f"Demo lawyer {letter_id} already present")
    logger.info(f"Seeded {inserted} demo lawyers")
    return inserted
