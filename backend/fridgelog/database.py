"""
Database Connection and Management
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional
import logging
import asyncio
from pymongo import ASCENDING
from pymongo.errors import ServerSelectionTimeoutError, ConnectionFailure, PyMongoError

from .config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None
    _connected: bool = False

    async def connect(self, max_retries: int = 3, retry_delay: int = 2):
        """Establish database connection with retry logic"""
        if self.client is not None:
            return

        for attempt in range(max_retries):
            try:
                logger.info(f"Connecting to MongoDB (attempt {attempt + 1}/{max_retries}): {settings.mongo_url}")
                self.client = AsyncIOMotorClient(
                    settings.mongo_url,
                    serverSelectionTimeoutMS=5000,
                    connectTimeoutMS=5000
                )
                self.db = self.client[settings.db_name]

                await self.client.admin.command('ping')
                self._connected = True
                logger.info(f"Connected to database: {settings.db_name}")
                await self.ensure_indexes()
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                logger.warning(f"MongoDB connection attempt {attempt + 1} failed: {e}")
                self.client = None
                self.db = None
                if attempt < max_retries - 1:
                    logger.info(f"Retrying in {retry_delay} seconds...")
                    await asyncio.sleep(retry_delay)
                else:
                    logger.error("Failed to connect to MongoDB after all retries")
                    self._connected = False
                    # the app still starts; requests get 503 until the database is back

    async def ensure_indexes(self):
        """Create the indexes scheduling depends on

        The unique (checklist_id, target_id) index is what keeps concurrent
        generate-on-read requests from duplicating instances.
        """
        db = self.get_db()
        await db.checklists.create_index([("id", ASCENDING)], unique=True)
        await db.checklists.create_index([("owner_id", ASCENDING)])
        await db.schedules.create_index([("checklist_id", ASCENDING)], unique=True)
        await db.instances.create_index([("id", ASCENDING)], unique=True)
        await db.instances.create_index(
            [("checklist_id", ASCENDING), ("target_id", ASCENDING)],
            unique=True,
        )
        await db.instances.create_index(
            [("checklist_id", ASCENDING), ("period_start", ASCENDING), ("period_end", ASCENDING)]
        )
        logger.info("Database indexes ensured")

    async def disconnect(self):
        """Close database connection"""
        if self.client is not None:
            self.client.close()
            self.client = None
            self.db = None
            self._connected = False
            logger.info("Disconnected from MongoDB")

    def get_db(self) -> AsyncIOMotorDatabase:
        """Get database instance"""
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db

    def is_connected(self) -> bool:
        """Check if database is connected"""
        return self._connected

    async def check_connection(self) -> bool:
        """Check if database connection is alive"""
        if not self._connected or self.client is None:
            return False
        try:
            await self.client.admin.command('ping')
            return True
        except PyMongoError as e:
            logger.warning(f"Database ping failed: {e}")
            self._connected = False
            return False


# Singleton instance
database = Database()
