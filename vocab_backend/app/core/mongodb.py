"""
MongoDB connection management
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class MongoDB:
    """MongoDB connection manager"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    def connect(cls, mongodb_url: str, db_name: str):
        """Connect to MongoDB"""
        try:
            cls.client = AsyncIOMotorClient(mongodb_url, tz_aware=True)
            cls.db = cls.client[db_name]
            logger.info(f"✅ Connected to MongoDB: {db_name}")
        except Exception as e:
            logger.error(f"❌ Failed to connect to MongoDB: {e}")
            raise

    @classmethod
    def close(cls):
        """Close the MongoDB connection"""
        if cls.client:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("MongoDB connection closed")

    @classmethod
    def get_database(cls) -> AsyncIOMotorDatabase:
        """Return the database instance"""
        if cls.db is None:
            raise RuntimeError("MongoDB not initialized. Call MongoDB.connect() first.")
        return cls.db


def init_mongodb(mongodb_url: str, db_name: str):
    """Initialise the MongoDB connection (called on startup)"""
    MongoDB.connect(mongodb_url, db_name)


def close_mongodb():
    """Close the MongoDB connection (called on shutdown)"""
    MongoDB.close()


async def ensure_word_indexes(db, collection_name: str = "words"):
    """
    Indexes for the word collection:
    unique key lookup, alphabetical/prefix scans, frequency ordering
    and lastFetched for staleness sweeps.
    """
    collection = db[collection_name]
    await collection.create_index([("word", ASCENDING)], unique=True, name="uq_word")
    await collection.create_index([("isActive", ASCENDING), ("word", ASCENDING)], name="ix_active_word")
    await collection.create_index([("frequency", DESCENDING)], name="ix_frequency")
    await collection.create_index([("lastFetched", ASCENDING)], name="ix_last_fetched")
    logger.info(f"✅ Word indexes ensured on '{collection_name}'")
