"""
MongoDB Connection Utility

MongoDB stores:
- Verification documents (transcripts, resumes, ...) submitted by students
  and reviewed by faculty

Each document is self-contained and only ever looked up by its own id,
its owner or its review status, so no joins are needed.
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from placement_portal.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    db = get_mongo_db()
    return db[name]


def check_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "verification_docs": "verification_docs",
}


def init_mongo_indexes():
    """
    Create indexes for the review queue and per-student lookups.
    Call this once during app startup.
    """
    db = get_mongo_db()
    docs = db[COLLECTIONS["verification_docs"]]
    docs.create_index("user_id")
    docs.create_index([("status", ASCENDING), ("updated_at", ASCENDING)])
    logger.info("MongoDB indexes created")
