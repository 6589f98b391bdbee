"""
Database module - relational (SQLAlchemy) and MongoDB connections.
"""
from placement_portal.db.postgres import get_db_session, check_postgres_connection
from placement_portal.db.mongodb import get_mongo_db, check_mongo_connection

__all__ = [
    "get_db_session",
    "check_postgres_connection",
    "get_mongo_db",
    "check_mongo_connection"
]
