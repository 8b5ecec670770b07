"""Database module for the URL shortener service."""
from shorturl.db.base import Database, DatabaseHealthCheck, get_engine_config
from shorturl.db.session import get_database, get_db, db_transaction

__all__ = [
    "Database",
    "DatabaseHealthCheck",
    "get_engine_config",
    "get_database",
    "get_db",
    "db_transaction",
]
