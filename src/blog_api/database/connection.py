"""
Database connection and document store management
"""

import logging
from typing import Optional

from blog_api.config.settings import SUPPORTED_DATABASE_SCHEMES, database_scheme
from blog_api.database.documents import DocumentStore, MemoryDocumentStore, PostgresDocumentStore

logger = logging.getLogger(__name__)

# Global document store
db_store: Optional[DocumentStore] = None


def create_store(database_url: str) -> DocumentStore:
    """Build an unconnected document store for a database URL"""
    scheme = database_scheme(database_url)
    if scheme == "memory":
        return MemoryDocumentStore(database_url)
    if scheme in ("postgres", "postgresql"):
        return PostgresDocumentStore(database_url)
    raise ValueError(
        f"Unsupported database URL scheme '{scheme}', expected one of {', '.join(SUPPORTED_DATABASE_SCHEMES)}"
    )


async def init_database(database_url: str) -> DocumentStore:
    """Connect the global document store"""
    global db_store
    if db_store is not None:
        logger.warning("Database already initialized - replacing existing connection")
        await close_database()

    store = create_store(database_url)
    await store.connect()

    # Test connection
    if not await store.ping():
        await store.close()
        raise RuntimeError(f"Database at {database_scheme(database_url)}:// did not answer ping")

    db_store = store
    logger.info(f"Database initialized successfully ({database_scheme(database_url)})")
    return db_store


async def close_database():
    """Close the global document store"""
    global db_store
    if db_store:
        await db_store.close()
    db_store = None
    logger.info("Database connections closed")


def get_database() -> Optional[DocumentStore]:
    """Get the document store instance"""
    return db_store
