"""
Document collections on top of the configured database

Documents are plain JSON-compatible dicts. The store assigns each inserted
document a 24 character hex ``id``; the id is returned inside the document
but never stored in its body.
"""

import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional

import asyncpg

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


def new_document_id() -> str:
    """Generate a new document id"""
    return uuid.uuid4().hex[:24]


def _affected_rows(status: str) -> int:
    """Parse the row count out of an asyncpg command status like 'UPDATE 1'"""
    try:
        return int(status.split()[-1])
    except (IndexError, ValueError):
        return 0


class Collection(ABC):
    """A named set of documents"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    async def insert_one(self, document: Document) -> Document:
        """Insert a document and return it with its assigned id"""

    @abstractmethod
    async def insert_many(self, documents: List[Document]) -> List[Document]:
        """Insert a batch of documents atomically, in order"""

    @abstractmethod
    async def find(self, limit: Optional[int] = None, offset: int = 0) -> List[Document]:
        """Return documents in insertion order"""

    @abstractmethod
    async def find_by_id(self, document_id: str) -> Optional[Document]:
        pass

    @abstractmethod
    async def update_by_id(self, document_id: str, fields: Document) -> bool:
        """Replace top-level fields of a document. Returns False if no document matched."""

    @abstractmethod
    async def delete_by_id(self, document_id: str) -> bool:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    async def find_one(self) -> Optional[Document]:
        """Return the first document of the collection, if any"""
        documents = await self.find(limit=1)
        return documents[0] if documents else None


class DocumentStore(ABC):
    """A database holding named document collections"""

    def __init__(self, url: str):
        self.url = url

    async def connect(self):
        """Open connections to the underlying database"""

    async def close(self):
        """Release connections to the underlying database"""

    @abstractmethod
    def collection(self, name: str) -> Collection:
        pass

    @abstractmethod
    async def ping(self) -> bool:
        pass

    @abstractmethod
    async def drop_database(self):
        """Remove every collection and document"""


# === IN-PROCESS STORE ===

class MemoryCollection(Collection):
    """Collection kept in process memory"""

    def __init__(self, store: "MemoryDocumentStore", name: str):
        super().__init__(name)
        self.store = store

    @property
    def _documents(self) -> Dict[str, Document]:
        return self.store.collections.setdefault(self.name, {})

    async def insert_one(self, document: Document) -> Document:
        inserted = await self.insert_many([document])
        return inserted[0]

    async def insert_many(self, documents: List[Document]) -> List[Document]:
        staged = {new_document_id(): copy.deepcopy(document) for document in documents}
        self._documents.update(staged)
        return [dict(copy.deepcopy(body), id=doc_id) for doc_id, body in staged.items()]

    async def find(self, limit: Optional[int] = None, offset: int = 0) -> List[Document]:
        items = list(self._documents.items())[offset:]
        if limit is not None:
            items = items[:limit]
        return [dict(copy.deepcopy(body), id=doc_id) for doc_id, body in items]

    async def find_by_id(self, document_id: str) -> Optional[Document]:
        body = self._documents.get(document_id)
        if body is None:
            return None
        return dict(copy.deepcopy(body), id=document_id)

    async def update_by_id(self, document_id: str, fields: Document) -> bool:
        body = self._documents.get(document_id)
        if body is None:
            return False
        body.update(copy.deepcopy({k: v for k, v in fields.items() if k != "id"}))
        return True

    async def delete_by_id(self, document_id: str) -> bool:
        return self._documents.pop(document_id, None) is not None

    async def count(self) -> int:
        return len(self._documents)


class MemoryDocumentStore(DocumentStore):
    """Store for memory:// URLs; contents live as long as the store object"""

    def __init__(self, url: str = "memory://"):
        super().__init__(url)
        self.collections: Dict[str, Dict[str, Document]] = {}

    def collection(self, name: str) -> Collection:
        return MemoryCollection(self, name)

    async def ping(self) -> bool:
        return True

    async def drop_database(self):
        self.collections.clear()


# === POSTGRES STORE ===

DOCUMENTS_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS documents (
    seq BIGSERIAL,
    collection TEXT NOT NULL,
    id TEXT NOT NULL,
    doc JSONB NOT NULL,
    inserted_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    PRIMARY KEY (collection, id)
)
"""


class PostgresCollection(Collection):
    """Collection stored as JSONB rows of the shared documents table"""

    def __init__(self, store: "PostgresDocumentStore", name: str):
        super().__init__(name)
        self.store = store

    async def _run(self, query: Callable[[asyncpg.Connection], Awaitable[Any]]) -> Any:
        """Run ``query`` on a pooled connection

        The documents table can be dropped by another process; in that case
        it is recreated and the query retried once.
        """
        pool = await self.store.ready_pool()
        try:
            async with pool.acquire() as conn:
                return await query(conn)
        except asyncpg.UndefinedTableError:
            logger.warning("documents table is missing, recreating it")
            self.store.schema_lost()
            pool = await self.store.ready_pool()
            async with pool.acquire() as conn:
                return await query(conn)

    async def insert_one(self, document: Document) -> Document:
        inserted = await self.insert_many([document])
        return inserted[0]

    async def insert_many(self, documents: List[Document]) -> List[Document]:
        rows = [(self.name, new_document_id(), json.dumps(document)) for document in documents]

        async def insert(conn):
            async with conn.transaction():
                await conn.executemany(
                    "INSERT INTO documents (collection, id, doc) VALUES ($1, $2, $3::jsonb)",
                    rows
                )

        await self._run(insert)
        return [dict(copy.deepcopy(document), id=doc_id) for (_, doc_id, _), document in zip(rows, documents)]

    async def find(self, limit: Optional[int] = None, offset: int = 0) -> List[Document]:
        rows = await self._run(lambda conn: conn.fetch(
            "SELECT id, doc FROM documents WHERE collection = $1 ORDER BY seq LIMIT $2 OFFSET $3",
            self.name, limit, offset
        ))
        return [dict(json.loads(row["doc"]), id=row["id"]) for row in rows]

    async def find_by_id(self, document_id: str) -> Optional[Document]:
        row = await self._run(lambda conn: conn.fetchrow(
            "SELECT id, doc FROM documents WHERE collection = $1 AND id = $2",
            self.name, document_id
        ))
        if row is None:
            return None
        return dict(json.loads(row["doc"]), id=row["id"])

    async def update_by_id(self, document_id: str, fields: Document) -> bool:
        patch = {k: v for k, v in fields.items() if k != "id"}
        status = await self._run(lambda conn: conn.execute(
            "UPDATE documents SET doc = doc || $3::jsonb WHERE collection = $1 AND id = $2",
            self.name, document_id, json.dumps(patch)
        ))
        return _affected_rows(status) > 0

    async def delete_by_id(self, document_id: str) -> bool:
        status = await self._run(lambda conn: conn.execute(
            "DELETE FROM documents WHERE collection = $1 AND id = $2",
            self.name, document_id
        ))
        return _affected_rows(status) > 0

    async def count(self) -> int:
        return await self._run(lambda conn: conn.fetchval(
            "SELECT count(*) FROM documents WHERE collection = $1",
            self.name
        ))


class PostgresDocumentStore(DocumentStore):
    """Store for postgres:// URLs backed by an asyncpg pool"""

    def __init__(self, url: str):
        super().__init__(url)
        self.pool: Optional[asyncpg.Pool] = None
        self._schema_ready = False

    async def connect(self):
        if self.pool is None:
            self.pool = await asyncpg.create_pool(
                self.url,
                min_size=1,
                max_size=10,
                command_timeout=60,
                statement_cache_size=0  # pgbouncer compatibility
            )

    async def close(self):
        if self.pool:
            await self.pool.close()
            self.pool = None
        self._schema_ready = False

    async def ready_pool(self) -> asyncpg.Pool:
        """Return the pool, creating the documents table on first use"""
        if self.pool is None:
            raise RuntimeError("Document store is not connected")
        if not self._schema_ready:
            async with self.pool.acquire() as conn:
                await conn.execute(DOCUMENTS_TABLE_DDL)
            self._schema_ready = True
        return self.pool

    def schema_lost(self):
        """Forget the documents table so the next query recreates it"""
        self._schema_ready = False

    def collection(self, name: str) -> Collection:
        return PostgresCollection(self, name)

    async def ping(self) -> bool:
        if self.pool is None:
            return False
        async with self.pool.acquire() as conn:
            return await conn.fetchval("SELECT 1") == 1

    async def drop_database(self):
        if self.pool is None:
            raise RuntimeError("Document store is not connected")
        async with self.pool.acquire() as conn:
            await conn.execute("DROP TABLE IF EXISTS documents")
        self._schema_ready = False
        logger.info("Dropped documents table")
