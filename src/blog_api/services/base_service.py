"""
Base service layer for unified document store operations
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from blog_api.database.connection import get_database
from blog_api.database.documents import Collection

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None


class BaseService:
    """Base service that wraps a document collection for unified data access"""

    def __init__(self, collection_name: str):
        self.collection_name = collection_name
        logger.info(f"BaseService initialized for collection: {collection_name}")

    @property
    def collection(self) -> Collection:
        """Collection handle on the currently connected store"""
        store = get_database()
        if store is None:
            raise RuntimeError("Database is not initialized")
        return store.collection(self.collection_name)

    def _failure(self, operation: str, exc: Exception) -> ServiceResult:
        logger.error(f"{operation} operation failed for {self.collection_name}: {exc}", exc_info=True)
        return ServiceResult(
            success=False,
            error=f"Database operation failed: {exc}",
            error_type="DATABASE_ERROR"
        )

    def _not_found(self, document_id: str) -> ServiceResult:
        return ServiceResult(
            success=False,
            error=f"Document {document_id} not found in {self.collection_name}",
            error_type="RESOURCE_NOT_FOUND"
        )

    async def create(self, document: Dict[str, Any]) -> ServiceResult:
        """
        Insert a new document

        Args:
            document: JSON-compatible document body

        Returns:
            ServiceResult with the stored document, including its id
        """
        try:
            created = await self.collection.insert_one(document)
            return ServiceResult(success=True, data=[created], count=1)
        except Exception as e:
            return self._failure("Create", e)

    async def read(self, limit: Optional[int] = None, offset: int = 0) -> ServiceResult:
        """
        Read documents in insertion order

        Args:
            limit: Maximum number of documents to return (None for all)
            offset: Number of documents to skip
        """
        try:
            documents = await self.collection.find(limit=limit, offset=offset)
            return ServiceResult(success=True, data=documents, count=len(documents))
        except Exception as e:
            return self._failure("Read", e)

    async def get_by_id(self, document_id: str) -> ServiceResult:
        try:
            document = await self.collection.find_by_id(document_id)
        except Exception as e:
            return self._failure("Read", e)

        if document is None:
            return self._not_found(document_id)
        return ServiceResult(success=True, data=[document], count=1)

    async def update(self, document_id: str, updates: Dict[str, Any]) -> ServiceResult:
        """
        Replace top-level fields of a document

        Returns:
            ServiceResult with the updated document
        """
        if not updates:
            return ServiceResult(
                success=False,
                error="No fields provided for update",
                error_type="INVALID_QUERY"
            )

        try:
            matched = await self.collection.update_by_id(document_id, updates)
            if not matched:
                return self._not_found(document_id)
            document = await self.collection.find_by_id(document_id)
        except Exception as e:
            return self._failure("Update", e)

        return ServiceResult(success=True, data=[document], count=1)

    async def delete(self, document_id: str) -> ServiceResult:
        try:
            deleted = await self.collection.delete_by_id(document_id)
        except Exception as e:
            return self._failure("Delete", e)

        if not deleted:
            return self._not_found(document_id)
        return ServiceResult(success=True, data=[], count=1)

    async def count(self) -> ServiceResult:
        try:
            total = await self.collection.count()
            return ServiceResult(success=True, data=[], count=total)
        except Exception as e:
            return self._failure("Count", e)
