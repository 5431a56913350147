"""
Posts service - business logic for blog post management
"""

import logging
from typing import Dict, Any, Optional

from blog_api.config.settings import POSTS_COLLECTION
from blog_api.models.post import BlogPostCreateRequest, post_to_document
from blog_api.services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)


class PostsService(BaseService):
    """Service for blog post operations"""

    def __init__(self, collection_name: str = POSTS_COLLECTION):
        super().__init__(collection_name)

    async def create_post(self, request: BlogPostCreateRequest) -> ServiceResult:
        """
        Create a new blog post

        Args:
            request: Validated post fields; ``created`` defaults to now

        Returns:
            ServiceResult with the stored post document
        """
        document = post_to_document(request)
        logger.info(f"Creating new blog post: {request.title!r}")
        return await self.create(document)

    async def list_posts(self, limit: Optional[int] = None, offset: int = 0) -> ServiceResult:
        return await self.read(limit=limit, offset=offset)

    async def get_post_by_id(self, post_id: str) -> ServiceResult:
        return await self.get_by_id(post_id)

    async def update_post(self, post_id: str, updates: Dict[str, Any]) -> ServiceResult:
        """
        Update fields of an existing post

        Args:
            post_id: Id of the post
            updates: JSON-compatible replacement values for title, content or author
        """
        logger.info(f"Updating blog post {post_id}: fields={sorted(updates)}")
        return await self.update(post_id, updates)

    async def delete_post(self, post_id: str) -> ServiceResult:
        logger.info(f"Deleting blog post {post_id}")
        return await self.delete(post_id)


# Global service instance
_posts_service: Optional[PostsService] = None


def get_posts_service() -> PostsService:
    """Get the global posts service instance"""
    global _posts_service
    if _posts_service is None:
        _posts_service = PostsService()
    return _posts_service
