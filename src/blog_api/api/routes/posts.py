"""
Blog post API routes
All storage access goes through the posts service layer.
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Query, Response

from blog_api.config.settings import MAX_PAGE_SIZE
from blog_api.models.post import (
    BlogPostCreateRequest,
    BlogPostUpdateRequest,
    BlogPostResponse,
    BlogPostListResponse,
    serialize_post
)
from blog_api.services.base_service import ServiceResult
from blog_api.services.posts_service import get_posts_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _raise_for_result(result: ServiceResult, not_found: str = "Post not found"):
    """Map a failed service result onto an HTTP error"""
    if result.success:
        return
    if result.error_type == "RESOURCE_NOT_FOUND":
        raise HTTPException(status_code=404, detail=not_found)
    elif result.error_type == "INVALID_QUERY":
        raise HTTPException(status_code=400, detail=result.error)
    else:
        raise HTTPException(status_code=500, detail=result.error)


@router.get("", response_model=BlogPostListResponse)
async def list_posts(
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0)
):
    """List blog posts in creation order"""
    posts_service = get_posts_service()

    result = await posts_service.list_posts(limit=limit, offset=offset)
    _raise_for_result(result)

    return BlogPostListResponse(posts=[serialize_post(document) for document in result.data])


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_post(post_id: str):
    """Get a single blog post"""
    posts_service = get_posts_service()

    result = await posts_service.get_post_by_id(post_id)
    _raise_for_result(result)

    return serialize_post(result.data[0])


@router.post("", response_model=BlogPostResponse, status_code=201)
async def create_post(request: BlogPostCreateRequest):
    """Create a new blog post"""
    posts_service = get_posts_service()

    result = await posts_service.create_post(request)
    _raise_for_result(result)

    post = serialize_post(result.data[0])
    logger.info(f"Created blog post {post.id}")
    return post


@router.put("/{post_id}", status_code=204, response_class=Response)
async def update_post(post_id: str, request: BlogPostUpdateRequest):
    """Update title, content or author of a blog post"""
    if request.id is not None and request.id != post_id:
        raise HTTPException(
            status_code=400,
            detail=f"Request path id ({post_id}) and request body id ({request.id}) must match"
        )

    updates = request.updates()
    if not updates:
        raise HTTPException(status_code=400, detail="No fields provided for update")

    posts_service = get_posts_service()
    result = await posts_service.update_post(post_id, updates)
    _raise_for_result(result)

    return Response(status_code=204)


@router.delete("/{post_id}", status_code=204, response_class=Response)
async def delete_post(post_id: str):
    """Delete a blog post"""
    posts_service = get_posts_service()

    result = await posts_service.delete_post(post_id)
    _raise_for_result(result)

    logger.info(f"Deleted blog post {post_id}")
    return Response(status_code=204)
