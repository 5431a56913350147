"""
Blog post Pydantic models
"""

from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field


class AuthorName(BaseModel):
    firstName: str
    lastName: str


class BlogPostCreateRequest(BaseModel):
    author: AuthorName
    title: str
    content: str
    created: Optional[datetime] = Field(None, description="Defaults to the time of creation")


class BlogPostUpdateRequest(BaseModel):
    id: Optional[str] = Field(None, description="Must equal the id in the request path when given")
    author: Optional[AuthorName] = None
    title: Optional[str] = None
    content: Optional[str] = None

    def updates(self) -> Dict[str, Any]:
        """Fields to replace on the stored post"""
        return self.model_dump(mode="json", exclude={"id"}, exclude_none=True)


class BlogPostResponse(BaseModel):
    id: str
    author: AuthorName
    title: str
    content: str
    created: datetime


class BlogPostListResponse(BaseModel):
    posts: List[BlogPostResponse]


# Fields a client must send when creating a post
REQUIRED_POST_FIELDS = ("author", "title", "content")


def post_to_document(request: BlogPostCreateRequest) -> Dict[str, Any]:
    """Convert a create request into the stored document shape"""
    created = request.created or datetime.now(timezone.utc)
    return request.model_copy(update={"created": created}).model_dump(mode="json")


def serialize_post(document: Dict[str, Any]) -> BlogPostResponse:
    """Build the API representation of a stored post document"""
    return BlogPostResponse(
        id=document["id"],
        author=document["author"],
        title=document["title"],
        content=document["content"],
        created=document["created"]
    )
