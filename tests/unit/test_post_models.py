from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from blog_api.models.post import (
    BlogPostCreateRequest,
    BlogPostUpdateRequest,
    post_to_document,
    serialize_post,
)
from blog_api.utils.helpers import parse_timestamp, same_instant

AUTHOR = {"firstName": "Ada", "lastName": "Lovelace"}


def test_create_request_requires_author_title_content():
    with pytest.raises(ValidationError):
        BlogPostCreateRequest(title="t", content="c")


def test_document_defaults_created_to_now():
    before = datetime.now(timezone.utc)
    document = post_to_document(BlogPostCreateRequest(author=AUTHOR, title="t", content="c"))
    after = datetime.now(timezone.utc)

    assert before <= parse_timestamp(document["created"]) <= after


def test_document_keeps_given_created():
    created = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    document = post_to_document(BlogPostCreateRequest(author=AUTHOR, title="t", content="c", created=created))

    assert document == {
        "author": AUTHOR,
        "title": "t",
        "content": "c",
        "created": document["created"],
    }
    assert parse_timestamp(document["created"]) == created


def test_serialize_post_round_trips_stored_document():
    document = post_to_document(BlogPostCreateRequest(author=AUTHOR, title="t", content="c"))
    document["id"] = "a" * 24

    payload = serialize_post(document).model_dump(mode="json")

    assert set(payload) == {"id", "author", "title", "content", "created"}
    assert payload["author"] == AUTHOR
    assert same_instant(payload["created"], document["created"])


def test_update_request_only_reports_sent_fields():
    request = BlogPostUpdateRequest(id="x", title="New title")

    assert request.updates() == {"title": "New title"}


def test_update_request_serializes_author():
    request = BlogPostUpdateRequest(author=AUTHOR)

    assert request.updates() == {"author": AUTHOR}


@pytest.mark.parametrize("value", [
    "2024-05-01T12:30:00Z",
    "2024-05-01T12:30:00+00:00",
    "2024-05-01T14:30:00+02:00",
    "2024-05-01T12:30:00",
    datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
])
def test_parse_timestamp_normalizes_to_utc(value):
    assert parse_timestamp(value) == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


def test_same_instant_detects_different_moments():
    now = datetime.now(timezone.utc)

    assert not same_instant(now, now + timedelta(microseconds=1))
