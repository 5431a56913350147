"""
Runs the app on a real socket through run_server()/close_server()
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from blog_api.database.connection import get_database
from blog_api.server import run_server, close_server, server_url
from core.db_manager import DatabaseManager
from core.rest_client import RestClient


async def test_live_server_lifecycle(harness_config, data_factory):
    if harness_config.api_base_url:
        pytest.skip("Suite is targeting an external server")

    await run_server(harness_config.database_url, port=0)
    try:
        base_url = server_url()
        assert base_url is not None and base_url.startswith("http://127.0.0.1:")

        manager = DatabaseManager(get_database(), data_factory)
        seeded = await manager.seed_blog_post_data(3)
        client = RestClient(base_url=base_url)

        listing = await client.get("/posts")
        assert listing["_status_code"] == 200
        assert [post["id"] for post in listing["posts"]] == [post["id"] for post in seeded]

        created = await client.post("/posts", data_factory.generate_blog_post_data())
        assert created["_status_code"] == 201

        deleted = await client.delete(f"/posts/{created['id']}")
        assert deleted["_status_code"] == 204

        await manager.tear_down_db()
    finally:
        await close_server()

    assert server_url() is None
    assert get_database() is None
