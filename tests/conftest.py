"""
pytest configuration and fixtures for the blog API integration suite
Server lifecycle, fixture seeding and database teardown
"""

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Dict, Any, List

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent))

# Loads .env before blog_api.config.settings reads the environment
from config import HarnessConfig, get_config
from blog_api.database.connection import get_database
from blog_api.server import run_server, close_server
from core.data_factory import DataFactory
from core.database_validator import DatabaseValidator
from core.db_manager import DatabaseManager
from core.rest_client import RestClient


@pytest.fixture(scope="session")
def harness_config() -> HarnessConfig:
    return get_config()


@pytest.fixture
def data_factory() -> DataFactory:
    return DataFactory()


@pytest_asyncio.fixture
async def app_server(harness_config):
    """Start the app against the test database; stop it afterwards"""
    app = await run_server(harness_config.database_url)
    yield app
    await close_server()


@pytest_asyncio.fixture
async def db_manager(app_server, data_factory) -> DatabaseManager:
    return DatabaseManager(get_database(), data_factory)


@pytest_asyncio.fixture
async def db_validator(app_server) -> DatabaseValidator:
    return DatabaseValidator(get_database())


@pytest_asyncio.fixture
async def seeded_posts(db_manager, harness_config) -> AsyncGenerator[List[Dict[str, Any]], None]:
    """Seed fixture posts before the test and drop the database after it"""
    posts = await db_manager.seed_blog_post_data(harness_config.seed_count)
    yield posts
    await db_manager.tear_down_db()


@pytest_asyncio.fixture
async def rest_client(app_server, harness_config) -> RestClient:
    """REST client for the app under test (in-process unless TEST_API_BASE_URL is set)"""
    if harness_config.api_base_url:
        return RestClient(base_url=harness_config.api_base_url)
    return RestClient(app=app_server)


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location and names"""
    for item in items:
        if "suites" in item.path.parts:
            item.add_marker(pytest.mark.integration)
        if any(name in item.name.lower() for name in ["create", "read", "update", "delete", "get_", "list"]):
            item.add_marker(pytest.mark.crud)
        if "health" in item.name.lower():
            item.add_marker(pytest.mark.smoke)


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--smoke-only",
        action="store_true",
        default=False,
        help="Run only smoke tests"
    )


def pytest_runtest_setup(item):
    if item.config.getoption("--smoke-only") and not item.get_closest_marker("smoke"):
        pytest.skip("Skipping non-smoke test")


@pytest.fixture(scope="session")
def postgres_url(harness_config):
    """A Postgres database for store tests

    Uses TEST_DATABASE_URL when it points at Postgres, otherwise starts a
    throwaway server with testing.postgresql.
    """
    if harness_config.database_url.startswith(("postgres://", "postgresql://")):
        yield harness_config.database_url
        return

    testing_postgresql = pytest.importorskip("testing.postgresql")
    try:
        postgresql = testing_postgresql.Postgresql()
    except RuntimeError as e:
        pytest.skip(f"Embedded PostgreSQL unavailable: {e}")

    yield postgresql.url()
    postgresql.stop()
