"""
Server lifecycle hooks

run_server() connects the document store and, when given a port, serves the
app with uvicorn in the background of the running event loop. close_server()
undoes both. Test harnesses use these instead of the app lifespan.
"""

import asyncio
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from blog_api.app import app
from blog_api.config.settings import DATABASE_URL
from blog_api.database.connection import init_database, close_database

logger = logging.getLogger(__name__)

STARTUP_POLL_INTERVAL = 0.05

_server: Optional[uvicorn.Server] = None
_server_task: Optional[asyncio.Task] = None


async def run_server(
    database_url: Optional[str] = None,
    port: Optional[int] = None,
    host: str = "127.0.0.1"
) -> FastAPI:
    """Connect the database and optionally start serving HTTP

    Args:
        database_url: Database to run against (defaults to DATABASE_URL)
        port: Port to listen on; 0 picks a free port, None serves nothing

    Returns:
        The FastAPI app, ready to receive requests
    """
    global _server, _server_task

    await init_database(database_url or DATABASE_URL)

    if port is None:
        return app

    config = uvicorn.Config(app, host=host, port=port, lifespan="off", log_level="warning")
    _server = uvicorn.Server(config)
    _server_task = asyncio.create_task(_server.serve())

    while not _server.started:
        if _server_task.done():
            error = _server_task.exception()
            _server, _server_task = None, None
            await close_database()
            raise RuntimeError(f"Server failed to start on {host}:{port}: {error}")
        await asyncio.sleep(STARTUP_POLL_INTERVAL)

    logger.info(f"Your app is listening on {server_url()}")
    return app


def server_url() -> Optional[str]:
    """Base URL of the running HTTP server, if one was started"""
    if _server is None or not _server.servers:
        return None
    host, port = _server.servers[0].sockets[0].getsockname()[:2]
    return f"http://{host}:{port}"


async def close_server():
    """Stop the HTTP server (if running) and close the database"""
    global _server, _server_task

    if _server is not None:
        logger.info("Closing server")
        _server.should_exit = True
        await _server_task
        _server, _server_task = None, None

    await close_database()
