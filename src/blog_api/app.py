"""
Blog API Server
Core functionality: blog post CRUD over a document store
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blog_api.config.settings import ALLOWED_ORIGINS, DATABASE_URL
from blog_api.database.connection import init_database, close_database, get_database
from blog_api.api.routes import health, posts
from blog_api.utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # run_server() may already have connected a store for this process
    owns_database = get_database() is None
    if owns_database:
        await init_database(DATABASE_URL)
    yield
    if owns_database:
        await close_database()

# FastAPI app initialization
app = FastAPI(
    title="Blog API",
    description="CRUD API for blog posts backed by a document store",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Setup centralized error handling
setup_error_handling(app)

# Include API routes
app.include_router(health.router, tags=["Health"])
app.include_router(posts.router, prefix="/posts", tags=["Posts"])
