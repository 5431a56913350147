"""
Configuration settings for the Blog API
"""

import os
import logging
from urllib.parse import urlparse

# Configure logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Environment configuration
ENV = os.getenv("ENV", "DEV")  # DEV, TEST or PROD
DATABASE_URL = os.getenv("DATABASE_URL", "memory://")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8080))

# Collection holding blog post documents
POSTS_COLLECTION = os.getenv("POSTS_COLLECTION", "blogposts")

# Largest page GET /posts serves when a limit is given
MAX_PAGE_SIZE = 500

SUPPORTED_DATABASE_SCHEMES = ("memory", "postgres", "postgresql")

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]


def database_scheme(url: str) -> str:
    """Return the scheme of a database URL, e.g. 'postgresql' or 'memory'"""
    return urlparse(url).scheme.lower()


logger.info(f"Environment: {ENV}")

# Validate required environment variables
if database_scheme(DATABASE_URL) not in SUPPORTED_DATABASE_SCHEMES:
    raise ValueError(
        f"DATABASE_URL scheme must be one of {', '.join(SUPPORTED_DATABASE_SCHEMES)}"
    )
