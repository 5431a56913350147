"""
Entry point for the Blog API
"""

import sys
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

# Import the FastAPI application
from blog_api.app import app
from blog_api.config.settings import HOST, PORT

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Blog API on port {PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
