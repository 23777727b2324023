import logging
from app.core.logging_config import configure_logging
from app.main import app

# Setup logging to capture errors in the serverless function logs
configure_logging()
logger = logging.getLogger(__name__)

logger.info("api/index.py initialized")

# This is the entry point for the backend REST API serverless function
# It exports the FastAPI app instance
