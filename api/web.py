import logging
from app.core.logging_config import configure_logging
from app.web.main import app

configure_logging()
logger = logging.getLogger(__name__)

logger.info("api/web.py initialized")

# Entry point for the server-rendered frontend; exports its FastAPI app
