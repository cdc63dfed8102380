import logging
from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def setup_logging(level: str = None):
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)

def log_banner(logger: logging.Logger):
    logger.info("Geeta Saathi Backend API")
    logger.info("Version: %s | Environment: %s | Port: %s", settings.VERSION, settings.ENVIRONMENT, settings.PORT)
    logger.info("Server ready!")
