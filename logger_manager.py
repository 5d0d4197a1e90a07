import logging
from logging.handlers import RotatingFileHandler

from env import LOG_FILE, LOG_LEVEL

# Configure logging
logger = logging.getLogger("product_insight")
logger.setLevel(logging.DEBUG)

formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s - %(pathname)s:%(lineno)d")

# Rotating file handler, disabled with LOG_FILE=""
if LOG_FILE:
    file_handler = RotatingFileHandler(LOG_FILE, maxBytes=5*1024*1024, backupCount=3)
    file_handler.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.DEBUG))
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

# Console handler shows request lines and errors
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(formatter)
logger.addHandler(console_handler)

def log_debug(message: str):
    logger.debug(message)

def log_info(message: str):
    logger.info(message)

def log_warning(message: str):
    logger.warning(message)

def log_error(message: str, exc: Exception = None):
    if exc:
        logger.error(message, exc_info=exc)
    else:
        logger.error(message)

def log_critical(message: str):
    logger.critical(message)
