# storefront/__main__.py
import logging

import uvicorn

from . import config
from .logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("Starting Book Explorer API on %s:%d", config.HOST, config.PORT)
    uvicorn.run("storefront.main:app", host=config.HOST, port=config.PORT)
