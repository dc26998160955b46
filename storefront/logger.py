# storefront/logger.py
import logging
import os
import sys

_configured = False


def setup_logging() -> None:
    """Configure the root logger once from ``LOG_LEVEL``."""
    global _configured
    if _configured:
        return

    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid duplicate handlers (uvicorn or pytest may have installed some)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(log_level)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        root.addHandler(handler)

    _configured = True
