# storefront/config.py
"""
Runtime configuration for the storefront.

Values are read from the environment once at import time. A ``.env``
file in the working directory is loaded first so local development does
not need exported variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent


def _split_csv(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


# Backend base URL used by the HTTP client.
API_BASE_URL = os.getenv("STOREFRONT_API_BASE_URL", "http://localhost:3001").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("STOREFRONT_REQUEST_TIMEOUT", "10"))

# Client-side key/value storage namespace (one JSON file).
STORAGE_PATH = Path(
    os.getenv("STOREFRONT_STORAGE_PATH", "~/.bookexplorer/storage.json")
).expanduser()

CATALOG_FILE = Path(
    os.getenv("STOREFRONT_CATALOG_FILE", str(PACKAGE_DIR / "data" / "catalog.json"))
)
CATEGORY_PAGE_SIZE = max(1, int(os.getenv("STOREFRONT_CATEGORY_PAGE_SIZE", "12")))

CORS_ORIGINS = _split_csv(
    os.getenv(
        "STOREFRONT_CORS_ORIGINS",
        "http://localhost:3000,https://book-explorer-sooty.vercel.app",
    )
)
CORS_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"]
# Tunnelling proxies (ngrok, localtunnel) serve an interstitial page unless
# these headers are present, so the browser must be allowed to send them.
TUNNEL_BYPASS_HEADERS = {
    "ngrok-skip-browser-warning": "true",
    "Bypass-Tunnel-Reminder": "true",
}
CORS_ALLOWED_HEADERS = ["Content-Type", "Accept", "Authorization", *TUNNEL_BYPASS_HEADERS]

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "3001"))
