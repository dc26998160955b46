# storefront/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .catalog import catalog_router
from .logger import setup_logging

setup_logging()

app = FastAPI(
    title="Book Explorer API",
    description=(
        "Backend for the Book Explorer storefront: navigation, bestsellers, "
        "category listings, product details and recently viewed lookups."
    ),
    version="1.0.0",
)

# The storefront runs on another origin (port 3000 locally, Vercel in
# production) and may reach us through a tunnel, so the tunnel bypass
# headers must be allowed too.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=config.CORS_METHODS,
    allow_headers=config.CORS_ALLOWED_HEADERS,
)

app.include_router(catalog_router)


@app.get("/")
def health_check():
    return {"status": "ok"}
