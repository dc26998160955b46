"""
Catalog package for the storefront backend.

The routes expose the navigation tree, bestseller sections, category
listings, product detail enrichment and the batch history lookup. Data
comes from the local dataset in ``dataset.py``; ``client.py`` is the
consuming side used by the storefront to call these routes over HTTP.
"""

from .router import router as catalog_router  # noqa: F401
