"""
HTTP client for the storefront backend.

This is the consuming side of ``router.py``: the calls a storefront view
makes to populate the product data the store does not own. Every call is
independent and never raises for network trouble. A failed request is
logged and turned into an empty result, a fallback to the data the
caller already had, or (for the first page of a category) an error flag
on ``CategoryListing``. There are no retries; the first failure is
final for that call.

Requests carry the headers tunnelling proxies (ngrok, localtunnel)
expect, otherwise they answer with an HTML interstitial instead of JSON.
Only the Python standard library is used for HTTP.
"""

from __future__ import annotations

import http.client
import json
import logging
import urllib.parse
import urllib.request
from typing import Any, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .. import config
from ..models import BestsellerSection, Category, Product, ProductDetail, ProductSummary

logger = logging.getLogger(__name__)

# Top-level groups the landing page renders separately from the category grid.
HIDDEN_NAVIGATION = frozenset({"Fiction Books", "Non-Fiction Books", "Children's Books", "Rare Books"})

_categories = TypeAdapter(List[Category])
_sections = TypeAdapter(List[BestsellerSection])
_products = TypeAdapter(List[Product])
_summaries = TypeAdapter(List[ProductSummary])


class StorefrontClient:
    def __init__(self, base_url: str = config.API_BASE_URL, timeout: float = config.REQUEST_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _request_json(self, path: str, body: Optional[Any] = None) -> Optional[Any]:
        """GET (or POST when ``body`` is given) and return parsed JSON, ``None`` on failure."""
        url = f"{self.base_url}{path}"
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **config.TUNNEL_BYPASS_HEADERS,
        }
        data = json.dumps(body).encode("utf-8") if body is not None else None
        try:
            request = urllib.request.Request(
                url, data=data, headers=headers, method="POST" if data is not None else "GET"
            )
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                if response.status != 200:
                    logger.warning("Backend request to %s returned status %s", url, response.status)
                    return None
                return json.loads(response.read().decode("utf-8", errors="ignore"))
        except (OSError, ValueError, http.client.HTTPException) as exc:
            # URLError and timeouts are OSErrors; malformed responses raise HTTPException
            logger.error("Error fetching %s: %s", url, exc)
            return None

    def _validated(self, adapter: TypeAdapter, payload: Any, what: str) -> Optional[Any]:
        if payload is None:
            return None
        try:
            return adapter.validate_python(payload)
        except ValidationError as exc:
            logger.error("Malformed %s payload: %s", what, exc)
            return None

    def get_navigation(self) -> List[Category]:
        categories = self._validated(_categories, self._request_json("/navigation"), "navigation")
        return [c for c in categories or [] if c.title not in HIDDEN_NAVIGATION]

    def get_bestsellers(self) -> List[BestsellerSection]:
        return self._validated(_sections, self._request_json("/bestsellers"), "bestsellers") or []

    def get_category(self, slug: str, load_more: bool = False) -> Optional[List[Product]]:
        path = f"/category/{urllib.parse.quote(slug)}"
        if load_more:
            path += "?loadMore=true"
        return self._validated(_products, self._request_json(path), "category")

    def get_products(self, slug: str) -> List[ProductSummary]:
        query = urllib.parse.urlencode({"category": slug})
        return self._validated(_summaries, self._request_json(f"/products?{query}"), "products") or []

    def enrich_product(self, product: Product) -> ProductDetail:
        """Merge the backend's detail data over ``product``.

        Falls back to the product itself when the lookup fails.
        """
        query = urllib.parse.urlencode({"q": product.title})
        data = self._request_json(f"/search?{query}")
        if isinstance(data, dict):
            try:
                return ProductDetail.from_product(product, data)
            except ValidationError as exc:
                logger.error("Malformed detail payload for %r: %s", product.title, exc)
        return ProductDetail.from_product(product)

    def lookup_history(self, ids: Sequence[Any]) -> List[Product]:
        """Products for ``ids`` in the requested order; unknown ids are dropped."""
        if not ids:
            return []
        found = self._validated(_products, self._request_json("/history", {"ids": list(ids)}), "history")
        if not found:
            return []
        by_id = {}
        for product in found:
            by_id.setdefault(str(product.id), product)
        return [by_id[str(pid)] for pid in ids if str(pid) in by_id]


class CategoryListing:
    """Products of one category as a storefront page accumulates them."""

    def __init__(self, client: StorefrontClient, slug: str) -> None:
        self.client = client
        self.slug = slug
        self.products: List[Product] = []
        self.loading = False
        self.loading_more = False
        self.error = False

    def load(self) -> None:
        self.loading = True
        self.error = False
        self.products = []
        try:
            products = self.client.get_category(self.slug)
            if products is None:
                self.error = True
            else:
                self.products = products
        finally:
            self.loading = False

    def load_more(self) -> int:
        """Append the next page; returns how many new products were added.

        A call made while another is still in flight does nothing.
        """
        if self.loading_more:
            return 0
        self.loading_more = True
        try:
            products = self.client.get_category(self.slug, load_more=True)
            if products is None:
                logger.error("Load more failed for category %s", self.slug)
                return 0
            existing = {p.id for p in self.products}
            fresh = [p for p in products if p.id not in existing]
            self.products.extend(fresh)
            return len(fresh)
        finally:
            self.loading_more = False
