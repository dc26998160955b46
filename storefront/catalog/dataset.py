"""
Local catalogue dataset served by the backend routes.

The dataset is loaded from ``data/catalog.json`` (or the file named by
``STOREFRONT_CATALOG_FILE``) and holds three collections: the navigation
tree, the bestseller sections (as lists of product ids) and the product
records themselves. Each product record carries the listing fields, the
category slugs it belongs to and the optional detail enrichment. If the
file is missing or malformed the dataset is simply empty, and every
route answers with empty listings or 404s.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from ..models import BestsellerSection, Category, Product, ProductDetail, ProductSummary

logger = logging.getLogger(__name__)


class CatalogEntry(ProductDetail):
    categories: List[str] = Field(default_factory=list)

    def to_product(self) -> Product:
        return Product(
            id=self.id,
            title=self.title,
            author=self.author,
            price=self.price,
            image=self.image,
            promo=self.promo,
        )

    def to_detail(self) -> ProductDetail:
        return ProductDetail.model_validate(self.model_dump(exclude={"categories"}))


class SectionEntry(BaseModel):
    title: str
    slug: str
    product_ids: List[int] = Field(default_factory=list)


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


class CatalogDataset:
    """In-memory catalogue plus the per-category "load more" cursors.

    A category listing is served a page at a time. The first request for
    a slug resets its cursor to one page; each ``load_more`` request
    advances the cursor by a page and returns everything up to it, so a
    client that de-duplicates by id can append the response as is.
    """

    def __init__(
        self,
        navigation: Sequence[Category] = (),
        sections: Sequence[SectionEntry] = (),
        entries: Sequence[CatalogEntry] = (),
    ) -> None:
        self.navigation = list(navigation)
        self.sections = list(sections)
        self.entries = list(entries)
        self._cursors: Dict[str, int] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "CatalogDataset":
        return cls(
            navigation=[Category.model_validate(c) for c in raw.get("navigation") or []],
            sections=[SectionEntry.model_validate(s) for s in raw.get("bestsellers") or []],
            entries=[CatalogEntry.model_validate(p) for p in raw.get("products") or []],
        )

    @classmethod
    def from_file(cls, path: Path) -> "CatalogDataset":
        """Load a dataset file, falling back to an empty catalogue.

        Parameters
        ----------
        path : Path
            JSON file with ``navigation``, ``bestsellers`` and ``products``.

        Returns
        -------
        CatalogDataset
            The parsed dataset, or an empty one when the file is missing
            or does not validate.
        """
        try:
            with Path(path).open("r", encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, dict):
                raise ValueError("catalogue file must hold a JSON object")
            dataset = cls.from_dict(raw)
        except (OSError, ValueError, ValidationError) as exc:
            logger.error("Failed to load catalogue from %s: %s", path, exc)
            return cls()
        logger.info("Loaded %d catalogue products from %s", len(dataset.entries), path)
        return dataset

    def _entry(self, product_id: int) -> Optional[CatalogEntry]:
        return next((e for e in self.entries if e.id == product_id), None)

    def _in_category(self, slug: str) -> List[CatalogEntry]:
        nslug = _norm(slug)
        return [e for e in self.entries if any(_norm(c) == nslug for c in e.categories)]

    def bestsellers(self) -> List[BestsellerSection]:
        result: List[BestsellerSection] = []
        for section in self.sections:
            products = []
            for pid in section.product_ids:
                entry = self._entry(pid)
                if entry is not None:
                    products.append(entry.to_product())
            result.append(BestsellerSection(title=section.title, slug=section.slug, products=products))
        return result

    def category_page(self, slug: str, page_size: int, load_more: bool = False) -> Optional[List[Product]]:
        """Listing for ``slug`` up to its cursor; ``None`` for an unknown slug."""
        entries = self._in_category(slug)
        if not entries:
            return None
        size = max(1, page_size)
        max_pages = (len(entries) + size - 1) // size
        key = _norm(slug)
        with self._lock:
            if load_more:
                pages = min(self._cursors.get(key, 1) + 1, max_pages)
            else:
                pages = 1
            self._cursors[key] = pages
        return [e.to_product() for e in entries[: pages * size]]

    def products_in(self, slug: str) -> List[ProductSummary]:
        return [e.to_summary() for e in self._in_category(slug)]

    def search(self, q: str) -> Optional[ProductDetail]:
        nq = _norm(q)
        if not nq:
            return None
        for entry in self.entries:
            if _norm(entry.title) == nq:
                return entry.to_detail()
        for entry in self.entries:
            if nq in _norm(entry.title):
                return entry.to_detail()
        return None

    def lookup(self, ids: Sequence[Any]) -> List[Product]:
        wanted = {str(i) for i in ids}
        return [e.to_product() for e in self.entries if str(e.id) in wanted]
