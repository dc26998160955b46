"""
Route definitions for the storefront backend.

Endpoints:
- GET  /navigation            : navigation tree
- GET  /bestsellers           : bestseller sections with their products
- GET  /category/{slug}       : category listing (``?loadMore=true`` for the next page)
- GET  /products              : legacy narrow listing (``?category=slug``)
- GET  /search                : detail enrichment for a product title
- POST /history               : batch lookup of recently viewed ids
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from .. import config
from ..models import BestsellerSection, Category, HistoryLookupRequest, Product, ProductDetail, ProductSummary
from .dataset import CatalogDataset

router = APIRouter(tags=["catalog"])

_dataset = CatalogDataset.from_file(config.CATALOG_FILE)


def get_dataset() -> CatalogDataset:
    return _dataset


@router.get("/navigation", response_model=List[Category])
def navigation(dataset: CatalogDataset = Depends(get_dataset)) -> List[Category]:
    return dataset.navigation


@router.get("/bestsellers", response_model=List[BestsellerSection])
def bestsellers(dataset: CatalogDataset = Depends(get_dataset)) -> List[BestsellerSection]:
    return dataset.bestsellers()


@router.get("/category/{slug}", response_model=List[Product])
def category(
    slug: str,
    load_more: bool = Query(default=False, alias="loadMore", description="Serve the next page"),
    dataset: CatalogDataset = Depends(get_dataset),
) -> List[Product]:
    products = dataset.category_page(slug, config.CATEGORY_PAGE_SIZE, load_more=load_more)
    if products is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return products


@router.get("/products", response_model=List[ProductSummary])
def products(
    category: str = Query(..., description="Category slug"),
    dataset: CatalogDataset = Depends(get_dataset),
) -> List[ProductSummary]:
    return dataset.products_in(category)


@router.get("/search", response_model=ProductDetail)
def search(
    q: str = Query(..., min_length=1, description="Product title"),
    dataset: CatalogDataset = Depends(get_dataset),
) -> ProductDetail:
    detail = dataset.search(q)
    if detail is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return detail


@router.post("/history", response_model=List[Product])
def history(req: HistoryLookupRequest, dataset: CatalogDataset = Depends(get_dataset)) -> List[Product]:
    """Products for the requested ids, in catalogue order.

    Callers re-order the result to match the order they asked for.
    """
    return dataset.lookup(req.ids)
