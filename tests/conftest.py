"""Shared fixtures for the storefront tests."""

import pytest

from storefront.catalog.dataset import CatalogDataset
from storefront.storage import MemoryStorage
from storefront.store import Store

CATALOG = {
    "navigation": [
        {"id": 1, "title": "Fiction Books", "url": "/collections/fiction-books"},
        {"id": 5, "title": "Crime & Thriller", "url": "/collections/crime-thriller-books"},
        {
            "id": 7,
            "title": "History",
            "url": "/collections/humanities-books",
            "children": [{"id": 71, "title": "Ancient", "url": "/collections/ancient-history"}],
        },
    ],
    "bestsellers": [
        {"title": "Bestselling Crime", "slug": "crime-thriller-books", "product_ids": [3, 1, 99]},
    ],
    "products": [
        {
            "id": 1,
            "title": "Dune",
            "author": "Frank Herbert",
            "price": "£8.99",
            "image": "dune.jpg",
            "categories": ["science-fiction-books"],
            "summary": "Spice and sandworms.",
            "condition": "Very Good",
            "specifications": {"Format": "Paperback"},
            "reviews": [{"text": "Classic."}],
        },
        {"id": 2, "title": "Dune Messiah", "price": "£7.49", "image": "messiah.jpg", "categories": ["science-fiction-books"]},
        {"id": 3, "title": "The Big Sleep", "price": "£5.99", "image": "sleep.jpg", "categories": ["crime-thriller-books"]},
        {"id": 4, "title": "Gone Girl", "price": "£4.25", "image": "gone.jpg", "categories": ["crime-thriller-books"]},
        {"id": 5, "title": "Foundation", "price": "£6.00", "image": "foundation.jpg", "categories": ["science-fiction-books"]},
    ],
}


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return Store(storage).hydrate()


@pytest.fixture
def dataset():
    return CatalogDataset.from_dict(CATALOG)
