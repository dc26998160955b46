# storefront/models.py
"""
Pydantic records shared by the store, the backend routes and the client.

Products come in three explicit variants instead of one loosely-optional
shape. ``ProductSummary`` is the narrow ``{title, price, image}`` record
returned by the legacy ``/products`` route and used for recommendations.
``Product`` adds the catalogue id and listing decorations, and
``ProductDetail`` adds the enrichment served by ``/search``. Prices are
kept as the decorated display strings the catalogue publishes (for
example ``"£8.99"``); the pricing engine parses them.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ProductSummary(BaseModel):
    title: str
    price: str = ""
    image: str = ""


class Product(ProductSummary):
    id: Optional[int] = None
    author: Optional[str] = None
    promo: Optional[str] = None

    def to_summary(self) -> ProductSummary:
        return ProductSummary(title=self.title, price=self.price, image=self.image)


class Review(BaseModel):
    text: str


class ProductDetail(Product):
    """A product merged with the detail page enrichment.

    Every enrichment field is optional on the wire; missing collections
    are normalised to empty ones so the view never has to guard them.
    """

    summary: Optional[str] = None
    condition: Optional[str] = None
    specifications: Dict[str, str] = Field(default_factory=dict)
    reviews: List[Review] = Field(default_factory=list)
    recommendations: List[ProductSummary] = Field(default_factory=list)

    @classmethod
    def from_product(
        cls, product: ProductSummary, enrichment: Optional[Dict[str, Any]] = None
    ) -> "ProductDetail":
        """Overlay ``enrichment`` on ``product``; ``None`` values never erase data."""
        data: Dict[str, Any] = product.model_dump()
        for key, value in (enrichment or {}).items():
            if value is not None:
                data[key] = value
        return cls.model_validate(data)


class Category(BaseModel):
    id: int
    title: str
    url: str
    children: Optional[List["Category"]] = None


class BestsellerSection(BaseModel):
    title: str
    slug: str
    products: List[Product] = Field(default_factory=list)


class HistoryLookupRequest(BaseModel):
    ids: List[Union[int, str]] = Field(default_factory=list)


class CartLine(BaseModel):
    """One line of the shopping cart.

    ``id`` is the natural key derived from the title at add time. Title,
    price and image are captured once and never refreshed. ``unit_price``
    is in the base currency and is stored as ``unitPrice``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    unit_price: float = Field(default=0.0, alias="unitPrice")
    image: str = ""
    quantity: int = Field(default=1, ge=1)


class Currency(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    code: str
    symbol: str
    display_name: str = Field(alias="name")
    rate_from_base: float = Field(alias="rate")
    # 0 for currencies without minor units in display (yen)
    fraction_digits: int = 2
