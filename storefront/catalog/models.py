"""
Catalog data models.

These are the shapes every other module works with. Raw API records are
turned into them by `storefront.catalog.normalizer`; nothing downstream
re-checks whether a field was a string, an id or an embedded object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .localization import EMPTY, LocalizedText


@dataclass
class Category:
    id: str
    name: LocalizedText = EMPTY
    description: LocalizedText = EMPTY


@dataclass
class Subcategory:
    id: str
    name: LocalizedText = EMPTY
    description: LocalizedText = EMPTY
    parent_id: Optional[str] = None      # normalized from a bare id or an embedded category


@dataclass
class SubcategoryRef:
    """A product's pointer to its subcategory.

    `id` is None when the catalog only supplied a free-text label.
    """

    id: Optional[str] = None
    name: LocalizedText = EMPTY


@dataclass
class Product:
    id: str
    name: LocalizedText = EMPTY
    description: LocalizedText = EMPTY
    long_description: LocalizedText = EMPTY
    image: str = ""
    images: List[str] = field(default_factory=list)
    subcategory: SubcategoryRef = field(default_factory=SubcategoryRef)
    price: float = 0.0
    average_rating: float = 0.0
    total_reviews: int = 0
    features: List[LocalizedText] = field(default_factory=list)
    specifications: Dict[str, LocalizedText] = field(default_factory=dict)
    in_stock: bool = True
    stock_quantity: int = 0
    shipping: LocalizedText = EMPTY
    warranty: LocalizedText = EMPTY
    certifications: List[str] = field(default_factory=list)


@dataclass
class ShippingOption:
    id: str
    name: str
    price: float = 0.0


@dataclass
class Catalog:
    """Everything fetched from the catalog API in one normalized bundle."""

    categories: List[Category] = field(default_factory=list)
    subcategories: List[Subcategory] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def price_by_id(self) -> Dict[str, float]:
        return {p.id: p.price for p in self.products}

    @property
    def is_empty(self) -> bool:
        return not (self.categories or self.subcategories or self.products)
