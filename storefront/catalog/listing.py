"""
Display-ready product views: localization, search, filtering, sorting.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .hierarchy import ALL, matches_filter, product_subcategory_label
from .localization import DEFAULT_LANGUAGES, Languages, resolve, resolve_list, resolve_map
from .models import Catalog, Product

SORT_NAME = "name"
SORT_PRICE_LOW = "price-low"
SORT_PRICE_HIGH = "price-high"
SORT_RATING = "rating"

SORT_OPTIONS = (SORT_NAME, SORT_PRICE_LOW, SORT_PRICE_HIGH, SORT_RATING)

RELATED_PRODUCTS_LIMIT = 4


@dataclass
class LocalizedProduct:
    id: str
    name: str
    description: str
    long_description: str
    image: str
    images: List[str]
    subcategory: str
    subcategory_id: Optional[str]
    price: float
    average_rating: float
    total_reviews: int
    features: List[str] = field(default_factory=list)
    specifications: Dict[str, str] = field(default_factory=dict)
    in_stock: bool = True
    stock_quantity: int = 0
    shipping: str = ""
    warranty: str = ""
    certifications: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def localize_product(product: Product, language: str, languages: Languages = DEFAULT_LANGUAGES) -> LocalizedProduct:
    return LocalizedProduct(
        id=product.id,
        name=resolve(product.name, language, languages),
        description=resolve(product.description, language, languages),
        long_description=resolve(product.long_description, language, languages),
        image=product.image,
        images=list(product.images),
        subcategory=product_subcategory_label(product, language, languages),
        subcategory_id=product.subcategory.id,
        price=product.price,
        average_rating=product.average_rating,
        total_reviews=product.total_reviews,
        features=resolve_list(product.features, language, languages),
        specifications=resolve_map(product.specifications, language, languages),
        in_stock=product.in_stock,
        stock_quantity=product.stock_quantity,
        shipping=resolve(product.shipping, language, languages),
        warranty=resolve(product.warranty, language, languages),
        certifications=list(product.certifications),
    )


def _matches_search(item: LocalizedProduct, search: str) -> bool:
    if not search:
        return True
    needle = search.casefold()
    return needle in item.name.casefold() or needle in item.description.casefold()


def _sort(items: List[LocalizedProduct], sort_by: str) -> List[LocalizedProduct]:
    if sort_by == SORT_PRICE_LOW:
        return sorted(items, key=lambda p: p.price)
    if sort_by == SORT_PRICE_HIGH:
        return sorted(items, key=lambda p: p.price, reverse=True)
    if sort_by == SORT_RATING:
        return sorted(items, key=lambda p: p.average_rating, reverse=True)
    return sorted(items, key=lambda p: p.name.casefold())


def list_products(
    catalog: Catalog,
    language: str,
    selection: str = ALL,
    search: str = "",
    sort_by: str = SORT_NAME,
    languages: Languages = DEFAULT_LANGUAGES,
) -> List[LocalizedProduct]:
    """Products visible under `selection` and `search`, localized and sorted.

    Unknown `sort_by` values sort by name.
    """
    visible = []
    for product in catalog.products:
        if not matches_filter(product, selection, catalog.categories, catalog.subcategories, language, languages):
            continue
        item = localize_product(product, language, languages)
        if _matches_search(item, search.strip() if search else ""):
            visible.append(item)
    return _sort(visible, sort_by)


def related_products(
    catalog: Catalog,
    product_id: str,
    language: str,
    limit: int = RELATED_PRODUCTS_LIMIT,
    languages: Languages = DEFAULT_LANGUAGES,
) -> List[LocalizedProduct]:
    """Other products sharing the resolved subcategory label of `product_id`."""
    product = catalog.get_product(product_id)
    if product is None:
        return []
    label = product_subcategory_label(product, language, languages)
    if not label:
        return []

    related = []
    for other in catalog.products:
        if other.id == product.id:
            continue
        if product_subcategory_label(other, language, languages) == label:
            related.append(localize_product(other, language, languages))
        if len(related) >= limit:
            break
    return related
