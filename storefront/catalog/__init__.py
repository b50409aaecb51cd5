"""
Catalog resolution: bilingual values, hierarchy, filters and listings.
"""

from .filters import FilterSynchronizer, parse_query
from .hierarchy import ALL, build_filter_options, classify_label, matches_filter
from .listing import LocalizedProduct, list_products, localize_product, related_products
from .localization import Bilingual, Languages, LocalizedText, Plain, resolve, resolve_list, resolve_map, to_localized
from .models import Catalog, Category, Product, ShippingOption, Subcategory, SubcategoryRef
from .normalizer import normalize_catalog, normalize_shipping_option

__all__ = [
    "ALL",
    "Bilingual",
    "Catalog",
    "Category",
    "FilterSynchronizer",
    "Languages",
    "LocalizedProduct",
    "LocalizedText",
    "Plain",
    "Product",
    "ShippingOption",
    "Subcategory",
    "SubcategoryRef",
    "build_filter_options",
    "classify_label",
    "list_products",
    "localize_product",
    "matches_filter",
    "normalize_catalog",
    "normalize_shipping_option",
    "parse_query",
    "related_products",
    "resolve",
    "resolve_list",
    "resolve_map",
    "to_localized",
]
