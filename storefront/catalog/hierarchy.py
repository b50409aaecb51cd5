"""
Category hierarchy index.

The storefront shows a single filter control whose options mix parent
categories, subcategories and whatever subcategory labels products carry.
Options are compared as resolved labels (case-sensitive), never by id,
because the control itself only knows labels.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .localization import DEFAULT_LANGUAGES, Languages, resolve
from .models import Category, Product, Subcategory

ALL = "All"

CATEGORY = "category"
SUBCATEGORY = "subcategory"


def product_subcategory_label(product: Product, language: str, languages: Languages = DEFAULT_LANGUAGES) -> str:
    return resolve(product.subcategory.name, language, languages)


def _unique(labels: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for label in labels:
        if label in seen:
            continue
        seen.add(label)
        out.append(label)
    return out


def build_filter_options(
    categories: Sequence[Category],
    subcategories: Sequence[Subcategory],
    products: Sequence[Product],
    language: str,
    languages: Languages = DEFAULT_LANGUAGES,
) -> List[str]:
    """Return ["All", *categories, *subcategories, *product labels], deduplicated.

    First occurrence wins, so the order is stable for a given catalog.
    Empty labels are dropped.
    """
    category_labels = [resolve(c.name, language, languages) for c in categories or []]
    subcategory_labels = [resolve(s.name, language, languages) for s in subcategories or []]
    product_labels = [product_subcategory_label(p, language, languages) for p in products or []]

    combined = [ALL, *category_labels, *subcategory_labels, *product_labels]
    return _unique(label for label in combined if label)


def find_category_by_label(
    label: str, categories: Sequence[Category], language: str, languages: Languages = DEFAULT_LANGUAGES
) -> Optional[Category]:
    for category in categories or []:
        if resolve(category.name, language, languages) == label:
            return category
    return None


def find_subcategory_by_label(
    label: str, subcategories: Sequence[Subcategory], language: str, languages: Languages = DEFAULT_LANGUAGES
) -> Optional[Subcategory]:
    for sub in subcategories or []:
        if resolve(sub.name, language, languages) == label:
            return sub
    return None


def classify_label(
    label: str,
    categories: Sequence[Category],
    subcategories: Sequence[Subcategory],
    language: str,
    languages: Languages = DEFAULT_LANGUAGES,
) -> Optional[str]:
    """Tell whether a label names a category, a subcategory, or neither.

    Categories are checked first: a label shared by both is a category.
    """
    if find_category_by_label(label, categories, language, languages) is not None:
        return CATEGORY
    if find_subcategory_by_label(label, subcategories, language, languages) is not None:
        return SUBCATEGORY
    return None


def matches_filter(
    product: Product,
    selection: str,
    categories: Sequence[Category],
    subcategories: Sequence[Subcategory],
    language: str,
    languages: Languages = DEFAULT_LANGUAGES,
) -> bool:
    """Whether `product` is visible under the filter `selection`.

    Order matters: an exact subcategory-label match is tried before the
    parent-category fallback, since the two label sets can overlap.
    """
    if not selection or selection == ALL:
        return True

    product_label = product_subcategory_label(product, language, languages)
    if product_label == selection:
        return True
    if not product_label:
        return False

    parent_ids = {
        c.id for c in categories or [] if resolve(c.name, language, languages) == selection
    }
    if not parent_ids:
        return False

    return any(
        sub.parent_id in parent_ids
        for sub in subcategories or []
        if resolve(sub.name, language, languages) == product_label
    )
