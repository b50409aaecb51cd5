"""
Catalog ingestion: raw API JSON -> normalized catalog models.

The catalog API is inconsistent about a few shapes:
- text fields are either a string or {"en": .., "ar": ..}
- a subcategory's parent is either a bare id or an embedded category object
- a product's subcategory is a free-text label, an id, or an embedded object

All of that is settled here, once. Records that cannot be validated at all
(no id, non-numeric price) are skipped with a warning instead of failing the
whole catalog.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .localization import DEFAULT_LANGUAGES, Languages, Plain, resolve, to_localized
from .models import Catalog, Category, Product, ShippingOption, Subcategory, SubcategoryRef

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


class _RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class RawCategory(_RawRecord):
    name: Any = None
    description: Any = None


class RawSubcategory(_RawRecord):
    name: Any = None
    description: Any = None
    parent_category: Any = Field(default=None, validation_alias=AliasChoices("parentCategory", "parent_category", "category"))


class RawProduct(_RawRecord):
    name: Any = None
    description: Any = None
    long_description: Any = Field(default=None, validation_alias=AliasChoices("longDescription", "long_description"))
    image: Optional[str] = ""
    images: List[str] = Field(default_factory=list)
    subcategory: Any = None
    price: float = Field(default=0.0, ge=0)
    average_rating: float = Field(default=0.0, validation_alias=AliasChoices("averageRating", "average_rating"))
    total_reviews: int = Field(default=0, validation_alias=AliasChoices("totalReviews", "total_reviews"))
    features: List[Any] = Field(default_factory=list)
    specifications: Dict[str, Any] = Field(default_factory=dict)
    in_stock: bool = Field(default=True, validation_alias=AliasChoices("inStock", "in_stock"))
    stock_quantity: int = Field(default=0, validation_alias=AliasChoices("stockQuantity", "stock_quantity"))
    shipping: Any = None
    warranty: Any = None
    certifications: List[str] = Field(default_factory=list)

    @field_validator("features", "images", "certifications", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("specifications", mode="before")
    @classmethod
    def _none_as_empty_dict(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("price", "average_rating", "total_reviews", "stock_quantity", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value


class RawShippingOption(_RawRecord):
    name: str = ""
    price: float = Field(default=0.0, ge=0)


def _validate(model_type, raw: Any, kind: str):
    if not isinstance(raw, dict):
        logger.warning("Skipping %s record: expected an object, got %s", kind, type(raw).__name__)
        return None
    try:
        return model_type.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Skipping invalid %s record %r: %s", kind, raw.get("_id", raw.get("id")), exc)
        return None


def _reference_id(value: Any) -> Optional[str]:
    """Return the id of a reference given as a bare id or an embedded object."""
    if not value:
        return None
    if isinstance(value, dict):
        ref = value.get("_id") or value.get("id")
        return str(ref) if ref else None
    return str(value)


def normalize_category(raw: Any, languages: Languages = DEFAULT_LANGUAGES) -> Optional[Category]:
    record = _validate(RawCategory, raw, "category")
    if record is None:
        return None
    return Category(
        id=record.id,
        name=to_localized(record.name, languages),
        description=to_localized(record.description, languages),
    )


def normalize_subcategory(raw: Any, languages: Languages = DEFAULT_LANGUAGES) -> Optional[Subcategory]:
    record = _validate(RawSubcategory, raw, "subcategory")
    if record is None:
        return None
    return Subcategory(
        id=record.id,
        name=to_localized(record.name, languages),
        description=to_localized(record.description, languages),
        parent_id=_reference_id(record.parent_category),
    )


def normalize_subcategory_ref(
    raw: Any,
    subcategories: Iterable[Subcategory] = (),
    languages: Languages = DEFAULT_LANGUAGES,
) -> SubcategoryRef:
    """Settle a product's subcategory field into a SubcategoryRef.

    - embedded object: keep its id; take its name, or the known
      subcategory's name when the embedded one is blank, or "Uncategorized"
    - string equal to a known subcategory id: that subcategory
    - any other string: a free-text label with no id
    """
    known = {sub.id: sub for sub in subcategories}

    if isinstance(raw, dict):
        ref_id = _reference_id(raw)
        name = to_localized(raw.get("name"), languages)
        if not resolve(name, None, languages):
            if ref_id in known and resolve(known[ref_id].name, None, languages):
                name = known[ref_id].name
            else:
                name = Plain(UNCATEGORIZED)
        return SubcategoryRef(id=ref_id, name=name)

    if not raw:
        return SubcategoryRef()

    label = str(raw)
    if label in known:
        return SubcategoryRef(id=label, name=known[label].name)
    return SubcategoryRef(id=None, name=Plain(label))


def normalize_product(
    raw: Any,
    subcategories: Iterable[Subcategory] = (),
    languages: Languages = DEFAULT_LANGUAGES,
) -> Optional[Product]:
    record = _validate(RawProduct, raw, "product")
    if record is None:
        return None
    return Product(
        id=record.id,
        name=to_localized(record.name, languages),
        description=to_localized(record.description, languages),
        long_description=to_localized(record.long_description, languages),
        image=record.image or "",
        images=list(record.images),
        subcategory=normalize_subcategory_ref(record.subcategory, subcategories, languages),
        price=record.price,
        average_rating=record.average_rating,
        total_reviews=record.total_reviews,
        features=[to_localized(f, languages) for f in record.features],
        specifications={str(k): to_localized(v, languages) for k, v in record.specifications.items()},
        in_stock=record.in_stock,
        stock_quantity=record.stock_quantity,
        shipping=to_localized(record.shipping, languages),
        warranty=to_localized(record.warranty, languages),
        certifications=list(record.certifications),
    )


def normalize_shipping_option(raw: Any) -> Optional[ShippingOption]:
    record = _validate(RawShippingOption, raw, "shipping option")
    if record is None:
        return None
    return ShippingOption(id=record.id, name=record.name, price=record.price)


def normalize_catalog(
    raw_categories: Optional[Iterable[Any]],
    raw_subcategories: Optional[Iterable[Any]],
    raw_products: Optional[Iterable[Any]],
    languages: Languages = DEFAULT_LANGUAGES,
) -> Catalog:
    """Build a Catalog from the three raw API collections.

    Subcategories are normalized first so that product references given as
    bare ids can be tied to their subcategory.
    """
    categories = [c for c in (normalize_category(r, languages) for r in raw_categories or []) if c]
    subcategories = [s for s in (normalize_subcategory(r, languages) for r in raw_subcategories or []) if s]
    products = [p for p in (normalize_product(r, subcategories, languages) for r in raw_products or []) if p]

    logger.debug(
        "Normalized catalog: %d categories, %d subcategories, %d products",
        len(categories),
        len(subcategories),
        len(products),
    )
    return Catalog(categories=categories, subcategories=subcategories, products=products)
