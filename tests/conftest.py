"""Pytest fixtures: a small bilingual catalog and in-memory storage views."""

import pytest

from storefront.catalog.normalizer import normalize_catalog
from storefront.database.storage import LocalStorage


@pytest.fixture
def raw_catalog():
    """Catalog API payload with bilingual labels, a bare-id parent and an embedded one."""
    return {
        "categories": [
            {"_id": "c1", "name": {"en": "Beds", "ar": "سرائر"}},
            {"_id": "c2", "name": {"en": "Mobility", "ar": "التنقل"}},
        ],
        "subcategories": [
            {"_id": "s1", "name": {"en": "Manual Beds", "ar": "أسرة يدوية"}, "parentCategory": "c1"},
            {"_id": "s2", "name": {"en": "Wheelchairs", "ar": "كراسي متحركة"}, "parentCategory": {"_id": "c2"}},
        ],
        "products": [
            {
                "_id": "p1",
                "name": {"en": "Bed", "ar": "سرير"},
                "description": {"en": "Steel frame", "ar": "هيكل فولاذي"},
                "subcategory": "s1",
                "price": 100,
                "averageRating": 4.5,
                "features": [{"en": "Rails", "ar": "حواجز"}, "CE"],
                "specifications": {"weight": {"en": "65 kg", "ar": "65 كغ"}},
            },
            {
                "_id": "p2",
                "name": {"en": "Chair"},
                "subcategory": {"_id": "s2", "name": {"en": "Wheelchairs", "ar": "كراسي متحركة"}},
                "price": 50,
                "averageRating": 3.9,
            },
            {
                "_id": "p3",
                "name": "Walker",
                "subcategory": "Walkers",
                "price": 75,
                "averageRating": 4.9,
            },
        ],
        "shipping": [
            {"_id": "sh1", "name": "Dubai", "price": 10},
            {"_id": "sh2", "name": "Kalba", "price": 60},
        ],
    }


@pytest.fixture
def catalog(raw_catalog):
    return normalize_catalog(raw_catalog["categories"], raw_catalog["subcategories"], raw_catalog["products"])


@pytest.fixture
def local_storage():
    return LocalStorage()


@pytest.fixture
def view(local_storage):
    """One open tab on the shared in-memory storage."""
    return local_storage.view("tab-a")
