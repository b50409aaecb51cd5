from storefront.catalog.listing import list_products, localize_product, related_products
from storefront.catalog.normalizer import normalize_catalog


def test_localize_product_resolves_every_text_field(catalog):
    bed = localize_product(catalog.get_product("p1"), "ar")
    assert bed.name == "سرير"
    assert bed.description == "هيكل فولاذي"
    assert bed.subcategory == "أسرة يدوية"
    assert bed.subcategory_id == "s1"
    assert bed.features == ["حواجز", "CE"]
    assert bed.specifications == {"weight": "65 كغ"}
    assert bed.to_dict()["price"] == 100


def test_list_products_filters_by_category(catalog):
    names = [p.name for p in list_products(catalog, "en", "Beds")]
    assert names == ["Bed"]


def test_list_products_search_and_sort(catalog):
    assert [p.id for p in list_products(catalog, "en")] == ["p1", "p2", "p3"]
    assert [p.id for p in list_products(catalog, "en", sort_by="price-low")] == ["p2", "p3", "p1"]
    assert [p.id for p in list_products(catalog, "en", sort_by="price-high")] == ["p1", "p3", "p2"]
    assert [p.id for p in list_products(catalog, "en", sort_by="rating")] == ["p3", "p1", "p2"]
    assert [p.id for p in list_products(catalog, "en", search="  STEEL ")] == ["p1"]


def test_secondary_language_falls_back_to_primary_name(catalog):
    chair = [p for p in list_products(catalog, "ar") if p.id == "p2"][0]
    assert chair.name == "Chair"


def test_related_products_share_subcategory_label():
    catalog = normalize_catalog(
        [],
        [{"_id": "s1", "name": "Manual Beds"}],
        [{"_id": f"p{i}", "name": f"Bed {i}", "subcategory": "s1"} for i in range(7)]
        + [{"_id": "x", "name": "Other", "subcategory": "Walkers"}],
    )
    related = related_products(catalog, "p0", "en")
    assert [p.id for p in related] == ["p1", "p2", "p3", "p4"]
    assert related_products(catalog, "missing", "en") == []
    assert related_products(catalog, "x", "en") == []
