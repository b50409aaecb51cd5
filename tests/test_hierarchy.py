from storefront.catalog.hierarchy import ALL, build_filter_options, classify_label, matches_filter
from storefront.catalog.normalizer import normalize_catalog


def test_filter_options_order_and_dedup(catalog):
    options = build_filter_options(catalog.categories, catalog.subcategories, catalog.products, "en")
    assert options == ["All", "Beds", "Mobility", "Manual Beds", "Wheelchairs", "Walkers"]


def test_filter_options_in_secondary_language(catalog):
    options = build_filter_options(catalog.categories, catalog.subcategories, catalog.products, "ar")
    assert options == ["All", "سرائر", "التنقل", "أسرة يدوية", "كراسي متحركة", "Walkers"]


def test_filter_options_minimal_catalog():
    small = normalize_catalog(
        [{"_id": "c1", "name": "Beds"}],
        [{"_id": "s1", "name": "Manual Beds", "parentCategory": "c1"}],
        [{"_id": "p1", "name": "Bed", "subcategory": "s1"}],
    )
    assert build_filter_options(small.categories, small.subcategories, small.products, "en") == [
        "All",
        "Beds",
        "Manual Beds",
    ]


def test_filter_options_drop_empty_labels():
    sparse = normalize_catalog([{"_id": "c1"}], [], [{"_id": "p1"}])
    assert build_filter_options(sparse.categories, sparse.subcategories, sparse.products, "en") == ["All"]


def test_matches_all_and_exact_subcategory(catalog):
    bed = catalog.get_product("p1")
    assert matches_filter(bed, ALL, catalog.categories, catalog.subcategories, "en")
    assert matches_filter(bed, "Manual Beds", catalog.categories, catalog.subcategories, "en")
    assert matches_filter(bed, "أسرة يدوية", catalog.categories, catalog.subcategories, "ar")


def test_matches_by_parent_category(catalog):
    bed = catalog.get_product("p1")
    chair = catalog.get_product("p2")
    walker = catalog.get_product("p3")
    args = (catalog.categories, catalog.subcategories, "en")
    assert matches_filter(bed, "Beds", *args)
    assert not matches_filter(chair, "Beds", *args)
    assert matches_filter(chair, "Mobility", *args)
    # Free-text subcategory labels have no parent.
    assert not matches_filter(walker, "Mobility", *args)
    assert matches_filter(walker, "Walkers", *args)


def test_matches_with_empty_catalog(catalog):
    bed = catalog.get_product("p1")
    assert not matches_filter(bed, "Beds", [], [], "en")
    assert matches_filter(bed, "Manual Beds", [], [], "en")


def test_classify_label_checks_categories_first():
    shared = normalize_catalog(
        [{"_id": "c1", "name": "Beds"}],
        [{"_id": "s1", "name": "Beds", "parentCategory": "c1"}, {"_id": "s2", "name": "Cots"}],
        [],
    )
    assert classify_label("Beds", shared.categories, shared.subcategories, "en") == "category"
    assert classify_label("Cots", shared.categories, shared.subcategories, "en") == "subcategory"
    assert classify_label("Nope", shared.categories, shared.subcategories, "en") is None
