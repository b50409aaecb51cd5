from storefront.catalog.filters import FilterSynchronizer, parse_query
from storefront.catalog.normalizer import normalize_catalog


def _sync(catalog, language="en", query=None):
    return FilterSynchronizer(catalog.categories, catalog.subcategories, language, query)


def test_parse_query_keeps_only_filter_params():
    assert parse_query("?category=Beds&page=2") == {"category": "Beds"}
    assert parse_query({"subcategory": "Cots", "category": ""}) == {"subcategory": "Cots"}
    assert parse_query(None) == {}


def test_subcategory_param_wins(catalog):
    sync = _sync(catalog, query="category=Beds&subcategory=Manual%20Beds")
    assert sync.selection == "Manual Beds"


def test_no_params_selects_all(catalog):
    assert _sync(catalog).selection == "All"
    sync = _sync(catalog, query="category=Beds")
    assert sync.on_query_change("") == "All"


def test_language_switch_translates_category(catalog):
    sync = _sync(catalog, query="category=Beds")
    assert sync.on_language_change("ar") == "سرائر"
    assert sync.params == {"category": "سرائر"}
    assert parse_query(sync.query_string()) == {"category": "سرائر"}


def test_language_switch_translates_subcategory_back(catalog):
    sync = _sync(catalog, language="ar", query={"subcategory": "أسرة يدوية"})
    assert sync.on_language_change("en") == "Manual Beds"
    assert sync.params == {"subcategory": "Manual Beds"}


def test_language_switch_matches_label_from_other_language(catalog):
    # A shared URL carrying the Arabic label while the page is in English.
    sync = _sync(catalog, language="en", query="category=سرائر")
    assert sync.on_language_change("ar") == "سرائر"


def test_language_switch_keeps_unknown_or_all(catalog):
    sync = _sync(catalog, query="subcategory=Walkers")
    assert sync.on_language_change("ar") == "Walkers"
    sync = _sync(catalog)
    assert sync.on_language_change("ar") == "All"
    assert sync.params == {}


def test_ambiguous_label_resolves_to_first_category():
    shared = normalize_catalog(
        [{"_id": "c1", "name": {"en": "Beds", "ar": "سرائر"}}],
        [{"_id": "s1", "name": {"en": "Beds", "ar": "أسرة"}, "parentCategory": "c1"}],
        [],
    )
    sync = FilterSynchronizer(shared.categories, shared.subcategories, "en", "subcategory=Beds")
    assert sync.on_language_change("ar") == "سرائر"
    assert sync.params == {"category": "سرائر"}


def test_select_writes_exactly_one_param(catalog):
    sync = _sync(catalog, query="subcategory=Manual%20Beds")
    assert sync.select("Beds") == {"category": "Beds"}
    assert sync.select("Wheelchairs") == {"subcategory": "Wheelchairs"}
    assert sync.select("Walkers") == {"subcategory": "Walkers"}
    assert sync.select("All") == {}
    assert sync.selection == "All"
    assert sync.query_string() == ""


def test_empty_catalog_is_tolerated():
    sync = FilterSynchronizer([], [], "en", "category=Beds")
    assert sync.on_language_change("ar") == "Beds"
    assert sync.select("Beds") == {"subcategory": "Beds"}
