from storefront.catalog.models import ShippingOption
from storefront.commerce.shipping import ShippingTable
from storefront.utils.config_loader import DEFAULT_DESTINATIONS


def test_lookup_is_case_insensitive():
    table = ShippingTable.from_costs(DEFAULT_DESTINATIONS)
    assert table.cost_for("dubai") == 10
    assert table.cost_for("  KALBA ") == 60
    assert table.cost_for("Abu Dhabi") == 15


def test_unknown_destination_costs_nothing():
    table = ShippingTable.from_costs(DEFAULT_DESTINATIONS)
    assert table.cost_for("Muscat") == 0
    assert table.cost_for(None) == 0
    assert table.find("") is None


def test_options_from_catalog_api_match_by_id():
    table = ShippingTable([ShippingOption(id="sh1", name="Dubai", price=12.5)])
    assert table.cost_for("sh1") == 12.5
    assert table.destinations() == ["Dubai"]
    assert table.to_dict() == {"Dubai": 12.5}
