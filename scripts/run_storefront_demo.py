#!/usr/bin/env python3
"""
Walk through a browse -> cart -> checkout session against the sample catalog
and print each stage to the terminal. Two storage views stand in for two open
tabs, so cross-tab cart updates are visible too.

Usage (from repo root):
  python scripts/run_storefront_demo.py
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from storefront.catalog import FilterSynchronizer, build_filter_options, list_products
from storefront.commerce import CartStore, FavoritesStore, ShippingTable, build_checkout_summary, place_order
from storefront.database import LocalStorage
from storefront.integrations.clients import LocalCatalogClient
from storefront.utils.config_loader import load_storefront_config


def setup_logging():
    """Log to terminal at INFO so every stage is visible."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, ensure_ascii=False, default=str))
    else:
        print(data)
    print()


async def main():
    setup_logging()
    cfg = load_storefront_config()
    languages = cfg.languages.as_languages()

    client = LocalCatalogClient(languages=languages)
    catalog = await client.load_catalog()
    shipping = ShippingTable(await client.list_shipping_options())

    print_stage(
        "FILTER OPTIONS (en)",
        build_filter_options(catalog.categories, catalog.subcategories, catalog.products, "en", languages),
    )

    sync = FilterSynchronizer(catalog.categories, catalog.subcategories, "en", "category=Beds", languages)
    print_stage("PRODUCTS IN 'Beds'", [p.name for p in list_products(catalog, "en", sync.selection, languages=languages)])

    sync.on_language_change("ar")
    print_stage("LANGUAGE SWITCHED TO ar", {"selection": sync.selection, "query": sync.query_string()})

    storage = LocalStorage()
    tab_a, tab_b = storage.view("tab-a"), storage.view("tab-b")
    cart_a, cart_b = CartStore(tab_a), CartStore(tab_b)
    cart_b.subscribe(lambda change: print(f"  tab-b saw {change.key} v{change.version} ({change.source})"))

    cart_a.add("p-100")
    cart_a.add("p-100", 2)
    cart_a.add("p-300")
    FavoritesStore(tab_a).toggle("p-200")
    print_stage("CART AS SEEN FROM tab-b", [entry.to_dict() for entry in cart_b.get()])

    summary = build_checkout_summary(cart_b, catalog, "ar", cfg.commerce.tax_rate, shipping, "Dubai", languages)
    print_stage("CHECKOUT SUMMARY (ar, Dubai)", summary.to_dict())

    order = place_order(
        {
            "first_name": "Demo",
            "last_name": "Shopper",
            "phone": "+971 50 000 0000",
            "email": "demo@example.com",
            "destination": "Dubai",
            "address": "Demo street 1",
            "payment_method": "cash_on_delivery",
            "terms_accepted": True,
        },
        cart_b,
        catalog,
        "en",
        cfg.commerce.tax_rate,
        shipping,
        languages,
    )
    print_stage("ORDER PLACED", {"order_id": order.order_id, "totals": order.summary.totals.to_dict()})
    print_stage("CART AFTER ORDER (tab-a)", [entry.to_dict() for entry in cart_a.get()])


if __name__ == "__main__":
    asyncio.run(main())
