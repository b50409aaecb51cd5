import json

import httpx
import pytest

from storefront.integrations.clients import HttpCatalogClient, LocalCatalogClient, create_catalog_client
from storefront.integrations.contracts import CatalogUnavailable


def _transport(raw_catalog, envelope=False):
    def handler(request: httpx.Request) -> httpx.Response:
        name = request.url.path.rsplit("/", 1)[-1]
        if name not in raw_catalog:
            return httpx.Response(404, json={"error": "not found"})
        body = {"data": raw_catalog[name]} if envelope else raw_catalog[name]
        return httpx.Response(200, json=body)

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_http_client_loads_normalized_catalog(raw_catalog):
    client = HttpCatalogClient(base_url="https://api.example.test/api/", transport=_transport(raw_catalog))
    catalog = await client.load_catalog()
    assert [p.id for p in catalog.products] == ["p1", "p2", "p3"]
    assert catalog.subcategories[0].parent_id == "c1"

    options = await client.list_shipping_options()
    assert [o.name for o in options] == ["Dubai", "Kalba"]


@pytest.mark.asyncio
async def test_http_client_accepts_enveloped_responses(raw_catalog):
    client = HttpCatalogClient(base_url="https://api.example.test", transport=_transport(raw_catalog, envelope=True))
    assert len(await client.fetch_collection("categories")) == 2


@pytest.mark.asyncio
async def test_http_client_raises_catalog_unavailable_on_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))
    client = HttpCatalogClient(base_url="https://api.example.test", transport=transport)
    with pytest.raises(CatalogUnavailable):
        await client.load_catalog()


@pytest.mark.asyncio
async def test_http_client_raises_on_unexpected_payload():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"message": "hi"}))
    client = HttpCatalogClient(base_url="https://api.example.test", transport=transport)
    with pytest.raises(CatalogUnavailable):
        await client.fetch_collection("products")


@pytest.mark.asyncio
async def test_http_client_without_base_url(monkeypatch):
    monkeypatch.delenv("CATALOG_API_URL", raising=False)
    with pytest.raises(CatalogUnavailable):
        await HttpCatalogClient().fetch_collection("products")


@pytest.mark.asyncio
async def test_local_client_reads_json_file(tmp_path, raw_catalog):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(raw_catalog, ensure_ascii=False), encoding="utf-8")
    client = LocalCatalogClient(path=path)
    catalog = await client.load_catalog()
    assert catalog.get_product("p1").price == 100
    assert len(await client.list_shipping_options()) == 2


@pytest.mark.asyncio
async def test_local_client_missing_or_broken_file(tmp_path):
    with pytest.raises(CatalogUnavailable):
        await LocalCatalogClient(path=tmp_path / "missing.json").load_catalog()

    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")
    with pytest.raises(CatalogUnavailable):
        await LocalCatalogClient(path=broken).load_catalog()


@pytest.mark.asyncio
async def test_bundled_sample_catalog_loads():
    catalog = await LocalCatalogClient().load_catalog()
    assert not catalog.is_empty
    assert catalog.get_product("p-200").subcategory.id == "sub-electric-beds"


def test_create_catalog_client(monkeypatch):
    monkeypatch.delenv("CATALOG_API_URL", raising=False)
    assert isinstance(create_catalog_client(), LocalCatalogClient)
    assert isinstance(create_catalog_client(source="http", base_url="https://x.test"), HttpCatalogClient)
    assert isinstance(create_catalog_client(source="http"), LocalCatalogClient)

    monkeypatch.setenv("CATALOG_API_URL", "https://env.test")
    client = create_catalog_client()
    assert isinstance(client, HttpCatalogClient)
    assert client.base_url == "https://env.test"
