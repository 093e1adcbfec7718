import httpx
import pytest
import pytest_asyncio

from kisanmandi.di import get_mandi_service
from kisanmandi.main import app
from kisanmandi_core.services.mandi import MandiService

from conftest import record


@pytest_asyncio.fixture
async def api(make_client):
    """ASGI client whose mandi service is answered by `handler`."""
    opened = []

    def _make(handler) -> httpx.AsyncClient:
        service = MandiService(make_client(handler))
        app.dependency_overrides[get_mandi_service] = lambda: service
        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver")
        opened.append(client)
        return client
    yield _make
    app.dependency_overrides.clear()
    for client in opened:
        await client.aclose()


def _ok(payload):
    return lambda request: httpx.Response(200, json=payload)


@pytest.mark.asyncio
async def test_prices_endpoint_returns_tags_stats_and_insights(api):
    client = api(_ok({"total": 42, "records": [
        record(commodity="Tomato", min_price="90", max_price="100", modal_price="95"),
        record(commodity="Onion", market="Lasalgaon", district="Nashik",
               min_price="95", max_price="100", modal_price="98"),
    ]}))
    r = await client.get("/market/prices", params={"commodity": "Tomato", "limit": 10})
    assert r.status_code == 200
    body = r.json()
    assert body["stats"]["total_records"] == 42
    assert body["stats"]["markets_rising"] + body["stats"]["markets_falling"] == 2
    assert [row["tag"] for row in body["records"]] == ["Volatile", "Stable"]
    assert [i["title"] for i in body["insights"]] == ["Live Market Data", "Price Trends", "Average Modal Price"]


@pytest.mark.asyncio
async def test_search_narrows_rows_but_not_stats(api):
    client = api(_ok({"records": [
        record(commodity="Tomato"),
        record(commodity="Onion", market="Lasalgaon", district="Nashik"),
    ]}))
    body = (await client.get("/market/prices", params={"q": "nashik"})).json()
    assert [row["commodity"] for row in body["records"]] == ["Onion"]
    assert body["stats"]["total_records"] == 2


@pytest.mark.asyncio
async def test_prices_provider_error_maps_to_502(api):
    client = api(lambda request: httpx.Response(503))
    r = await client.get("/market/prices")
    assert r.status_code == 502
    assert r.json()["detail"] == "API Error: 503 Service Unavailable"


@pytest.mark.asyncio
async def test_prices_rejects_bad_limit(api):
    client = api(_ok({"records": []}))
    assert (await client.get("/market/prices", params={"limit": 0})).status_code == 422


@pytest.mark.asyncio
async def test_filters_endpoint(api):
    client = api(_ok({"records": [record(commodity="Wheat", state="Punjab"),
                                  record(commodity="Rice", state="Punjab")]}))
    body = (await client.get("/market/filters")).json()
    assert body["commodities"] == {"values": ["Rice", "Wheat"], "error": None}
    assert body["states"] == {"values": ["Punjab"], "error": None}


@pytest.mark.asyncio
async def test_lookup_endpoints_fail_soft(api):
    client = api(lambda request: httpx.Response(500))
    r = await client.get("/market/states")
    assert r.status_code == 200
    assert r.json()["values"] == []
    assert "500" in r.json()["error"]
    assert (await client.get("/market/commodities")).json()["values"] == []


@pytest.mark.asyncio
async def test_health_does_not_leak_key(api):
    client = api(_ok({}))
    body = (await client.get("/health")).json()
    assert body["ok"] is True
    assert "mandi_api_key_set" in body
    assert "DATA_GOV_IN_API_KEY" not in str(body)
