from typing import List

import httpx
import pytest
import pytest_asyncio

from kisanmandi.tools.mandi import MandiClient

BASE = "https://api.example.test/resource"
RESOURCE = "res-123"


def record(commodity="Tomato", state="Karnataka", district="Kolar", market="Kolar",
           min_price="100", max_price="120", modal_price="110", **extra):
    row = {
        "state": state,
        "district": district,
        "market": market,
        "commodity": commodity,
        "variety": "Local",
        "arrival_date": "14/10/2026",
        "min_price": min_price,
        "max_price": max_price,
        "modal_price": modal_price,
    }
    row.update(extra)
    return row


@pytest.fixture
def seen() -> List[httpx.Request]:
    return []


@pytest_asyncio.fixture
async def make_client(seen):
    """Build a MandiClient whose transport is answered by `handler(request)`."""
    opened: List[httpx.AsyncClient] = []

    def _make(handler, api_key="secret-key") -> MandiClient:
        def _record(request: httpx.Request):
            seen.append(request)
            return handler(request)
        http = httpx.AsyncClient(transport=httpx.MockTransport(_record))
        opened.append(http)
        return MandiClient(http, api_key=api_key, base_url=BASE, resource_id=RESOURCE)
    yield _make
    for http in opened:
        await http.aclose()


@pytest.fixture
def payload_client(make_client):
    """MandiClient that always answers 200 with the given JSON payload."""
    def _make(payload) -> MandiClient:
        return make_client(lambda request: httpx.Response(200, json=payload))
    return _make
