import json
import asyncio
import logging
import time
from typing import Optional, Dict, Any

import httpx

from kisanmandi.config import Settings, settings
from kisanmandi.errors import MandiHTTPError, MandiNetworkError

log = logging.getLogger("kisanmandi.mandi")

def t(): return time.perf_counter()

# -------------------------------
# Helper Functions
# -------------------------------
def _redact(params: Dict[str, str]) -> Dict[str, str]:
    """Copy of the query params safe to put in a log line."""
    out = dict(params)
    if out.get("api-key"):
        out["api-key"] = "***"
    return out

def _check_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit

# -------------------------------
# Core API Interaction
# -------------------------------
class MandiClient:
    """
    Thin adapter over the data.gov.in resource endpoint.

    Configuration is injected at construction; the client holds no state
    besides it and issues exactly one GET per call.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str = "",
        base_url: str = "https://api.data.gov.in/resource",
        resource_id: str = "9ef84268-d588-465a-a308-a864a43d0070",
    ) -> None:
        self._http = http
        self.api_key = api_key or ""
        self.base_url = base_url.rstrip("/")
        self.resource_id = resource_id

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, cfg: Settings = settings) -> "MandiClient":
        return cls(
            http,
            api_key=cfg.DATA_GOV_IN_API_KEY,
            base_url=cfg.MANDI_API_BASE,
            resource_id=cfg.MANDI_RESOURCE_ID,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.resource_id}"

    def build_params(self, commodity: Optional[str] = None, state: Optional[str] = None,
                     limit: int = 50) -> Dict[str, str]:
        params = {
            "api-key": self.api_key,
            "format": "json",
            "limit": str(_check_limit(limit)),
            "offset": "0",
        }
        if commodity:
            params["filters[commodity]"] = commodity
        if state:
            params["filters[state]"] = state
        return params

    async def fetch_records(self, commodity: Optional[str] = None, state: Optional[str] = None,
                            limit: int = 50) -> Dict[str, Any]:
        """
        Fetch one page of raw mandi records.

        Returns the decoded JSON object (``records`` and optionally ``total``).
        Raises MandiHTTPError on a non-2xx status and MandiNetworkError when the
        request fails or the body is not JSON.
        """
        params = self.build_params(commodity, state, limit)
        log.info("Fetching market data from %s params=%s", self.url, _redact(params))

        start = t()
        try:
            r = await self._http.get(self.url, params=params)
        except httpx.RequestError as e:
            log.error("Mandi request failed: %s", e)
            raise MandiNetworkError(f"Request to mandi API failed: {e}", e) from e
        api_ms = round((t() - start) * 1000)

        if not r.is_success:
            log.error("Mandi API returned %s %s in %sms", r.status_code, r.reason_phrase, api_ms)
            raise MandiHTTPError(r.status_code, r.reason_phrase)

        try:
            data = r.json()
        except ValueError as e:
            raise MandiNetworkError(f"Mandi API returned invalid JSON: {e}", e) from e

        if not isinstance(data, dict):
            log.warning("Mandi API returned %s instead of an object", type(data).__name__)
            return {}

        recs = data.get("records")
        log.debug("Market API response: %s", data)
        log.info("Mandi API: %s records (total=%s) in %sms",
                 len(recs) if isinstance(recs, list) else 0, data.get("total"), api_ms)
        return data


# -------------------------------
# Command-Line Interface for Testing
# -------------------------------
async def _cli(commodity: Optional[str], state: Optional[str], limit: int, query: Optional[str]):
    """CLI wrapper around MandiService.fetch_market_prices."""
    from kisanmandi.http import init_http, close_http, get_http_client
    from kisanmandi_core.services.mandi import MandiService
    from kisanmandi_core.services.market_stats import price_tag, search_records

    await init_http()
    try:
        service = MandiService(MandiClient.from_settings(get_http_client()))
        result = await service.fetch_market_prices(commodity, state, limit)
        records = search_records(result.records, query)
        out = {
            "stats": result.stats.model_dump(),
            "records": [dict(r.model_dump(), tag=price_tag(r).value) for r in records],
        }
        print(json.dumps(out, indent=2, ensure_ascii=False))
    except Exception as e:
        print(json.dumps({"error": str(e)}, indent=2, ensure_ascii=False))
    finally:
        await close_http()

if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Fetch mandi commodity prices from data.gov.in")
    parser.add_argument("--commodity", default=None, help="e.g., 'Tomato'")
    parser.add_argument("--state", default=None, help="e.g., 'Uttar Pradesh'")
    parser.add_argument("--limit", type=int, default=settings.MANDI_DEFAULT_LIMIT, help="records to fetch")
    parser.add_argument("--q", default=None, help="search commodity/market/district")
    parser.add_argument("--debug", action="store_true", help="Log raw API responses")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    asyncio.run(_cli(args.commodity, args.state, args.limit, args.q))
