# kisanmandi_core/services/mandi.py
import asyncio
import logging
import time
from typing import Optional, Tuple

from kisanmandi.errors import MandiError
from kisanmandi.tools.mandi import MandiClient
from kisanmandi_core.models.domain import LookupResult, MarketPrices
from kisanmandi_core.services.market_stats import compute_stats, normalize

log = logging.getLogger("kisanmandi.service")

def t(): return time.perf_counter()

DEFAULT_LIMIT = 50
LOOKUP_LIMIT = 100


class MandiService:
    """
    Wrapper around the data.gov.in mandi adapter.

    Price queries raise MandiError on transport failures. Filter lookups never
    raise for those; they return a LookupResult whose `error` says what went
    wrong and whose `values` is empty.
    """

    def __init__(self, client: MandiClient, lookup_limit: int = LOOKUP_LIMIT) -> None:
        self.client = client
        self.lookup_limit = lookup_limit

    async def fetch_market_prices(
        self,
        commodity: Optional[str] = None,
        state: Optional[str] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> MarketPrices:
        """
        Latest quotations for the given filters plus summary stats.

        A payload without records is "no data": empty records, zero stats.
        """
        start = t()
        try:
            data = await self.client.fetch_records(commodity=commodity, state=state, limit=limit)
        except MandiError as e:
            log.error("Market API error: %s", e)
            raise

        raw = data.get("records")
        if not isinstance(raw, list) or not raw:
            log.info("No market records for commodity=%r state=%r", commodity, state)
            return MarketPrices()

        records = normalize(raw)
        stats = compute_stats(records, data.get("total"))

        total_ms = round((t() - start) * 1000)
        log.info("Market prices: %s records, avg ₹%s, rising=%s falling=%s in %sms",
                 len(records), stats.avg_price, stats.markets_rising, stats.markets_falling, total_ms)
        return MarketPrices(records=records, stats=stats)

    async def fetch_distinct_values(self, field: str) -> LookupResult:
        """Sorted distinct non-empty values of `field` over one unfiltered page."""
        try:
            data = await self.client.fetch_records(limit=self.lookup_limit)
        except MandiError as e:
            log.warning("Error fetching %s list: %s", field, e)
            return LookupResult(values=[], error=str(e))

        raw = data.get("records")
        values = set()
        if isinstance(raw, list):
            for record in raw:
                if not isinstance(record, dict):
                    continue
                v = record.get(field)
                if isinstance(v, str) and v:
                    values.add(v)
        return LookupResult(values=sorted(values))

    async def fetch_commodities(self) -> LookupResult:
        return await self.fetch_distinct_values("commodity")

    async def fetch_states(self) -> LookupResult:
        return await self.fetch_distinct_values("state")

    async def fetch_filter_options(self) -> Tuple[LookupResult, LookupResult]:
        """Commodities and states, fetched concurrently."""
        commodities, states = await asyncio.gather(self.fetch_commodities(), self.fetch_states())
        return commodities, states
