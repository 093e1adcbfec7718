"""
/market endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from kisanmandi.config import settings
from kisanmandi.di import get_mandi_service
from kisanmandi.errors import MandiError
from kisanmandi.schemas import FilterOptionsResponse, LookupResponse, MarketPricesResponse, PriceRow
from kisanmandi_core.services.mandi import MandiService
from kisanmandi_core.services.market_stats import build_insights, price_tag, search_records

log = logging.getLogger("kisanmandi.api")

router = APIRouter(tags=["market"], prefix="/market")

@router.get("/prices", response_model=MarketPricesResponse)
async def market_prices(
    commodity: Optional[str] = None,
    state: Optional[str] = None,
    limit: int = Query(settings.MANDI_DEFAULT_LIMIT, ge=1, le=1000),
    q: Optional[str] = Query(None, description="Search commodity, market, district"),
    mandi: MandiService = Depends(get_mandi_service),
):
    """
    Live mandi prices with batch stats. Stats describe the fetched batch;
    `q` only narrows the rows returned.
    """
    try:
        result = await mandi.fetch_market_prices(commodity or None, state or None, limit)
    except MandiError as e:
        raise HTTPException(status_code=502, detail=str(e))

    rows = [PriceRow(**r.model_dump(), tag=price_tag(r)) for r in search_records(result.records, q)]
    return MarketPricesResponse(records=rows, stats=result.stats, insights=build_insights(result.stats))

@router.get("/commodities", response_model=LookupResponse)
async def commodities(mandi: MandiService = Depends(get_mandi_service)):
    res = await mandi.fetch_commodities()
    return LookupResponse(values=res.values, error=res.error)

@router.get("/states", response_model=LookupResponse)
async def states(mandi: MandiService = Depends(get_mandi_service)):
    res = await mandi.fetch_states()
    return LookupResponse(values=res.values, error=res.error)

@router.get("/filters", response_model=FilterOptionsResponse)
async def filter_options(mandi: MandiService = Depends(get_mandi_service)):
    """Commodity and state dropdown values, fetched in parallel."""
    c, s = await mandi.fetch_filter_options()
    if not (c.ok and s.ok):
        log.warning("Filter lookups degraded: commodities=%s states=%s", c.error, s.error)
    return FilterOptionsResponse(
        commodities=LookupResponse(values=c.values, error=c.error),
        states=LookupResponse(values=s.values, error=s.error),
    )
