from typing import Optional, List
from pydantic import BaseModel, Field

from kisanmandi_core.models.domain import MarketInsight, MarketPriceRecord, MarketStats, PriceTag


# ---------- Response models ----------

class PriceRow(MarketPriceRecord):
    tag: PriceTag = Field(..., description="Volatile when max-min spread exceeds 10% of modal price")

class MarketPricesResponse(BaseModel):
    records: List[PriceRow] = Field(default_factory=list)   # after the optional `q` search
    stats: MarketStats = Field(default_factory=MarketStats) # over the whole fetched batch
    insights: List[MarketInsight] = Field(default_factory=list)

class LookupResponse(BaseModel):
    values: List[str] = Field(default_factory=list)
    error: Optional[str] = None

class FilterOptionsResponse(BaseModel):
    commodities: LookupResponse
    states: LookupResponse
