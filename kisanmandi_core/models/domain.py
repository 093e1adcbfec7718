from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List, Literal

# Record exactly as the provider sends it; only market_stats.normalize reads these
RawMandiRecord = Dict[str, Any]


class MarketPriceRecord(BaseModel):
    """One commodity quotation at one market on one date (INR per quintal)."""
    state: str = ""
    district: str = ""
    market: str = ""
    commodity: str = ""
    variety: str = ""
    arrival_date: str = ""
    min_price: float = Field(0.0, ge=0)
    max_price: float = Field(0.0, ge=0)
    modal_price: float = Field(0.0, ge=0)


class MarketStats(BaseModel):
    total_records: int = 0
    markets_rising: int = 0
    markets_falling: int = 0
    avg_price: int = 0


class MarketPrices(BaseModel):
    records: List[MarketPriceRecord] = []
    stats: MarketStats = Field(default_factory=MarketStats)


class PriceTag(str, Enum):
    VOLATILE = "Volatile"
    STABLE = "Stable"


class MarketInsight(BaseModel):
    title: str
    description: str
    kind: Literal["info", "success", "warning"] = "info"


class LookupResult(BaseModel):
    """Distinct values for a filter dropdown; `error` is set when the fetch failed."""
    values: List[str] = []
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
