"""
Normalization and summary statistics for mandi price batches.

`compute_stats` splits a batch into "rising" and "falling" markets by relative
price spread: a record counts as rising when its (max - min) / modal spread is
above the batch average. There is no time series in the data, so this is a
volatility ranking, not a trend. `price_tag` is a separate per-record rule
(spread above 10% of modal) used for display badges.
"""
import math
from fractions import Fraction
from typing import Any, Iterable, List, Optional

from kisanmandi_core.models.domain import (
    MarketInsight,
    MarketPriceRecord,
    MarketStats,
    PriceTag,
    RawMandiRecord,
)

VOLATILE_SPREAD_RATIO = 0.1

_TEXT_FIELDS = ("state", "district", "market", "commodity", "variety", "arrival_date")


def _to_price(x: Any) -> float:
    """Parse a provider price; 0.0 for missing, non-numeric, non-finite or negative values."""
    if x is None or isinstance(x, bool):
        return 0.0
    try:
        v = float(str(x).strip()) if isinstance(x, str) else float(x)
    except (ValueError, TypeError):
        return 0.0
    if not math.isfinite(v) or v < 0:
        return 0.0
    return v


def _to_text(x: Any) -> str:
    if x is None:
        return ""
    return x if isinstance(x, str) else str(x)


def _to_total(x: Any) -> Optional[int]:
    if not x or isinstance(x, bool):
        return None
    try:
        i = int(float(x))
    except (ValueError, TypeError, OverflowError):
        return None
    return i if i > 0 else None


def _enforce_band(min_p: float, max_p: float, modal_p: float):
    """
    Keep min <= modal <= max. Zero means "not reported". With a modal quote,
    a missing bound is filled from it and the band is widened around it; the
    modal itself is never moved. Without one, only an inverted band is fixed.
    """
    if min_p and max_p and min_p > max_p:
        min_p, max_p = max_p, min_p
    if modal_p:
        min_p = min(min_p, modal_p) if min_p else modal_p
        max_p = max(max_p, modal_p)
    return min_p, max_p, modal_p


def normalize(raw_records: Iterable[RawMandiRecord]) -> List[MarketPriceRecord]:
    """Turn raw provider rows into MarketPriceRecord, dropping anything that is not a mapping."""
    out: List[MarketPriceRecord] = []
    for item in raw_records or []:
        if not isinstance(item, dict):
            continue
        min_p, max_p, modal_p = _enforce_band(
            _to_price(item.get("min_price")),
            _to_price(item.get("max_price")),
            _to_price(item.get("modal_price")),
        )
        fields = {name: _to_text(item.get(name)) for name in _TEXT_FIELDS}
        out.append(MarketPriceRecord(min_price=min_p, max_price=max_p, modal_price=modal_p, **fields))
    return out


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def spread_ratio(r: MarketPriceRecord) -> float:
    """(max - min) / modal; 0.0 when the modal price is 0 or the band is inverted."""
    if not r.modal_price:
        return 0.0
    return max(0.0, (r.max_price - r.min_price) / r.modal_price)


def compute_stats(records: List[MarketPriceRecord], provider_total: Any = None) -> MarketStats:
    if not records:
        return MarketStats()

    n = len(records)
    total = _to_total(provider_total) or n
    avg_price = round_half_up(math.fsum(r.modal_price for r in records) / n)

    # exact mean, so a record is never "above" an average of identical ratios
    ratios = [spread_ratio(r) for r in records]
    avg_ratio = sum(map(Fraction, ratios), Fraction(0)) / n
    rising = sum(1 for v in ratios if v > avg_ratio)

    return MarketStats(
        total_records=total,
        markets_rising=rising,
        markets_falling=n - rising,
        avg_price=avg_price,
    )


def price_tag(r: MarketPriceRecord) -> PriceTag:
    if (r.max_price - r.min_price) > VOLATILE_SPREAD_RATIO * r.modal_price:
        return PriceTag.VOLATILE
    return PriceTag.STABLE


def search_records(records: List[MarketPriceRecord], query: Optional[str]) -> List[MarketPriceRecord]:
    """Case-insensitive substring match on commodity, market or district."""
    q = (query or "").strip().lower()
    if not q:
        return list(records)
    return [
        r for r in records
        if q in r.commodity.lower() or q in r.market.lower() or q in r.district.lower()
    ]


def build_insights(stats: MarketStats) -> List[MarketInsight]:
    trending_up = stats.markets_rising > stats.markets_falling
    return [
        MarketInsight(
            title="Live Market Data",
            description=(f"Real-time prices from {stats.total_records} market records "
                         "across India via data.gov.in"),
            kind="info",
        ),
        MarketInsight(
            title="Price Trends",
            description=(f"{stats.markets_rising} commodities showing upward trend, "
                         f"{stats.markets_falling} showing downward movement"),
            kind="success" if trending_up else "warning",
        ),
        MarketInsight(
            title="Average Modal Price",
            description=f"Current average modal price across markets: ₹{stats.avg_price}/quintal",
            kind="success",
        ),
    ]
