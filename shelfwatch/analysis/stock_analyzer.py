"""
Stock trend analysis and stock-out prediction over sparse count histories.

Every function here is pure: it takes the observations it needs plus an
optional reference time, and never touches the persistence layer.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from shelfwatch.analysis.rounding import round_half_up, round_int
from shelfwatch.data.models import (
    Observation,
    StockAnalysis,
    StockOutPrediction,
    StockTrend,
    as_utc,
)
from shelfwatch.data.models.analysis import RiskLevel, Trend
from shelfwatch.logging import get_logger

logger = get_logger(__name__)

DECLINE_THRESHOLD = 30
CRITICAL_THRESHOLD = 50
MEDIUM_THRESHOLD = 15
STABLE_BAND = 5

RISK_ORDER: Dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}


def _reference_time(now: Optional[datetime]) -> datetime:
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def observations_in_window(
    observations: Sequence[Observation],
    window_days: int,
    now: Optional[datetime] = None,
) -> List[Observation]:
    """Observations within [now - window_days, now], oldest first."""
    end = _reference_time(now)
    start = end - timedelta(days=window_days)
    in_window = [o for o in observations if start <= o.observed_at <= end]
    return sorted(in_window, key=lambda o: o.observed_at)


def calculate_trend(current: int, previous: int) -> Trend:
    """
    Direction of change between two counts; within 5% either way is stable.

    From zero, any stock is increasing and none is stable. (0, 0) is stable
    rather than treated as an undefined ratio that would read as decreasing.
    """
    if previous == 0:
        return "increasing" if current > 0 else "stable"
    change = ((current - previous) / previous) * 100
    if abs(change) < STABLE_BAND:
        return "stable"
    if change > 0:
        return "increasing"
    return "decreasing"


def get_risk_level(decline_percent: float) -> RiskLevel:
    if decline_percent >= CRITICAL_THRESHOLD:
        return "critical"
    if decline_percent >= DECLINE_THRESHOLD:
        return "high"
    if decline_percent >= MEDIUM_THRESHOLD:
        return "medium"
    return "low"


def compute_stock_trend(
    item_name: str,
    observations: Sequence[Observation],
    window_days: int = 7,
    now: Optional[datetime] = None,
) -> Optional[StockTrend]:
    """Trend for one item, or None with fewer than two counts in the window."""
    counts = observations_in_window(observations, window_days, now)
    if len(counts) < 2:
        return None

    previous = counts[0].quantity
    current = counts[-1].quantity
    # Raw decline drives risk_level; only the reported percentage is rounded.
    decline = ((previous - current) / previous) * 100 if previous > 0 else 0

    return StockTrend(
        item_name=item_name,
        current_quantity=current,
        previous_quantity=previous,
        decline_percentage=round_int(decline),
        days_tracked=window_days,
        trend=calculate_trend(current, previous),
        risk_level=get_risk_level(decline),
    )


def analyze_stock_levels(
    observations_by_item: Mapping[str, Sequence[Observation]],
    window_days: int = 7,
    now: Optional[datetime] = None,
) -> StockAnalysis:
    """
    Bucket every item by how fast its stock is falling.

    Args:
        observations_by_item: counts per item name, in any order.
        window_days: trailing window to compare the oldest and newest count over.
        now: reference time; defaults to the current UTC time.
    Returns:
        StockAnalysis. Items with fewer than two counts in the window appear in
        no bucket, and an item may legitimately appear in none of them
        (medium risk while decreasing).
    """
    reference = _reference_time(now)
    trends = []
    for item_name, observations in observations_by_item.items():
        trend = compute_stock_trend(item_name, observations, window_days, reference)
        if trend is not None:
            trends.append(trend)

    critical = [t for t in trends if t.risk_level == "critical"]
    low_stock = [
        t for t in trends
        if t.decline_percentage >= DECLINE_THRESHOLD and t.risk_level != "critical"
    ]
    healthy = [t for t in trends if t.risk_level == "low" or t.trend == "increasing"]

    logger.info(
        f"Analysis complete: low={len(low_stock)} critical={len(critical)} healthy={len(healthy)}"
    )
    return StockAnalysis(
        low_stock_items=low_stock,
        healthy_stock_items=healthy,
        critical_items=critical,
        analyzed_at=reference,
    )


def rank_by_risk(trends: Sequence[StockTrend]) -> List[StockTrend]:
    """Most at-risk first; stable for equal risk."""
    return sorted(trends, key=lambda t: RISK_ORDER[t.risk_level])


def get_items_needing_reorder(
    observations_by_item: Mapping[str, Sequence[Observation]],
    window_days: int = 7,
    now: Optional[datetime] = None,
) -> List[StockTrend]:
    """Low-stock and critical items, most at risk first."""
    analysis = analyze_stock_levels(observations_by_item, window_days, now)
    needs_reorder = rank_by_risk(analysis.low_stock_items + analysis.critical_items)
    logger.info(f"Items needing reorder: {len(needs_reorder)}")
    return needs_reorder


def predict_stock_out(
    observations: Sequence[Observation],
    window_days: int = 14,
    now: Optional[datetime] = None,
) -> Optional[StockOutPrediction]:
    """
    Project when an item runs out from its first and last count in the window.

    Returns None when there are fewer than two counts, stock is flat or
    rising, or the latest count is already zero.
    """
    reference = _reference_time(now)
    counts = observations_in_window(observations, window_days, reference)
    if len(counts) < 2:
        return None

    first, last = counts[0], counts[-1]
    elapsed_days = (last.observed_at - first.observed_at).total_seconds() / 86400
    days_diff = max(1.0, elapsed_days)
    daily_usage = (first.quantity - last.quantity) / days_diff

    if daily_usage <= 0 or last.quantity <= 0:
        return None

    days_until_stock_out = math.ceil(last.quantity / daily_usage)
    prediction = StockOutPrediction(
        item_name=last.item_name,
        current_quantity=last.quantity,
        estimated_daily_usage=round_half_up(daily_usage, 1),
        days_until_stock_out=days_until_stock_out,
        estimated_stock_out_date=reference + timedelta(days=days_until_stock_out),
    )
    logger.debug(f"Stock-out prediction for {last.item_name}: {prediction.days_until_stock_out} days")
    return prediction
