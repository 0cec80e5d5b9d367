"""
Project stock forward as a sawtooth: steady decline, an order placed at the
reorder level, decline through the lead time, then an instant restock to
maximum_stock.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from shelfwatch.analysis.reorder import (
    FALLBACK_DAILY_USAGE,
    calculate_reorder_levels,
)
from shelfwatch.analysis.rounding import round_int
from shelfwatch.analysis.stock_analyzer import observations_in_window, predict_stock_out
from shelfwatch.data.models import (
    Observation,
    PredictiveCurve,
    PredictiveDataPoint,
    ReorderLevels,
)
from shelfwatch.logging import get_logger

logger = get_logger(__name__)

HISTORY_DAYS = 30


def format_chart_date(ts: datetime) -> str:
    """'Oct 5' style label."""
    return f"{ts:%b} {ts.day}"


def simulate_stock(
    start_quantity: float,
    start_date: datetime,
    daily_usage: float,
    levels: ReorderLevels,
    days_forward: int,
) -> List[PredictiveDataPoint]:
    """
    Step one day at a time from the last count.

    Three regimes: normal decline (clamped at minimum_stock), lead-time
    decline once the reorder level is crossed, and the restock point. Lead-time
    days and the restock consume days of the outer counter.
    """
    points: List[PredictiveDataPoint] = []
    quantity = start_quantity
    current = start_date
    day = 1
    while day <= days_forward:
        current += timedelta(days=1)
        quantity -= daily_usage

        if levels.minimum_stock < quantity <= levels.reorder_level:
            for lead_day in range(1, levels.lead_time_days + 1):
                current += timedelta(days=1)
                quantity -= daily_usage
                points.append(PredictiveDataPoint(
                    date=format_chart_date(current),
                    quantity=max(levels.minimum_stock, round_int(quantity)),
                    is_predicted=True,
                    days_until_delivery=levels.lead_time_days - lead_day,
                ))
                day += 1

            quantity = levels.maximum_stock
            points.append(PredictiveDataPoint(
                date=format_chart_date(current),
                quantity=round_int(quantity),
                is_predicted=True,
                is_reorder_point=True,
            ))
            day += 1
            continue

        if quantity < levels.minimum_stock:
            quantity = levels.minimum_stock

        points.append(PredictiveDataPoint(
            date=format_chart_date(current),
            quantity=round_int(quantity),
            is_predicted=True,
        ))
        day += 1

    return points


def generate_predictive_curve(
    observations: Sequence[Observation],
    days_forward: int = 30,
    lead_time_days: int = 3,
    now: Optional[datetime] = None,
    window_days: int = HISTORY_DAYS,
) -> PredictiveCurve:
    """Historical counts from the last `window_days` followed by the simulated curve."""
    counts = observations_in_window(observations, window_days, now)
    if not counts:
        return PredictiveCurve(data=[], reorder_levels=ReorderLevels.defaults(lead_time_days))

    levels = calculate_reorder_levels(counts, lead_time_days, now, window_days)
    historical = [
        PredictiveDataPoint(
            date=format_chart_date(o.observed_at),
            quantity=o.quantity,
            is_predicted=False,
        )
        for o in counts
    ]

    prediction = predict_stock_out(counts, window_days, now)
    # A usage estimate that rounds to 0.0 also falls back.
    daily_usage = prediction.estimated_daily_usage if prediction and prediction.estimated_daily_usage else FALLBACK_DAILY_USAGE

    last = counts[-1]
    predicted = simulate_stock(last.quantity, last.observed_at, daily_usage, levels, days_forward)

    logger.info(f"Generated curve for {last.item_name} with {len(historical) + len(predicted)} points")
    return PredictiveCurve(data=historical + predicted, reorder_levels=levels)
