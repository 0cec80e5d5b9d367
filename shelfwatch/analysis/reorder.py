from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

from shelfwatch.analysis.stock_analyzer import predict_stock_out
from shelfwatch.data.models import Observation, ReorderLevels
from shelfwatch.logging import get_logger

logger = get_logger(__name__)

USAGE_WINDOW_DAYS = 30
SAFETY_FACTOR = 1.5
ORDER_COVER_DAYS = 14
FALLBACK_DAILY_USAGE = 10


def calculate_reorder_levels(
    observations: Sequence[Observation],
    lead_time_days: int = 3,
    now: Optional[datetime] = None,
    window_days: int = USAGE_WINDOW_DAYS,
) -> ReorderLevels:
    """
    Derive stock thresholds from the usage rate over `window_days` (30 by
    default) and the supplier lead time.

    buffer = ceil(lead * usage * 1.5), minimum = buffer,
    reorder = ceil(lead * usage) + buffer, maximum = reorder + ceil(usage * 14).
    Without a usage estimate the labelled ReorderLevels.defaults() are returned.
    """
    prediction = predict_stock_out(observations, window_days, now)
    if prediction is None:
        logger.debug("No usage estimate, using default reorder levels")
        return ReorderLevels.defaults(lead_time_days)

    daily_usage = prediction.estimated_daily_usage
    buffer_stock = math.ceil(lead_time_days * daily_usage * SAFETY_FACTOR)
    minimum_stock = buffer_stock
    reorder_level = math.ceil(lead_time_days * daily_usage) + buffer_stock
    order_quantity = math.ceil(daily_usage * ORDER_COVER_DAYS)

    return ReorderLevels(
        maximum_stock=reorder_level + order_quantity,
        reorder_level=reorder_level,
        minimum_stock=minimum_stock,
        buffer_stock=buffer_stock,
        lead_time_days=lead_time_days,
    )


def calculate_reorder_quantity(
    observations: Sequence[Observation],
    days: int = 14,
    now: Optional[datetime] = None,
) -> int:
    """Units needed to cover `days` of usage; assumes 10/day without history."""
    prediction = predict_stock_out(observations, days, now)
    if prediction is None:
        return math.ceil(FALLBACK_DAILY_USAGE * days)
    return math.ceil(prediction.estimated_daily_usage * days)
