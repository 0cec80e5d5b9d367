from __future__ import annotations

from datetime import datetime
from typing import List, Mapping, Optional, Sequence

from shelfwatch.analysis.rounding import round_int
from shelfwatch.analysis.stock_analyzer import DECLINE_THRESHOLD, observations_in_window
from shelfwatch.data.models import Observation, ParsedItem, StockAlert

RECENT_COUNT_LIMIT = 5


def detect_stock_alerts(
    current_items: Sequence[ParsedItem],
    observations_by_item: Mapping[str, Sequence[Observation]],
    window_days: int = 7,
    now: Optional[datetime] = None,
) -> List[StockAlert]:
    """
    Compare each freshly counted item with the mean of its latest counts.

    `observations_by_item` is read after the new counts are stored, so the
    average covers the five most recent counts in the window including the
    one just taken. At least two counts are required. A decline strictly
    above 30% raises an alert.
    """
    alerts = []
    for item in current_items:
        history = observations_in_window(observations_by_item.get(item.name, []), window_days, now)
        recent = history[-RECENT_COUNT_LIMIT:]
        if len(recent) < 2:
            continue
        average_previous = sum(o.quantity for o in recent) / len(recent)
        if average_previous <= 0:
            continue
        decline = ((average_previous - item.quantity) / average_previous) * 100
        if decline > DECLINE_THRESHOLD:
            alerts.append(StockAlert(
                item_name=item.name,
                current_quantity=item.quantity,
                average_previous=average_previous,
                decline_percentage=round_int(decline),
            ))
    return alerts
