from .text_parser import ParseRule, PARSE_RULES, parse_inventory_items, parse_line
from .stock_analyzer import (
    analyze_stock_levels,
    compute_stock_trend,
    get_items_needing_reorder,
    observations_in_window,
    predict_stock_out,
    rank_by_risk,
)
from .reorder import calculate_reorder_levels, calculate_reorder_quantity
from .predictive_curve import generate_predictive_curve, simulate_stock
from .alerts import detect_stock_alerts

__all__ = [
    "ParseRule",
    "PARSE_RULES",
    "parse_inventory_items",
    "parse_line",
    "analyze_stock_levels",
    "compute_stock_trend",
    "get_items_needing_reorder",
    "observations_in_window",
    "predict_stock_out",
    "rank_by_risk",
    "calculate_reorder_levels",
    "calculate_reorder_quantity",
    "generate_predictive_curve",
    "simulate_stock",
    "detect_stock_alerts",
]
