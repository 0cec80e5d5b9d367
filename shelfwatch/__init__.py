"""Shelf-photo inventory tracking: count parsing, stock forecasting and supplier reordering."""

__version__ = "0.1.0"
