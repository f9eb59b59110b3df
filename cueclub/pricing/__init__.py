"""Pricing engine for table sessions and booking estimates."""

from .calculator import (
    PricingEngine,
    current_cost,
    default_engine,
    estimate_cost,
    finalize_bill,
    format_currency,
    get_default_rate,
)

__all__ = [
    "PricingEngine",
    "current_cost",
    "default_engine",
    "estimate_cost",
    "finalize_bill",
    "format_currency",
    "get_default_rate",
]
