"""
Cost breakdown value objects.

A breakdown is derived entirely from (start, end, hourly rate, membership,
additional charges) and exposes every intermediate amount so that receipts
can print each line.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CostFlags:
    """Receipt annotations that accompany a breakdown."""

    base_rate: float
    actual_duration: float
    billed_duration: float
    is_peak_hour: bool
    is_weekend: bool
    tax_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseRate": self.base_rate,
            "actualDuration": self.actual_duration,
            "billedDuration": self.billed_duration,
            "isPeakHour": self.is_peak_hour,
            "isWeekend": self.is_weekend,
            "taxRate": self.tax_rate,
        }


@dataclass(frozen=True)
class CostBreakdown:
    """
    Itemized cost of a table session.

    Attributes:
        duration: Billed duration in hours
        duration_display: Billed duration as "Xh Ym"
        base_price: duration * hourly rate
        time_multiplier: Peak and weekend multipliers combined
        adjusted_price: base_price * time_multiplier
        membership_discount: Discount taken off adjusted_price
        additional_charges: Food and other extras, never discounted
        subtotal: adjusted_price - membership_discount + additional_charges
        tax: subtotal * tax rate
        total: subtotal + tax
        breakdown: Flags and raw figures for the receipt
        membership_type: Tier the discount was computed for, if any
    """

    duration: float
    duration_display: str
    base_price: float
    time_multiplier: float
    adjusted_price: float
    membership_discount: float
    additional_charges: float
    subtotal: float
    tax: float
    total: float
    breakdown: CostFlags
    membership_type: Optional[str] = None

    @property
    def is_peak_hour(self) -> bool:
        return self.breakdown.is_peak_hour

    @property
    def is_weekend(self) -> bool:
        return self.breakdown.is_weekend

    @property
    def billed_duration(self) -> float:
        return self.breakdown.billed_duration

    @property
    def actual_duration(self) -> float:
        return self.breakdown.actual_duration

    def to_dict(self) -> Dict[str, Any]:
        """Render with the camelCase keys used by receipts and the API."""
        return {
            "duration": self.duration,
            "durationDisplay": self.duration_display,
            "basePrice": self.base_price,
            "timeMultiplier": self.time_multiplier,
            "adjustedPrice": self.adjusted_price,
            "membershipDiscount": self.membership_discount,
            "additionalCharges": self.additional_charges,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "total": self.total,
            "membershipType": self.membership_type,
            "breakdown": self.breakdown.to_dict(),
        }
