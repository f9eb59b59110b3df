"""
Table session pricing.

Turns a time interval and an hourly rate into an itemized CostBreakdown.
The same method prices an in-progress session (with "now" as a provisional
end), a completed session, and a booking estimate:

1. raw duration in minutes = end - start
2. round up to the billing grid (15 min), floor at the minimum (0.5 h)
3. base price = billed hours * hourly rate
4. time multiplier = peak (1.5) if the session touches the peak window,
   times weekend (1.2) if it starts on Saturday or Sunday
5. adjusted price = base price * multiplier
6. membership discount = adjusted price * tier rate
7. subtotal = adjusted price - discount + additional charges
8. tax = subtotal * tax rate
9. total = subtotal + tax

Additional charges (food, drinks) are added after the discount and are
never multiplied or discounted. The engine trusts its inputs; range checks
live in cueclub.validation.
"""

import math
import numbers
from datetime import datetime, timedelta
from typing import Optional, Union

from cueclub.config.settings import PricingConfig, get_settings
from cueclub.domain.booking import Booking, MembershipType, TableType
from cueclub.domain.cost import CostBreakdown, CostFlags
from cueclub.utils.clock import Clock, resolve_now
from cueclub.utils.logger import get_logger
from cueclub.utils.timeutils import do_time_ranges_overlap, format_hours_minutes

logger = get_logger(__name__)

Membership = Union[str, MembershipType, None]


class PricingEngine:
    """
    Stateless pricing calculator bound to one PricingConfig.

    Args:
        config: Pricing constants; defaults to the loaded club settings
        clock: Source of "now" for in-progress sessions
    """

    def __init__(self, config: Optional[PricingConfig] = None, clock: Optional[Clock] = None):
        self.config = config or get_settings().pricing
        self.clock = clock

    # ── Duration ─────────────────────────────────────────────────────────

    def round_up_duration(self, minutes: float) -> float:
        """Round minutes up to the billing grid and return hours."""
        interval = self.config.round_up_interval
        return math.ceil(minutes / interval) * interval / 60

    def billed_duration(self, minutes: float) -> float:
        """Rounded duration in hours, never below the minimum."""
        return max(self.round_up_duration(minutes), self.config.minimum_duration)

    def calculate_base_price(self, hours: float, hourly_rate: float) -> float:
        return max(hours, self.config.minimum_duration) * hourly_rate

    # ── Multipliers ──────────────────────────────────────────────────────

    def is_peak_hour(self, moment: datetime) -> bool:
        peak = self.config.peak_hours
        return peak.start <= moment.hour < peak.end

    @staticmethod
    def is_weekend(moment: datetime) -> bool:
        return moment.weekday() >= 5

    def is_peak_session(self, start: datetime, end: datetime) -> bool:
        """
        Whether the peak multiplier applies to [start, end).

        The session is peak when it starts inside the window, ends inside
        it, or covers it entirely; equivalently, when [start, end) overlaps
        the peak window of any calendar day it touches. This also settles
        sessions that cross midnight or run for more than a day.
        """
        peak = self.config.peak_hours

        if end <= start:
            return self.is_peak_hour(start)

        day = datetime(start.year, start.month, start.day)
        while day < end:
            window_start = day + timedelta(hours=peak.start)
            window_end = day + timedelta(hours=peak.end)
            if do_time_ranges_overlap(start, end, window_start, window_end):
                return True
            day += timedelta(days=1)
        return False

    def calculate_time_multiplier(self, start: datetime, end: datetime) -> float:
        """Peak and weekend multipliers, composed multiplicatively."""
        multiplier = 1.0
        if self.is_peak_session(start, end):
            multiplier = self.config.peak_hours.multiplier
        if self.is_weekend(start):
            multiplier *= self.config.weekend_multiplier
        return multiplier

    # ── Discounts and tax ────────────────────────────────────────────────

    def discount_rate(self, membership: Membership) -> float:
        if not membership:
            return 0.0
        key = membership.value if isinstance(membership, MembershipType) else str(membership)
        return self.config.membership_discounts.get(key.strip().lower(), 0.0)

    def calculate_membership_discount(self, membership: Membership, amount: float) -> float:
        return amount * self.discount_rate(membership)

    def calculate_tax(self, subtotal: float) -> float:
        return subtotal * self.config.tax_rate

    # ── Rates ────────────────────────────────────────────────────────────

    def get_default_rate(self, table_type: Union[str, TableType, None]) -> float:
        """Hourly rate for a table type; unknown types use the default type's rate."""
        rates = self.config.default_rates
        if isinstance(table_type, TableType):
            table_type = table_type.value
        key = str(table_type).strip().lower() if table_type else ""
        if key in rates:
            return rates[key]
        return rates[self.config.default_table_type]

    def format_currency(self, amount: float, symbol: Optional[str] = None) -> str:
        symbol = self.config.currency_symbol if symbol is None else symbol
        return f"{symbol}{amount:.2f}"

    # ── Breakdowns ───────────────────────────────────────────────────────

    def _breakdown(
        self,
        start: datetime,
        end: datetime,
        hourly_rate: float,
        membership: Membership,
        additional_charges: float,
    ) -> CostBreakdown:
        minutes = (end - start).total_seconds() / 60
        hours = self.billed_duration(minutes)

        base_price = self.calculate_base_price(hours, hourly_rate)
        is_peak = self.is_peak_session(start, end)
        time_multiplier = self.calculate_time_multiplier(start, end)
        adjusted_price = base_price * time_multiplier

        membership_discount = self.calculate_membership_discount(membership, adjusted_price)
        subtotal = adjusted_price - membership_discount + additional_charges
        tax = self.calculate_tax(subtotal)

        tier = MembershipType.parse(membership)
        return CostBreakdown(
            duration=hours,
            duration_display=format_hours_minutes(hours),
            base_price=base_price,
            time_multiplier=time_multiplier,
            adjusted_price=adjusted_price,
            membership_discount=membership_discount,
            additional_charges=additional_charges,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            breakdown=CostFlags(
                base_rate=hourly_rate,
                actual_duration=minutes / 60,
                billed_duration=hours,
                is_peak_hour=is_peak,
                is_weekend=self.is_weekend(start),
                tax_rate=self.config.tax_rate,
            ),
            membership_type=tier.value if tier else None,
        )

    def calculate_final_bill(
        self,
        start: datetime,
        end: datetime,
        hourly_rate: float,
        membership: Membership = None,
        additional_charges: float = 0.0,
    ) -> CostBreakdown:
        """
        Bill for a completed session.

        Args:
            start: Session start (local wall-clock)
            end: Session end
            hourly_rate: Table rate per hour
            membership: Membership tier; unknown tiers get no discount
            additional_charges: Extras added after discount, before tax

        Returns:
            CostBreakdown with every intermediate amount
        """
        bill = self._breakdown(start, end, hourly_rate, membership, additional_charges)
        logger.debug(
            "Final bill computed",
            operation="final_bill",
            context={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "billed_hours": bill.duration,
                "multiplier": bill.time_multiplier,
                "total": round(bill.total, 2),
            },
        )
        return bill

    def calculate_current_cost(
        self,
        start: datetime,
        hourly_rate: float,
        membership: Membership = None,
        now: Optional[datetime] = None,
    ) -> CostBreakdown:
        """Running cost of an in-progress session, using the clock as end."""
        end = resolve_now(now, self.clock)
        return self._breakdown(start, end, hourly_rate, membership, 0.0)

    def estimate_cost(
        self,
        table_type_or_rate: Union[str, float, None],
        start: datetime,
        duration: float,
        membership: Membership = None,
    ) -> CostBreakdown:
        """
        Estimate for a booking before it is made.

        Args:
            table_type_or_rate: Table type name (looked up in default rates)
                or an explicit hourly rate
            start: Booking start
            duration: Booked hours
            membership: Membership tier
        """
        if isinstance(table_type_or_rate, numbers.Real) and not isinstance(table_type_or_rate, bool):
            hourly_rate = float(table_type_or_rate)
        else:
            hourly_rate = self.get_default_rate(table_type_or_rate)

        end = start + timedelta(hours=duration)
        return self.calculate_final_bill(start, end, hourly_rate, membership)

    def estimate_booking(self, booking: Booking) -> CostBreakdown:
        """Estimate using the booking's own rate, table type and membership."""
        rate = booking.hourly_rate if booking.hourly_rate is not None else booking.table_type
        return self.estimate_cost(rate, booking.start, booking.duration, booking.membership_type)


def default_engine() -> PricingEngine:
    return PricingEngine(get_settings().pricing)


def estimate_cost(
    table_type_or_rate: Union[str, float, None],
    start: datetime,
    duration: float,
    membership: Membership = None,
) -> CostBreakdown:
    return default_engine().estimate_cost(table_type_or_rate, start, duration, membership)


def finalize_bill(
    start: datetime,
    end: datetime,
    hourly_rate: float,
    membership: Membership = None,
    additional_charges: float = 0.0,
) -> CostBreakdown:
    return default_engine().calculate_final_bill(
        start, end, hourly_rate, membership, additional_charges
    )


def current_cost(
    start: datetime,
    hourly_rate: float,
    membership: Membership = None,
    now: Optional[datetime] = None,
    clock: Optional[Clock] = None,
) -> CostBreakdown:
    return PricingEngine(get_settings().pricing, clock=clock).calculate_current_cost(
        start, hourly_rate, membership, now=now
    )


def get_default_rate(table_type: Optional[str]) -> float:
    return default_engine().get_default_rate(table_type)


def format_currency(amount: float, symbol: str = "$") -> str:
    return f"{symbol}{amount:.2f}"
