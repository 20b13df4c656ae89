# =============================================================================
# lib/pricing.py - Campaign Cost and Influencer Payout Calculator
# =============================================================================
# Prices promotional views per platform:
#
#   rate_per_1000 = platform_rate * deadline_multiplier
#   base_cost     = round(views / 1000 * rate_per_1000, 2)
#   service_fee   = round(base_cost * service_fee_rate, 2)   (buyer side only)
#   total_cost    = base_cost + service_fee
#
# The same formula serves both sides: buyers see the total including the
# service fee, influencers see the base cost as their estimated earnings.
#
# A task with several platform targets is priced per platform and the
# breakdowns are summed field by field. Rounding happens per platform
# before the sum, so aggregate totals always equal the sum of the parts.
#
# All money is Decimal, quantized to two places with ROUND_HALF_UP.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Iterable, Mapping

from lib.deadlines import DeadlineOption
from lib.views import parse_view_count

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


class Platform(str, Enum):
    """Social platforms a task can target."""
    YOUTUBE = "YOUTUBE"
    FACEBOOK = "FACEBOOK"
    TIKTOK = "TIKTOK"
    INSTAGRAM = "INSTAGRAM"


# USD per 1,000 views
DEFAULT_PLATFORM_RATES: dict[Platform, Decimal] = {
    Platform.YOUTUBE: Decimal("5"),
    Platform.FACEBOOK: Decimal("3"),
    Platform.TIKTOK: Decimal("4"),
    Platform.INSTAGRAM: Decimal("6"),
}

# Tighter deadlines cost more per view
DEFAULT_DEADLINE_MULTIPLIERS: dict[DeadlineOption, Decimal] = {
    DeadlineOption.THREE_DAYS: Decimal("2"),
    DeadlineOption.ONE_WEEK: Decimal("1.5"),
    DeadlineOption.TWO_WEEKS: Decimal("1.2"),
    DeadlineOption.ONE_MONTH: Decimal("1"),
    DeadlineOption.TWO_MONTHS: Decimal("0.9"),
    DeadlineOption.THREE_MONTHS: Decimal("0.85"),
    DeadlineOption.SIX_MONTHS: Decimal("0.8"),
    DeadlineOption.FLEXIBLE: Decimal("0.75"),
}

DEFAULT_SERVICE_FEE_RATE = Decimal("0.10")


def quantize_money(value: Decimal | int | float | str) -> Decimal:
    """Round a monetary value to two decimal places (half up)."""
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CostBreakdown:
    """Result of pricing one or more platform targets."""
    base_cost: Decimal = ZERO
    service_fee: Decimal = ZERO
    total_cost: Decimal = ZERO

    def __add__(self, other: "CostBreakdown") -> "CostBreakdown":
        if not isinstance(other, CostBreakdown):
            return NotImplemented
        return CostBreakdown(
            base_cost=self.base_cost + other.base_cost,
            service_fee=self.service_fee + other.service_fee,
            total_cost=self.total_cost + other.total_cost,
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "base_cost": float(self.base_cost),
            "service_fee": float(self.service_fee),
            "total_cost": float(self.total_cost),
        }


@dataclass(frozen=True)
class RateTable:
    """
    Pricing parameters.

    Injected into the calculator so rates can come from configuration
    instead of being baked into call sites.
    """
    platform_rates: Mapping[Platform, Decimal] = field(
        default_factory=lambda: dict(DEFAULT_PLATFORM_RATES)
    )
    deadline_multipliers: Mapping[DeadlineOption, Decimal] = field(
        default_factory=lambda: dict(DEFAULT_DEADLINE_MULTIPLIERS)
    )
    service_fee_rate: Decimal = DEFAULT_SERVICE_FEE_RATE

    @classmethod
    def from_overrides(
        cls,
        platform_rates: Mapping[str, float | str] | None = None,
        deadline_multipliers: Mapping[str, float | str] | None = None,
        service_fee_rate: float | str | Decimal | None = None,
    ) -> "RateTable":
        """
        Build a table from plain config values, falling back to defaults.

        Keys are platform / deadline strings ("YOUTUBE", "1w"). Unknown keys
        raise ValueError.
        """
        rates = dict(DEFAULT_PLATFORM_RATES)
        for key, value in (platform_rates or {}).items():
            rates[Platform(key)] = Decimal(str(value))

        multipliers = dict(DEFAULT_DEADLINE_MULTIPLIERS)
        for key, value in (deadline_multipliers or {}).items():
            multipliers[DeadlineOption(key)] = Decimal(str(value))

        fee_rate = (
            Decimal(str(service_fee_rate))
            if service_fee_rate is not None
            else DEFAULT_SERVICE_FEE_RATE
        )
        return cls(platform_rates=rates, deadline_multipliers=multipliers, service_fee_rate=fee_rate)

    def rate_per_1000(self, platform: Platform | str, deadline: DeadlineOption | str) -> Decimal:
        """Cost of 1,000 views on a platform at a given urgency."""
        platform = Platform(platform)
        deadline = DeadlineOption(deadline)
        if platform not in self.platform_rates:
            raise ValueError(f"No rate configured for platform {platform.value}")
        if deadline not in self.deadline_multipliers:
            raise ValueError(f"No multiplier configured for deadline {deadline.value}")
        return self.platform_rates[platform] * self.deadline_multipliers[deadline]


DEFAULT_RATES = RateTable()


def calculate_cost(
    platform: Platform | str,
    views: int | str,
    deadline_option: DeadlineOption | str,
    include_service_fee: bool = True,
    rates: RateTable | None = None,
) -> CostBreakdown:
    """
    Price a single platform target.

    Args:
        platform: Target platform
        views: View count, as an int or shorthand string ("10K")
        deadline_option: Delivery urgency
        include_service_fee: True for the buyer's cost, False for the
            influencer's earnings estimate
        rates: Pricing parameters (defaults to DEFAULT_RATES)

    Returns:
        CostBreakdown with base_cost, service_fee and total_cost

    Raises:
        ValueError: If platform or deadline_option is unknown, or views is
            a negative integer
    """
    rates = rates or DEFAULT_RATES
    rate = rates.rate_per_1000(platform, deadline_option)

    if isinstance(views, int) and not isinstance(views, bool) and views < 0:
        raise ValueError(f"views must be non-negative, got {views}")
    view_count = parse_view_count(views)

    base_cost = quantize_money(Decimal(view_count) / Decimal(1000) * rate)
    service_fee = quantize_money(base_cost * rates.service_fee_rate) if include_service_fee else ZERO

    return CostBreakdown(
        base_cost=base_cost,
        service_fee=service_fee,
        total_cost=quantize_money(base_cost + service_fee),
    )


def aggregate_costs(breakdowns: Iterable[CostBreakdown]) -> CostBreakdown:
    """Sum breakdowns field by field."""
    total = CostBreakdown()
    for breakdown in breakdowns:
        total = total + breakdown
    return total


def calculate_task_cost(
    targets: Iterable[tuple[Platform | str, int | str, DeadlineOption | str]],
    include_service_fee: bool = True,
    rates: RateTable | None = None,
) -> CostBreakdown:
    """
    Price every (platform, views, deadline) target of a task and sum them.

    Each target is priced and rounded on its own before summation.
    """
    return aggregate_costs(
        calculate_cost(platform, views, deadline, include_service_fee, rates)
        for platform, views, deadline in targets
    )


def convert_to_lkr(amount: Decimal, lkr_per_usd: Decimal | float | str) -> Decimal:
    """Convert a USD amount to LKR at the configured rate."""
    return quantize_money(Decimal(amount) * Decimal(str(lkr_per_usd)))
