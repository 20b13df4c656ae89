# =============================================================================
# tests/test_pricing.py - Cost Calculator Tests
# =============================================================================
# Run with: pytest tests/test_pricing.py -v
# =============================================================================

from decimal import Decimal
from itertools import product

import pytest

from lib.deadlines import DeadlineOption
from lib.pricing import (
    DEFAULT_DEADLINE_MULTIPLIERS,
    DEFAULT_PLATFORM_RATES,
    CostBreakdown,
    Platform,
    RateTable,
    aggregate_costs,
    calculate_cost,
    calculate_task_cost,
    convert_to_lkr,
    quantize_money,
)


class TestCalculateCost:
    """Tests for single-platform pricing."""

    def test_youtube_one_week(self):
        """Test 10K YouTube views in a week: 10 x 5 x 1.5."""
        cost = calculate_cost(Platform.YOUTUBE, 10_000, DeadlineOption.ONE_WEEK)

        assert cost.base_cost == Decimal("75.00")
        assert cost.service_fee == Decimal("7.50")
        assert cost.total_cost == Decimal("82.50")

    def test_tiktok_flexible(self):
        """Test 5K TikTok views with a flexible deadline."""
        cost = calculate_cost("TIKTOK", 5_000, "flexible")

        assert cost == CostBreakdown(Decimal("15.00"), Decimal("1.50"), Decimal("16.50"))

    def test_shorthand_views(self):
        """Test that string view counts are parsed before pricing."""
        assert calculate_cost("YOUTUBE", "10K", "1w") == calculate_cost("YOUTUBE", 10_000, "1w")

    def test_zero_views_cost_nothing(self):
        cost = calculate_cost(Platform.INSTAGRAM, 0, DeadlineOption.THREE_DAYS)
        assert cost == CostBreakdown()

    def test_without_service_fee(self):
        """Test the influencer earnings estimate (no service fee)."""
        cost = calculate_cost(Platform.FACEBOOK, 20_000, DeadlineOption.ONE_MONTH, include_service_fee=False)

        assert cost.base_cost == Decimal("60.00")
        assert cost.service_fee == Decimal("0.00")
        assert cost.total_cost == cost.base_cost

    def test_negative_views_rejected(self):
        with pytest.raises(ValueError):
            calculate_cost(Platform.YOUTUBE, -100, DeadlineOption.ONE_WEEK)

    def test_unknown_platform_rejected(self):
        with pytest.raises(ValueError):
            calculate_cost("MYSPACE", 1000, DeadlineOption.ONE_WEEK)

    def test_unknown_deadline_rejected(self):
        with pytest.raises(ValueError):
            calculate_cost(Platform.YOUTUBE, 1000, "tomorrow")

    def test_fee_is_rounded_half_up(self):
        """Test that half a cent in the base cost rounds up."""
        # 25 views on YouTube, 1 month: 0.125 -> 0.13 base, fee 0.013 -> 0.01
        cost = calculate_cost(Platform.YOUTUBE, 25, DeadlineOption.ONE_MONTH)
        assert cost.base_cost == Decimal("0.13")
        assert cost.service_fee == Decimal("0.01")


class TestAggregateCosts:
    """Tests for multi-platform tasks."""

    def test_two_platforms(self):
        """Test that breakdowns sum field by field."""
        total = aggregate_costs([
            calculate_cost(Platform.YOUTUBE, 10_000, DeadlineOption.ONE_WEEK),
            calculate_cost(Platform.TIKTOK, 5_000, DeadlineOption.FLEXIBLE),
        ])

        assert total.base_cost == Decimal("90.00")
        assert total.service_fee == Decimal("9.00")
        assert total.total_cost == Decimal("99.00")

    def test_rounding_happens_per_platform(self):
        """Test that totals equal the sum of individually rounded parts."""
        total = calculate_task_cost([
            (Platform.YOUTUBE, 66_666, DeadlineOption.ONE_MONTH),
            (Platform.FACEBOOK, 111_110, DeadlineOption.ONE_MONTH),
            (Platform.INSTAGRAM, 55_555, DeadlineOption.ONE_MONTH),
        ])

        # Each line: base 333.33, fee 33.33, total 366.66
        assert total.base_cost == Decimal("999.99")
        assert total.service_fee == Decimal("99.99")
        assert total.total_cost == Decimal("1099.98")

    def test_empty_is_zero(self):
        assert aggregate_costs([]) == CostBreakdown()

    def test_to_dict(self):
        cost = calculate_cost(Platform.YOUTUBE, 10_000, DeadlineOption.ONE_WEEK)
        assert cost.to_dict() == {"base_cost": 75.0, "service_fee": 7.5, "total_cost": 82.5}


class TestRateTable:
    """Tests for configurable rates."""

    def test_defaults(self):
        assert RateTable().rate_per_1000(Platform.YOUTUBE, DeadlineOption.THREE_DAYS) == Decimal("10")

    def test_platform_override(self):
        """Test that an overridden platform rate is used for pricing."""
        rates = RateTable.from_overrides({"YOUTUBE": "8"})
        cost = calculate_cost(Platform.YOUTUBE, 1_000, DeadlineOption.ONE_MONTH, rates=rates)

        assert cost.base_cost == Decimal("8.00")

    def test_fee_and_multiplier_override(self):
        rates = RateTable.from_overrides(deadline_multipliers={"flexible": 1}, service_fee_rate="0.2")
        cost = calculate_cost(Platform.TIKTOK, 1_000, DeadlineOption.FLEXIBLE, rates=rates)

        assert cost.base_cost == Decimal("4.00")
        assert cost.service_fee == Decimal("0.80")

    def test_unknown_override_key(self):
        with pytest.raises(ValueError):
            RateTable.from_overrides({"SNAPCHAT": 2})


class TestMoneyHelpers:
    """Tests for quantize_money and convert_to_lkr."""

    def test_quantize_half_up(self):
        assert quantize_money("0.005") == Decimal("0.01")
        assert quantize_money(2.675) == Decimal("2.68")

    def test_convert_to_lkr(self):
        assert convert_to_lkr(Decimal("99.00"), 300) == Decimal("29700.00")


VIEW_COUNTS = [1, 25, 999, 1_000, 12_345, 66_666, 1_000_000, 2_500_000]
ALL_RATES = list(product(Platform, DeadlineOption))


class TestPricingProperties:
    """Invariants checked across every platform and deadline."""

    @pytest.mark.parametrize("platform, deadline", ALL_RATES)
    def test_zero_views_cost_nothing(self, platform, deadline):
        assert calculate_cost(platform, 0, deadline) == CostBreakdown()

    @pytest.mark.parametrize("platform, deadline", ALL_RATES)
    @pytest.mark.parametrize("views", VIEW_COUNTS)
    def test_breakdown_adds_up(self, platform, deadline, views):
        """Test base, a 10% fee on the rounded base, and their exact sum."""
        cost = calculate_cost(platform, views, deadline)

        rate = DEFAULT_PLATFORM_RATES[platform] * DEFAULT_DEADLINE_MULTIPLIERS[deadline]
        assert cost.base_cost == quantize_money(Decimal(views) / 1000 * rate)
        assert cost.service_fee == quantize_money(cost.base_cost * Decimal("0.10"))
        assert cost.total_cost == cost.base_cost + cost.service_fee
        for value in (cost.base_cost, cost.service_fee, cost.total_cost):
            assert value.as_tuple().exponent == -2

    @pytest.mark.parametrize("platform, deadline", ALL_RATES)
    @pytest.mark.parametrize("views", VIEW_COUNTS)
    def test_payout_is_base_cost(self, platform, deadline, views):
        payout = calculate_cost(platform, views, deadline, include_service_fee=False)

        assert payout.service_fee == Decimal("0.00")
        assert payout.total_cost == payout.base_cost
        assert payout.base_cost == calculate_cost(platform, views, deadline).base_cost

    @pytest.mark.parametrize("deadline", list(DeadlineOption))
    def test_task_total_is_sum_of_lines(self, deadline):
        targets = [(platform, views, deadline) for platform, views in zip(Platform, VIEW_COUNTS[3:])]
        lines = [calculate_cost(*target) for target in targets]

        total = calculate_task_cost(targets)

        assert total.base_cost == sum(line.base_cost for line in lines)
        assert total.service_fee == sum(line.service_fee for line in lines)
        assert total.total_cost == total.base_cost + total.service_fee
