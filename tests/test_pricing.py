"""
Tests: seller pricing and stock rules.

Run with:
    pytest tests/test_pricing.py -v
"""

import math

import pytest

from storefront.pricing import (
    SellerBusinessRules,
    calculate_seller_profit,
    validate_profit_margin,
    get_recommended_pricing,
    validate_discount,
    calculate_bulk_pricing,
    evaluate_stock_health,
    describe_rules,
    round_currency,
)


class TestRoundCurrency:
    def test_half_rounds_away_from_zero(self):
        assert round_currency(2.675) == 2.68
        assert round_currency(-2.675) == -2.68
        assert round_currency(1.005) == 1.01
        assert round_currency(0.125) == 0.13

    def test_already_rounded_values_unchanged(self):
        assert round_currency(48.5) == 48.5
        assert round_currency(1177) == 1177

    def test_non_finite_passes_through(self):
        assert round_currency(math.inf) == math.inf
        assert math.isnan(round_currency(math.nan))


class TestSellerProfit:
    def test_profit_after_commission_and_fees(self):
        # 1000 - 100 commission - 600 cost - 50 fees
        assert calculate_seller_profit(1000, 600, 50) == 250

    def test_profitable_sales(self):
        assert calculate_seller_profit(500, 300) == 150
        assert calculate_seller_profit(2000, 1200, 100) == 500

    def test_fractional_profit(self):
        assert calculate_seller_profit(165, 100) == 48.5

    def test_losses_are_not_clamped(self):
        assert calculate_seller_profit(100, 150) == -60
        assert calculate_seller_profit(200, 250, 50) == -120

    def test_zero_and_negative_inputs_do_not_raise(self):
        assert calculate_seller_profit(0, 0) == 0
        assert calculate_seller_profit(-100, 0) == -90

    @pytest.mark.parametrize("selling, cost", [(1000, 0), (2500, 10), (99.99, 12.34), (7, 3)])
    def test_matches_ninety_percent_minus_cost(self, selling, cost):
        assert calculate_seller_profit(selling, cost, 0) == pytest.approx(round(selling * 0.9 - cost, 2))

    def test_custom_rules(self):
        rules = SellerBusinessRules(commission_rate=0.2)
        assert calculate_seller_profit(100, 50, rules=rules) == 30


class TestProfitMargin:
    def test_exact_minimum_margin_is_valid(self):
        assert validate_profit_margin(1000, 850) is True

    def test_just_below_minimum_margin(self):
        assert validate_profit_margin(1000, 851) is False

    def test_healthy_margins(self):
        assert validate_profit_margin(1000, 750) is True
        assert validate_profit_margin(2000, 1400) is True
        assert validate_profit_margin(500, 250) is True

    def test_thin_margins_rejected(self):
        assert validate_profit_margin(1000, 900) is False
        assert validate_profit_margin(500, 430) is False
        assert validate_profit_margin(100, 100) is False
        assert validate_profit_margin(100, 150) is False

    def test_invalid_inputs(self):
        assert validate_profit_margin(0, 10) is False
        assert validate_profit_margin(-5, 0) is False
        assert validate_profit_margin(100, -1) is False

    def test_zero_cost_is_valid(self):
        assert validate_profit_margin(100, 0) is True


class TestRecommendedPricing:
    def test_reference_figures_for_cost_1000(self):
        pricing = get_recommended_pricing(1000)
        assert pricing["minimum_selling_price"] == 1177
        # markup applied to the unrounded 1176.47, not to 1177
        assert pricing["recommended_selling_price"] == 1412
        assert pricing["profit_margin_at_minimum"] == 15
        assert pricing["commission_amount"] == pytest.approx(117.7)
        assert pricing["cost_price"] == 1000
        assert pricing["net_margin_after_commission"] == pytest.approx(5.04)
        assert "error" not in pricing

    def test_reference_figures_for_cost_800(self):
        pricing = get_recommended_pricing(800)
        assert pricing["minimum_selling_price"] == 942
        assert pricing["recommended_selling_price"] == 1130

    def test_minimum_price_always_passes_margin_check(self):
        for cost in (1, 99, 250, 600, 1000, 1234.56):
            minimum = get_recommended_pricing(cost)["minimum_selling_price"]
            assert validate_profit_margin(minimum, cost)

    @pytest.mark.parametrize("cost", [0, -10])
    def test_invalid_cost(self, cost):
        pricing = get_recommended_pricing(cost)
        assert pricing["error"] == "Invalid cost price"
        assert pricing["minimum_selling_price"] == 0
        assert pricing["recommended_selling_price"] == 0
        assert pricing["profit_margin_at_minimum"] == 0
        assert pricing["commission_amount"] == 0

    @pytest.mark.parametrize("cost", [math.inf, 1.7e308])
    def test_overflowing_cost_does_not_raise(self, cost):
        pricing = get_recommended_pricing(cost)
        assert pricing["minimum_selling_price"] == math.inf
        assert pricing["recommended_selling_price"] == math.inf

    def test_nan_cost_does_not_raise(self):
        pricing = get_recommended_pricing(math.nan)
        assert math.isnan(pricing["minimum_selling_price"])


class TestDiscountValidation:
    def test_discount_within_limit_and_profitable(self):
        validation = validate_discount(1000, 600, 500)
        assert validation["is_valid"] is True
        assert validation["discount_percentage"] == 40
        assert validation["max_allowed_discount"] == 500
        assert validation["violates"] is False
        assert validation["platform_commission"] == 60
        assert validation["seller_receives_after_commission"] == 540
        assert validation["net_profit_after_discount"] == 40
        assert validation["profitability_warning"] is None

    def test_excessive_discount_rejected(self):
        validation = validate_discount(1000, 400)
        assert validation["is_valid"] is False
        assert validation["discount_percentage"] == 60
        assert validation["violates"] is True

    def test_exactly_fifty_percent_is_allowed(self):
        validation = validate_discount(1000, 500)
        assert validation["is_valid"] is True
        assert validation["violates"] is False

    def test_no_discount(self):
        validation = validate_discount(1000, 1000)
        assert validation["is_valid"] is True
        assert validation["discount_percentage"] == 0

    def test_price_increase_passes_limit_check(self):
        validation = validate_discount(1000, 1100)
        assert validation["discount_percentage"] == -10
        assert validation["violates"] is False
        assert validation["is_valid"] is True

    def test_unprofitable_discount_flagged(self):
        validation = validate_discount(1000, 900, 800)
        assert validation["violates"] is False
        assert validation["profitable_after_discount"] is False
        assert validation["is_valid"] is False
        assert validation["profitability_warning"] == "Discount may make this item unprofitable"
        assert validation["net_profit_after_discount"] == 10

    def test_zero_cost_skips_profitability(self):
        validation = validate_discount(1000, 700)
        assert validation["profitable_after_discount"] is True
        assert validation["net_profit_after_discount"] is None
        assert validation["profitability_warning"] is None

    @pytest.mark.parametrize("original, discounted", [(0, 100), (100, 0), (-1, 50)])
    def test_invalid_prices(self, original, discounted):
        validation = validate_discount(original, discounted)
        assert validation["is_valid"] is False
        assert validation["violates"] is True
        assert validation["error"] == "Invalid prices"


class TestBulkPricing:
    def test_no_discount_below_threshold(self):
        bulk = calculate_bulk_pricing(100, 8)
        assert bulk["discounted_total"] == 800
        assert bulk["discount_rate"] == 0
        assert bulk["effective_unit_price"] == 100
        assert bulk["savings"] == 0

    def test_first_tier_at_threshold(self):
        bulk = calculate_bulk_pricing(100, 10)
        assert bulk["original_total"] == 1000
        assert bulk["discounted_total"] == 950
        assert bulk["discount_rate"] == 5
        assert bulk["savings"] == 50
        assert bulk["effective_unit_price"] == 95
        assert bulk["quantity"] == 10
        assert bulk["total_commission"] == 95
        assert bulk["seller_receives"] == 855

    def test_second_tier(self):
        bulk = calculate_bulk_pricing(100, 25)
        assert bulk["discounted_total"] == 2250
        assert bulk["discount_rate"] == 10

    @pytest.mark.parametrize("quantity, rate", [(9, 0), (10, 5), (19, 5), (20, 10), (29, 10), (30, 15), (500, 15)])
    def test_tier_boundaries(self, quantity, rate):
        assert calculate_bulk_pricing(100, quantity)["discount_rate"] == rate

    @pytest.mark.parametrize("price, quantity", [(0, 10), (100, 0), (-5, 3)])
    def test_invalid_input(self, price, quantity):
        bulk = calculate_bulk_pricing(price, quantity)
        assert bulk["error"] == "Invalid pricing or quantity"
        assert bulk["discounted_total"] == 0
        assert bulk["effective_unit_price"] == 0


class TestStockHealth:
    def test_healthy_stock(self):
        health = evaluate_stock_health(100, 5)
        assert health["days_remaining"] == 20
        assert health["is_low_stock"] is False
        assert health["urgency"] == "normal"
        assert health["recommendation"] == "Continue selling normally"
        assert health["reorder_urgency"] == "normal"
        assert health["profit_impact"] == "neutral"
        assert health["stockout_risk"] == "low"

    def test_low_stock(self):
        health = evaluate_stock_health(5, 2)
        assert health["is_low_stock"] is True
        assert health["is_critical_stock"] is False
        assert health["urgency"] == "warning"
        assert health["recommendation"] == "Prepare reorder, reduce marketing spend, prioritize fast-selling items"
        assert health["reorder_urgency"] == "high"
        assert health["days_remaining"] == 3
        assert health["stockout_risk"] == "high"

    def test_critical_stock(self):
        health = evaluate_stock_health(2, 3)
        assert health["is_critical_stock"] is True
        assert health["urgency"] == "critical"
        assert health["recommendation"] == "Stop advertising, sell remaining stock immediately"
        assert health["reorder_urgency"] == "immediate"
        assert health["profit_impact"] == "high_risk"

    def test_critical_check_precedes_coverage(self):
        # no sales at all, but almost out of stock
        assert evaluate_stock_health(0, 0)["reorder_urgency"] == "immediate"
        assert evaluate_stock_health(3, 0)["reorder_urgency"] == "high"

    def test_two_weeks_of_cover_is_medium(self):
        health = evaluate_stock_health(28, 2)
        assert health["days_remaining"] == 14
        assert health["reorder_urgency"] == "medium"
        assert health["stockout_risk"] == "low"

    def test_ten_days_is_moderate_risk(self):
        health = evaluate_stock_health(30, 3)
        assert health["reorder_urgency"] == "medium"
        assert health["stockout_risk"] == "moderate"

    def test_overstock(self):
        health = evaluate_stock_health(100, 1)
        assert health["urgency"] == "warning"
        assert health["reorder_urgency"] == "low"
        assert health["profit_impact"] == "opportunity"

    def test_sixty_days_is_still_normal(self):
        assert evaluate_stock_health(60, 1)["reorder_urgency"] == "normal"

    def test_zero_sales(self):
        health = evaluate_stock_health(10, 0)
        assert health["days_remaining"] is None
        assert health["reorder_urgency"] == "low"
        assert health["estimated_reorder_point"] == 30
        assert health["stockout_risk"] == "low"

    def test_reorder_point_is_thirty_days_of_sales(self):
        assert evaluate_stock_health(100, 3)["estimated_reorder_point"] == 90
        assert evaluate_stock_health(50, 2)["estimated_reorder_point"] == 60
        assert evaluate_stock_health(10, 1)["estimated_reorder_point"] == 30
        assert evaluate_stock_health(10, 0.5)["estimated_reorder_point"] == 15

    def test_infinite_sales_rate_does_not_raise(self):
        health = evaluate_stock_health(10, math.inf)
        assert health["days_remaining"] == 0
        assert health["reorder_urgency"] == "medium"
        assert health["stockout_risk"] == "high"
        assert health["estimated_reorder_point"] == math.inf

    def test_stock_value_and_revenue(self):
        health = evaluate_stock_health(100, 3, 200)
        assert health["stock_value"] == 20000
        assert health["run_rate"] == 3
        assert health["revenue_run_rate"] == pytest.approx(690)

    @pytest.mark.parametrize("stock, sales", [(-1, 2), (10, -1)])
    def test_invalid_input(self, stock, sales):
        health = evaluate_stock_health(stock, sales)
        assert health["error"] == "Invalid stock or sales data"
        assert health["urgency"] == "unknown"
        assert health["days_remaining"] is None


class TestDescribeRules:
    def test_lists_constants_and_tiers(self):
        rules = describe_rules()
        assert rules["constants"]["commission_rate"] == 0.10
        assert rules["constants"]["minimum_profit_margin"] == 0.15
        assert [tier["min_quantity"] for tier in rules["bulk_tiers"]] == [30, 20, 10]
        assert len(rules["stock_tiers"]) == 5

    def test_reflects_custom_rules(self):
        rules = describe_rules(SellerBusinessRules(bulk_discount_threshold=5))
        assert [tier["min_quantity"] for tier in rules["bulk_tiers"]] == [15, 10, 5]
