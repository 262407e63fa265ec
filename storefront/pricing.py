"""
Storefront Pricing Module - Seller Business Rules

RULES (Deterministic, No Side Effects):
=======================================

Platform commission:   10% of the selling price
Minimum profit margin: 15% of the selling price (inclusive)
Maximum discount:      50% of the original price (inclusive)

Recommended pricing:
    minimum     = ceil(cost / (1 - 0.15))
    recommended = ceil(cost / (1 - 0.15) * 1.2)

Bulk pricing tiers (quantity):
    >= 30  →  -15%
    >= 20  →  -10%
    >= 10  →  -5%
    <  10  →   0%

Stock health (first match wins):
    stock <= 2          →  critical, reorder immediately
    stock <= 5          →  warning,  reorder high
    days left <= 14     →  warning,  reorder medium
    days left > 60      →  warning,  reorder low (overstock)
    otherwise           →  normal

Invalid inputs never raise: they come back as a result dict carrying
an 'error' string and zeroed numeric fields.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

logger = logging.getLogger(__name__)


# ========== BUSINESS RULE CONSTANTS ==========

@dataclass(frozen=True)
class SellerBusinessRules:
    """Read-only parameters shared by every pricing calculation."""
    minimum_profit_margin: float = 0.15       # 15%
    maximum_discount_percentage: float = 0.50  # 50%
    minimum_selling_price: float = 50          # informational floor
    commission_rate: float = 0.10             # 10% platform cut
    bulk_discount_threshold: int = 10          # units
    low_stock_threshold: int = 5               # units
    critical_stock_threshold: int = 2          # units
    commission_precision: int = 2              # decimal places


SELLER_BUSINESS_RULES = SellerBusinessRules()

# Comfort markup applied on top of the theoretical minimum price
RECOMMENDED_MARKUP = 1.2

# Bulk tiers as (threshold multiple, discount rate), highest first
BULK_TIERS = (
    (3, 0.15),
    (2, 0.10),
    (1, 0.05),
)

# Stock coverage windows (days)
REORDER_SOON_DAYS = 14
OVERSTOCK_DAYS = 60
REORDER_SUPPLY_DAYS = 30
HIGH_STOCKOUT_RISK_DAYS = 7


def round_currency(value: float, places: int = 2) -> float:
    """
    Round half away from zero to a fixed number of decimal places.

    Uses the shortest decimal representation of the float so that
    values such as 48.5 or 117.65 round the way a cashier would.
    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def ceil_units(value: float):
    """Round up to a whole unit; non-finite values are returned unchanged."""
    if not math.isfinite(value):
        return value
    return math.ceil(value)


# ========== PROFIT & MARGIN ==========

def calculate_seller_profit(
    selling_price: float,
    cost_price: float,
    additional_fees: float = 0,
    *,
    rules: SellerBusinessRules = SELLER_BUSINESS_RULES
) -> float:
    """
    Net profit for the seller after the platform commission.

    Args:
        selling_price (float): Final customer price
        cost_price (float): Seller's acquisition cost
        additional_fees (float): Shipping, packaging, etc.

    Returns:
        float: Profit rounded to 2 decimals. Losses are negative.
    """
    platform_commission = selling_price * rules.commission_rate
    net_after_commission = selling_price - platform_commission
    total_costs = cost_price + additional_fees

    return round_currency(net_after_commission - total_costs, rules.commission_precision)


def validate_profit_margin(
    selling_price: float,
    cost_price: float,
    *,
    rules: SellerBusinessRules = SELLER_BUSINESS_RULES
) -> bool:
    """True when (selling - cost) / selling reaches the minimum margin."""
    if selling_price <= 0 or cost_price < 0:
        return False

    profit_margin = (selling_price - cost_price) / selling_price
    return profit_margin >= rules.minimum_profit_margin


def get_recommended_pricing(
    cost_price: float,
    *,
    rules: SellerBusinessRules = SELLER_BUSINESS_RULES
) -> dict:
    """
    Minimum and recommended selling prices for a given cost.

    The 20% comfort markup is applied to the unrounded minimum, so
    cost 1000 gives minimum 1177 and recommended 1412 (not 1413).

    Args:
        cost_price (float): Seller's acquisition cost

    Returns:
        dict: {
            'minimum_selling_price': int,
            'recommended_selling_price': int,
            'profit_margin_at_minimum': float,
            'commission_amount': float,
            'cost_price': float,
            'net_margin_after_commission': float
        }
    """
    if cost_price <= 0:
        logger.debug("Recommended pricing requested for invalid cost %s", cost_price)
        return {
            'error': 'Invalid cost price',
            'minimum_selling_price': 0,
            'recommended_selling_price': 0,
            'profit_margin_at_minimum': 0,
            'commission_amount': 0
        }

    raw_minimum = cost_price / (1 - rules.minimum_profit_margin)
    minimum_selling_price = ceil_units(raw_minimum)
    recommended_selling_price = ceil_units(raw_minimum * RECOMMENDED_MARKUP)

    commission_amount = round_currency(
        minimum_selling_price * rules.commission_rate,
        rules.commission_precision
    )
    net_margin = (minimum_selling_price - cost_price - commission_amount) / minimum_selling_price * 100

    return {
        'minimum_selling_price': minimum_selling_price,
        'recommended_selling_price': recommended_selling_price,
        'profit_margin_at_minimum': round_currency(rules.minimum_profit_margin * 100),
        'commission_amount': commission_amount,
        'cost_price': cost_price,
        'net_margin_after_commission': round_currency(net_margin)
    }


# ========== DISCOUNTS ==========

def validate_discount(
    original_price: float,
    discounted_price: float,
    cost_price: float = 0,
    *,
    rules: SellerBusinessRules = SELLER_BUSINESS_RULES
) -> dict:
    """
    Check a discount against the maximum discount and profitability.

    A discounted price above the original gives a negative discount
    percentage, which passes the limit check.

    Args:
        original_price (float): Regular selling price
        discounted_price (float): Price after discount
        cost_price (float): Seller cost; 0 skips the profitability check

    Returns:
        dict: Validation result with commission and profit breakdown
    """
    if original_price <= 0 or discounted_price <= 0:
        logger.debug(
            "Discount validation rejected prices %s -> %s",
            original_price, discounted_price
        )
        return {
            'is_valid': False,
            'discount_percentage': 0,
            'max_allowed_discount': 0,
            'violates': True,
            'error': 'Invalid prices'
        }

    discount_percentage = round_currency((original_price - discounted_price) / original_price * 100)
    max_allowed_discount = round_currency(original_price * rules.maximum_discount_percentage)

    violates_limit = discount_percentage > rules.maximum_discount_percentage * 100
    remains_profitable = cost_price == 0 or validate_profit_margin(
        discounted_price, cost_price, rules=rules
    )

    platform_commission = round_currency(
        discounted_price * rules.commission_rate,
        rules.commission_precision
    )

    return {
        'is_valid': not violates_limit and remains_profitable,
        'discount_percentage': discount_percentage,
        'max_allowed_discount': max_allowed_discount,
        'violates': violates_limit,
        'profitable_after_discount': remains_profitable,
        'platform_commission': platform_commission,
        'seller_receives_after_commission': round_currency(discounted_price - platform_commission),
        'net_profit_after_discount': (
            round_currency(discounted_price - platform_commission - cost_price)
            if cost_price > 0 else None
        ),
        'profitability_warning': (
            'Discount may make this item unprofitable'
            if cost_price > 0 and not remains_profitable else None
        )
    }


def calculate_bulk_pricing(
    base_price: float,
    quantity: int,
    *,
    rules: SellerBusinessRules = SELLER_BUSINESS_RULES
) -> dict:
    """
    Tiered quantity discount with the seller's share after commission.

    Args:
        base_price (float): Unit price
        quantity (int): Total units

    Returns:
        dict: {
            'original_total': float,
            'discounted_total': float,
            'savings': float,
            'discount_rate': float,   # percent
            'effective_unit_price': float,
            'quantity': int,
            'total_commission': float,
            'seller_receives': float
        }
    """
    if base_price <= 0 or quantity <= 0:
        logger.debug("Bulk pricing rejected price=%s quantity=%s", base_price, quantity)
        return {
            'error': 'Invalid pricing or quantity',
            'original_total': 0,
            'discounted_total': 0,
            'savings': 0,
            'discount_rate': 0,
            'effective_unit_price': 0
        }

    discount_rate = 0.0
    for multiple, rate in BULK_TIERS:
        if quantity >= rules.bulk_discount_threshold * multiple:
            discount_rate = rate
            break

    effective_unit_price = round_currency(base_price * (1 - discount_rate))
    original_total = round_currency(base_price * quantity)
    discounted_total = round_currency(effective_unit_price * quantity)

    return {
        'original_total': original_total,
        'discounted_total': discounted_total,
        'savings': round_currency(original_total - discounted_total),
        'discount_rate': round_currency(discount_rate * 100),
        'effective_unit_price': effective_unit_price,
        'quantity': quantity,
        'total_commission': round_currency(discounted_total * rules.commission_rate),
        'seller_receives': round_currency(discounted_total * (1 - rules.commission_rate))
    }


# ========== STOCK HEALTH ==========

def _stockout_risk(days_remaining) -> str:
    if days_remaining is None:
        return 'low'
    if days_remaining < HIGH_STOCKOUT_RISK_DAYS:
        return 'high'
    if days_remaining < REORDER_SOON_DAYS:
        return 'moderate'
    return 'low'


def evaluate_stock_health(
    current_stock: float,
    daily_sales: float,
    cost_price: float = 0,
    *,
    rules: SellerBusinessRules = SELLER_BUSINESS_RULES
) -> dict:
    """
    Classify inventory coverage and reorder urgency.

    Zero sales velocity means there is no evidence of demand: days
    remaining is reported as None and, unless stock is already low,
    the reorder urgency is 'low'.

    Args:
        current_stock (float): Units on hand
        daily_sales (float): Average units sold per day
        cost_price (float): Unit cost, used for stock value

    Returns:
        dict: Stock evaluation with urgency, reorder point and risk
    """
    if current_stock < 0 or daily_sales < 0:
        logger.debug("Stock health rejected stock=%s sales=%s", current_stock, daily_sales)
        return {
            'error': 'Invalid stock or sales data',
            'urgency': 'unknown',
            'reorder_urgency': 'unknown',
            'recommendation': 'Please verify inventory data',
            'days_remaining': None,
            'estimated_reorder_point': 0,
            'stock_value': 0
        }

    days_left = current_stock / daily_sales if daily_sales > 0 else math.inf
    days_remaining = math.ceil(days_left) if math.isfinite(days_left) else None

    is_low_stock = current_stock <= rules.low_stock_threshold
    is_critical_stock = current_stock <= rules.critical_stock_threshold

    if is_critical_stock:
        urgency = 'critical'
        recommendation = 'Stop advertising, sell remaining stock immediately'
        reorder_urgency = 'immediate'
        profit_impact = 'high_risk'
    elif is_low_stock:
        urgency = 'warning'
        recommendation = 'Prepare reorder, reduce marketing spend, prioritize fast-selling items'
        reorder_urgency = 'high'
        profit_impact = 'moderate_risk'
    elif days_left <= REORDER_SOON_DAYS:
        urgency = 'warning'
        recommendation = 'Monitor closely, plan reorder within 2 weeks'
        reorder_urgency = 'medium'
        profit_impact = 'low_risk'
    elif days_left > OVERSTOCK_DAYS:
        urgency = 'warning'
        recommendation = 'Consider promotions, potentially overstocked'
        reorder_urgency = 'low'
        profit_impact = 'opportunity'
    else:
        urgency = 'normal'
        recommendation = 'Continue selling normally'
        reorder_urgency = 'normal'
        profit_impact = 'neutral'

    estimated_reorder_point = (
        ceil_units(daily_sales * REORDER_SUPPLY_DAYS) if daily_sales > 0 else REORDER_SUPPLY_DAYS
    )
    unit_revenue = cost_price * rules.minimum_profit_margin + cost_price

    return {
        'days_remaining': days_remaining,
        'is_low_stock': is_low_stock,
        'is_critical_stock': is_critical_stock,
        'urgency': urgency,
        'recommendation': recommendation,
        'reorder_urgency': reorder_urgency,
        'estimated_reorder_point': estimated_reorder_point,
        'stock_value': round_currency(current_stock * cost_price),
        'profit_impact': profit_impact,
        'run_rate': daily_sales,
        'stockout_risk': _stockout_risk(days_remaining),
        'revenue_run_rate': round_currency(daily_sales * unit_revenue)
    }


# ========== TRANSPARENCY ==========

def describe_rules(rules: SellerBusinessRules = SELLER_BUSINESS_RULES) -> dict:
    """Every threshold and formula the engine applies, for display."""
    threshold = rules.bulk_discount_threshold
    return {
        'system': 'Storefront Seller Business Rules',
        'method': 'rule_based',
        'constants': {
            'minimum_profit_margin': rules.minimum_profit_margin,
            'maximum_discount_percentage': rules.maximum_discount_percentage,
            'minimum_selling_price': rules.minimum_selling_price,
            'commission_rate': rules.commission_rate,
            'bulk_discount_threshold': threshold,
            'low_stock_threshold': rules.low_stock_threshold,
            'critical_stock_threshold': rules.critical_stock_threshold,
            'commission_precision': rules.commission_precision
        },
        'bulk_tiers': [
            {'min_quantity': threshold * multiple, 'discount_percent': rate * 100}
            for multiple, rate in BULK_TIERS
        ],
        'stock_tiers': [
            {'condition': f"stock <= {rules.critical_stock_threshold}", 'urgency': 'critical', 'reorder': 'immediate'},
            {'condition': f"stock <= {rules.low_stock_threshold}", 'urgency': 'warning', 'reorder': 'high'},
            {'condition': f"days remaining <= {REORDER_SOON_DAYS}", 'urgency': 'warning', 'reorder': 'medium'},
            {'condition': f"days remaining > {OVERSTOCK_DAYS}", 'urgency': 'warning', 'reorder': 'low'},
            {'condition': 'otherwise', 'urgency': 'normal', 'reorder': 'normal'}
        ],
        'formula': {
            'profit': 'Profit = Selling Price × (1 - Commission) - Cost - Fees',
            'margin': 'Margin = (Selling Price - Cost) / Selling Price',
            'minimum_price': 'Minimum = ceil(Cost / (1 - Minimum Margin))',
            'recommended_price': f"Recommended = ceil(Cost / (1 - Minimum Margin) × {RECOMMENDED_MARKUP})",
            'example': 'Cost 1000 → Minimum 1177, Recommended 1412'
        }
    }
