"""Storefront seller business rules and product search."""

from .pricing import (
    SellerBusinessRules,
    SELLER_BUSINESS_RULES,
    round_currency,
    calculate_seller_profit,
    validate_profit_margin,
    get_recommended_pricing,
    validate_discount,
    calculate_bulk_pricing,
    evaluate_stock_health,
    describe_rules,
)
from .search import levenshtein_distance, fuzzy_match, search_products
from .catalog import query_products, product_matches_category
from .admin import (
    PlatformRules,
    PLATFORM_RULES,
    validate_vendor_application,
    validate_coupon_request,
    calculate_coupon_savings_potential,
    analyze_platform_performance,
    validate_dispute_resolution,
    assess_fraud_risk,
)

__version__ = "1.0.0"
