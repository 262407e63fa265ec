"""
Storefront Admin Module - Platform Business Rules

RULES (Deterministic, No Side Effects):
=======================================

Vendor applications (score starts at 100):
    no business license        →  -25
    no tax id                  →  -20
    no address proof           →  -15
    fewer than 3 samples       →  -10
    expected revenue < 50,000  →  -15
    background issues          →  -50 (floored at 0)
    approved  = score >= 70 and fewer than 3 issues
    risk      = low (>= 85) / medium (>= 70) / high

Coupons:
    percentage  <= 30%
    fixed       <= 10,000
    max uses    >= 1
    min purchase <= 50,000
    validity    1 to 365 days
    approval    auto (valid, <= 100 uses) / manual (<= 1000 uses) / deny

Disputes (refund share of order value):
    quality           →  50% above 5,000 (high), else 30%
    shipping_delayed  →  10%, capped at 200 (low)
    product_mismatch  →  100% (high)
    missing_item      →  20% plus reship
    anything else     →  escalate to management (high)

Fraud score (clamped to 0-100):
    repeat disputer +25, vendor with clean record +20,
    claim within 2 days +15, new account +10,
    photo evidence -30, third party verification -20
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from .pricing import round_currency

logger = logging.getLogger(__name__)


# ========== PLATFORM RULE CONSTANTS ==========

@dataclass(frozen=True)
class PlatformRules:
    """Read-only parameters for admin decisions."""
    max_coupon_discount: float = 0.30
    max_fixed_coupon: float = 10000
    max_coupon_min_purchase: float = 50000
    max_coupon_validity_days: int = 365
    auto_approve_coupon_uses: int = 100
    manual_approve_coupon_uses: int = 1000
    default_order_value: float = 2000
    quality_inspection_cycles: int = 30   # days


PLATFORM_RULES = PlatformRules()

# (application field, issue, penalty) for required documents
VENDOR_DOCUMENTS = (
    ('business_license', 'Missing business license', 25),
    ('tax_id', 'Missing tax identification', 20),
    ('address_proof', 'Missing address verification', 15),
)
MIN_SAMPLE_PRODUCTS = 3
SAMPLE_PENALTY = 10
MIN_EXPECTED_REVENUE = 50000
REVENUE_PENALTY = 15
BACKGROUND_PENALTY = 50
VENDOR_APPROVAL_SCORE = 70
VENDOR_LOW_RISK_SCORE = 85
VENDOR_MAX_ISSUES = 3

# Performance targets (percent)
TARGET_REVENUE_GROWTH = 5
TARGET_PROFIT_MARGIN = 15
CHARGEBACK_ALERT_RATE = 1
CHARGEBACK_HIGH_RATE = 1.5
CHARGEBACK_MEDIUM_RATE = 0.8
VENDOR_CHURN_ALERT_RATE = 20

# (flag, points) contributing to the fraud score
FRAUD_FACTORS = (
    ('customer_has_multiple_disputes', 25),
    ('vendor_has_no_prior_complaints', 20),
    ('photo_evidence_provided', -30),
    ('third_party_verification', -20),
    ('customer_account_new', 10),
)
QUICK_CLAIM_DAYS = 2
QUICK_CLAIM_POINTS = 15
FRAUD_HIGH_SCORE = 70
FRAUD_MEDIUM_SCORE = 40
FRAUD_INVESTIGATION_SCORE = 30
FRAUD_ESCALATION_SCORE = 60
FRAUD_DENIAL_SCORE = 80

DISPUTE_RESOLUTION_TIMEFRAME = '7 days'
SHIPPING_DELAY_REFUND_CAP = 200
SHIPPING_DELAY_GRACE_DAYS = 7
HIGH_VALUE_ORDER = 5000


# ========== VENDOR APPLICATIONS ==========

def validate_vendor_application(
    application: Optional[dict],
    *,
    rules: PlatformRules = PLATFORM_RULES
) -> dict:
    """
    Score a vendor application for marketplace access.

    Fields that are absent are not penalised, except the documents,
    which must be present and truthy.

    Args:
        application (dict): business_license, tax_id, address_proof,
            sample_products, expected_revenue, background_issues

    Returns:
        dict: {'is_approved', 'score', 'risk_level', 'issues', 'recommendations'}
    """
    application = application if isinstance(application, dict) else {}
    issues = []
    score = 100

    for field, issue, penalty in VENDOR_DOCUMENTS:
        if not application.get(field):
            issues.append(issue)
            score -= penalty

    samples = application.get('sample_products')
    if samples is not None and len(samples) < MIN_SAMPLE_PRODUCTS:
        issues.append(f"Insufficient product samples (minimum {MIN_SAMPLE_PRODUCTS} required)")
        score -= SAMPLE_PENALTY

    expected_revenue = application.get('expected_revenue')
    if expected_revenue is not None and expected_revenue < MIN_EXPECTED_REVENUE:
        issues.append('Business plan shows insufficient revenue potential')
        score -= REVENUE_PENALTY

    if application.get('background_issues'):
        issues.append('Background check issues detected')
        score = max(0, score - BACKGROUND_PENALTY)

    is_approved = score >= VENDOR_APPROVAL_SCORE and len(issues) < VENDOR_MAX_ISSUES
    if score >= VENDOR_LOW_RISK_SCORE:
        risk_level = 'low'
    elif score >= VENDOR_APPROVAL_SCORE:
        risk_level = 'medium'
    else:
        risk_level = 'high'

    if is_approved:
        recommendations = [
            'Monitor sales closely first 30 days',
            f"Complete quality inspection within {rules.quality_inspection_cycles} days"
        ]
    else:
        recommendations = [
            'Re-submit with missing documentation',
            'Address flagged issues',
            'Consider re-evaluation in 90 days'
        ]

    logger.debug("Vendor application scored %d with %d issues", score, len(issues))
    return {
        'is_approved': is_approved,
        'score': score,
        'risk_level': risk_level,
        'issues': issues,
        'recommendations': recommendations
    }


# ========== COUPONS ==========

def _as_datetime(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value:
        try:
            moment = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return None
    else:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def calculate_coupon_savings_potential(
    coupon: Optional[dict],
    *,
    rules: PlatformRules = PLATFORM_RULES
) -> float:
    """Average shopper saving per use of a coupon."""
    if not isinstance(coupon, dict) or not coupon.get('discount_type'):
        return 0

    value = coupon.get('value') or 0
    if coupon['discount_type'] == 'percentage':
        order_value = coupon.get('estimated_avg_order_value') or rules.default_order_value
        return order_value * (value / 100)
    if coupon['discount_type'] == 'fixed':
        return value
    return 0


def validate_coupon_request(
    coupon: Optional[dict],
    *,
    rules: PlatformRules = PLATFORM_RULES
) -> dict:
    """
    Check a coupon configuration against platform limits.

    Args:
        coupon (dict): discount_type ('percentage' or 'fixed'), value,
            max_uses, min_purchase, start_date, expiry_date, category,
            estimated_avg_order_value

    Returns:
        dict: {'is_valid', 'issues', 'risk_assessment'}
    """
    if not isinstance(coupon, dict):
        return {
            'is_valid': False,
            'issues': ['Invalid coupon request data'],
            'risk_assessment': {
                'category': 'general',
                'potential_savings_per_use': 0,
                'estimated_total_benefit': 0,
                'recommended_approval': 'deny'
            }
        }

    issues = []
    discount_type = coupon.get('discount_type')
    value = coupon.get('value') or 0
    max_uses = coupon.get('max_uses')
    min_purchase = coupon.get('min_purchase')

    if discount_type == 'percentage' and value > rules.max_coupon_discount * 100:
        issues.append(f"Discount exceeds maximum allowed ({rules.max_coupon_discount * 100:g}%)")

    if discount_type == 'fixed' and value > rules.max_fixed_coupon:
        issues.append(f"Fixed discount amount too high (max ₹{rules.max_fixed_coupon:,.0f})")

    if max_uses is not None and max_uses < 1:
        issues.append('Maximum uses must be at least 1')

    if min_purchase is not None and min_purchase > rules.max_coupon_min_purchase:
        issues.append(f"Minimum purchase requirement too high (max ₹{rules.max_coupon_min_purchase:,.0f})")

    start = _as_datetime(coupon.get('start_date'))
    expiry = _as_datetime(coupon.get('expiry_date'))
    if start and expiry:
        duration = math.ceil((expiry - start).total_seconds() / 86400)
        if duration > rules.max_coupon_validity_days:
            issues.append('Coupon validity period too long (max 1 year)')
        if duration < 1:
            issues.append('Coupon validity period too short (minimum 1 day)')
        if duration <= 0:
            issues.append('Expiry date must be after start date')
    else:
        issues.append('Start and expiry dates are required')

    is_valid = not issues
    savings_per_use = calculate_coupon_savings_potential(coupon, rules=rules)

    if is_valid and max_uses is not None and max_uses <= rules.auto_approve_coupon_uses:
        recommended_approval = 'auto'
    elif max_uses is not None and max_uses <= rules.manual_approve_coupon_uses:
        recommended_approval = 'manual'
    else:
        recommended_approval = 'deny'

    return {
        'is_valid': is_valid,
        'issues': issues,
        'risk_assessment': {
            'category': coupon.get('category') or 'general',
            'potential_savings_per_use': savings_per_use,
            'estimated_total_benefit': (max_uses or 0) * savings_per_use,
            'recommended_approval': recommended_approval
        }
    }


# ========== PLATFORM PERFORMANCE ==========

def _metric(period_data: dict, section: str, key: str) -> float:
    values = period_data.get(section)
    if not isinstance(values, dict):
        return 0
    return values.get(key) or 0


def _percent(part: float, whole: float) -> float:
    return round_currency(part / whole * 100) if whole > 0 else 0


def calculate_growth_rate(previous: float, current: float) -> float:
    """Period over period growth in percent, 2 decimals."""
    if previous == 0:
        return 100 if current > 0 else 0
    return round_currency((current - previous) / previous * 100)


def _platform_recommendations(revenue_growth, profit_margin, chargeback_rate, vendor_churn_rate):
    recommendations = []
    if revenue_growth < TARGET_REVENUE_GROWTH:
        recommendations.append('Revenue growth below target - implement marketing initiatives')
    if profit_margin < TARGET_PROFIT_MARGIN:
        recommendations.append('Profit margins below target - review commission rates or costs')
    if chargeback_rate > CHARGEBACK_ALERT_RATE:
        recommendations.append('Chargeback rate concerning - enhance fraud prevention')
    if vendor_churn_rate > VENDOR_CHURN_ALERT_RATE:
        recommendations.append('Vendor churn elevated - improve vendor support programs')
    if not recommendations:
        recommendations.append('Platform performance satisfactory - continue current strategy')
    return recommendations


def analyze_platform_performance(period_data: Optional[dict]) -> dict:
    """
    Financial, operational and risk metrics for a reporting period.

    Args:
        period_data (dict): Nested sections
            revenue.total, revenue.previous_period, commission.total,
            transactions.count, vendors.active, vendors.left,
            costs.operations (per transaction), chargebacks.count

    Returns:
        dict: {'financials', 'operations', 'risks', 'recommendations'}
    """
    if not isinstance(period_data, dict):
        return {
            'error': 'Invalid period data',
            'financials': {'total_revenue': 0},
            'operations': {'transaction_count': 0},
            'risks': {'risk_level': 'unknown'},
            'recommendations': ['Please provide valid period data']
        }

    total_revenue = _metric(period_data, 'revenue', 'total')
    previous_revenue = _metric(period_data, 'revenue', 'previous_period')
    total_commission = _metric(period_data, 'commission', 'total')
    transaction_count = _metric(period_data, 'transactions', 'count')
    vendor_count = _metric(period_data, 'vendors', 'active')
    vendors_left = _metric(period_data, 'vendors', 'left')
    cost_per_transaction = _metric(period_data, 'costs', 'operations')
    chargeback_count = _metric(period_data, 'chargebacks', 'count')

    revenue_growth = calculate_growth_rate(previous_revenue, total_revenue)
    operational_costs = cost_per_transaction * transaction_count
    net_profit = total_commission - operational_costs
    profit_margin = _percent(net_profit, total_revenue)

    chargeback_rate = _percent(chargeback_count, transaction_count)
    vendor_churn_rate = _percent(vendors_left, vendor_count)

    if chargeback_rate > CHARGEBACK_HIGH_RATE:
        risk_level = 'high'
    elif chargeback_rate > CHARGEBACK_MEDIUM_RATE:
        risk_level = 'medium'
    else:
        risk_level = 'low'

    return {
        'financials': {
            'total_revenue': total_revenue,
            'net_profit': net_profit,
            'profit_margin': profit_margin,
            'commission_margin': _percent(total_commission, total_revenue),
            'revenue_growth': revenue_growth
        },
        'operations': {
            'transaction_count': transaction_count,
            'average_order_value': (
                round_currency(total_revenue / transaction_count) if transaction_count > 0 else 0
            ),
            'revenue_per_vendor': round_currency(total_revenue / vendor_count) if vendor_count > 0 else 0,
            'vendor_count': vendor_count
        },
        'risks': {
            'chargeback_rate': chargeback_rate,
            'vendor_churn_rate': vendor_churn_rate,
            'operational_costs': operational_costs,
            'risk_level': risk_level
        },
        'recommendations': _platform_recommendations(
            revenue_growth, profit_margin, chargeback_rate, vendor_churn_rate
        )
    }


# ========== DISPUTES & FRAUD ==========

def assess_fraud_risk(dispute: Optional[dict]) -> dict:
    """
    Score how suspicious a dispute claim looks.

    Returns:
        dict: {'score', 'risk_level', 'requires_investigation', 'automatic_denial'}
    """
    dispute = dispute if isinstance(dispute, dict) else {}
    score = 0
    for flag, points in FRAUD_FACTORS:
        if dispute.get(flag):
            score += points

    dispute_age = dispute.get('dispute_age')
    if dispute_age is not None and dispute_age < QUICK_CLAIM_DAYS:
        score += QUICK_CLAIM_POINTS

    if score >= FRAUD_HIGH_SCORE:
        risk_level = 'high'
    elif score >= FRAUD_MEDIUM_SCORE:
        risk_level = 'medium'
    else:
        risk_level = 'low'

    final_score = min(max(score, 0), 100)
    return {
        'score': final_score,
        'risk_level': risk_level,
        'requires_investigation': final_score > FRAUD_INVESTIGATION_SCORE,
        'automatic_denial': final_score > FRAUD_DENIAL_SCORE
    }


def validate_dispute_resolution(dispute: Optional[dict]) -> dict:
    """
    Recommended action and refund for an order dispute.

    The refund never exceeds the order value, and a fraud score above
    80 turns any claim into a denial.

    Args:
        dispute (dict): type, order_value, days_since_order and the
            fraud flags read by assess_fraud_risk

    Returns:
        dict: Action, refund, priority, timeframe and fraud assessment
    """
    if not isinstance(dispute, dict):
        return {
            'error': 'Invalid dispute data',
            'recommended_action': 'investigate',
            'refund_amount': 0,
            'priority': 'low',
            'escalation_required': False
        }

    issue_type = dispute.get('type') or 'general'
    order_value = dispute.get('order_value') or 0
    days_since_order = dispute.get('days_since_order') or 0

    if issue_type == 'quality':
        if order_value > HIGH_VALUE_ORDER:
            priority = 'high'
            refund_amount = order_value * 0.5
        else:
            priority = 'medium'
            refund_amount = order_value * 0.3
        recommended_action = 'partial_refund'
    elif issue_type == 'shipping_delayed':
        priority = 'low'
        refund_amount = min(order_value * 0.1, SHIPPING_DELAY_REFUND_CAP)
        recommended_action = (
            'small_refund' if days_since_order > SHIPPING_DELAY_GRACE_DAYS else 'shipping_credit'
        )
    elif issue_type == 'product_mismatch':
        priority = 'high'
        refund_amount = order_value
        recommended_action = 'full_refund'
    elif issue_type == 'missing_item':
        priority = 'medium'
        refund_amount = order_value * 0.2
        recommended_action = 'partial_refund_reship'
    else:
        priority = 'high'
        refund_amount = 0
        recommended_action = 'escalate_to_management'

    fraud_risk = assess_fraud_risk(dispute)
    if fraud_risk['score'] > FRAUD_DENIAL_SCORE:
        recommended_action = 'deny'
        refund_amount = 0

    logger.debug(
        "Dispute %s resolved as %s (fraud score %d)",
        issue_type, recommended_action, fraud_risk['score']
    )
    return {
        'recommended_action': recommended_action,
        'refund_amount': round_currency(min(refund_amount, order_value)),
        'priority': priority,
        'resolution_timeframe': DISPUTE_RESOLUTION_TIMEFRAME,
        'fraud_risk': fraud_risk,
        'escalation_required': priority == 'high' or fraud_risk['score'] > FRAUD_ESCALATION_SCORE
    }
