"""
Storefront Backend - Seller Business Rules & Product Search API

This API exposes the deterministic seller pricing rules, the admin
platform rules and the fuzzy product search to the marketplace front end. No I/O happens in the
engines: callers send plain numbers and product records, and get plain
results back.

Rules engine results are wrapped as {"success": bool, "data": {...}}.
Invalid business inputs (non-positive prices, negative stock) are not
HTTP errors: they come back with success=false and the engine's error.

Endpoints:
  GET  /                            - Service index
  GET  /health                      - Service health check
  GET  /rules                       - View all business rules
  POST /api/v1/pricing/profit       - Seller profit after commission
  POST /api/v1/pricing/margin       - Minimum margin check
  POST /api/v1/pricing/recommended  - Minimum and recommended price
  POST /api/v1/pricing/discount     - Discount validation
  POST /api/v1/pricing/bulk         - Bulk pricing tiers
  POST /api/v1/stock/health         - Stock health and reorder urgency
  POST /api/v1/search               - Fuzzy search, filter and sort products
  POST /api/v1/admin/vendor-application - Vendor application review
  POST /api/v1/admin/coupon        - Coupon validation
  POST /api/v1/admin/platform-performance - Platform metrics for a period
  POST /api/v1/admin/dispute       - Dispute resolution
  POST /api/v1/admin/fraud-risk    - Dispute fraud score
"""

import logging
import math
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .admin import (
    validate_vendor_application,
    validate_coupon_request,
    analyze_platform_performance,
    validate_dispute_resolution,
    assess_fraud_risk
)
from .catalog import query_products
from .config import get_settings
from .logging_config import setup_logging
from .models import (
    ProfitRequest, MarginRequest, RecommendedPricingRequest, DiscountRequest,
    BulkPricingRequest, StockHealthRequest, SearchRequest,
    VendorApplicationRequest, CouponRequest, PlatformPeriodRequest, DisputeRequest,
    EngineResponse, SearchResponse, HealthResponse
)
from .pricing import (
    calculate_seller_profit,
    validate_profit_margin,
    get_recommended_pricing,
    validate_discount,
    calculate_bulk_pricing,
    evaluate_stock_health,
    describe_rules,
    SELLER_BUSINESS_RULES
)

logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    debug=settings.DEBUG
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _envelope(result: dict) -> dict:
    if result.get('error'):
        return {"success": False, "error": result['error'], "data": result}
    # JSON has no inf or nan
    if any(isinstance(v, float) and not math.isfinite(v) for v in result.values()):
        logger.warning("Rules engine result out of range: %s", sorted(result))
        return {"success": False, "error": "Result out of range", "data": None}
    return {"success": True, "data": result}


# ========== ROOT ENDPOINT ==========

@app.get("/")
def root():
    """API root"""
    return {
        "message": settings.APP_NAME,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "endpoints": {
            "pricing": "/api/v1/pricing",
            "stock": "/api/v1/stock/health",
            "search": "/api/v1/search",
            "admin": "/api/v1/admin",
            "rules": "/rules",
            "health": "/health"
        }
    }


# ========== HEALTH CHECK ==========

@app.get("/health", response_model=HealthResponse)
def health_check() -> dict:
    """Health check endpoint"""
    return {
        "status": "operational",
        "service": settings.APP_NAME,
        "timestamp": datetime.now(timezone.utc),
        "environment": settings.ENVIRONMENT
    }


# ========== RULES ENDPOINT ==========

@app.get("/rules")
def get_business_rules() -> dict:
    """
    Get all seller business rules and thresholds.
    Sellers can see exactly how every figure is calculated.
    """
    return describe_rules()


# ========== PRICING ENDPOINTS ==========

@app.post("/api/v1/pricing/profit", response_model=EngineResponse)
def seller_profit(request: ProfitRequest) -> dict:
    """
    Net profit after the 10% platform commission.

    Request body:
    {"selling_price": 1000, "cost_price": 600, "additional_fees": 50}

    Response:
    {"success": true, "data": {"profit": 250.0, ...}}
    """
    profit = calculate_seller_profit(
        request.selling_price,
        request.cost_price,
        request.additional_fees
    )
    return _envelope({
        "profit": profit,
        "is_loss": profit < 0,
        "selling_price": request.selling_price,
        "cost_price": request.cost_price,
        "additional_fees": request.additional_fees
    })


@app.post("/api/v1/pricing/margin", response_model=EngineResponse)
def profit_margin(request: MarginRequest) -> dict:
    """Check the selling price against the 15% minimum margin."""
    return _envelope({
        "meets_minimum_margin": validate_profit_margin(request.selling_price, request.cost_price),
        "minimum_profit_margin": SELLER_BUSINESS_RULES.minimum_profit_margin,
        "selling_price": request.selling_price,
        "cost_price": request.cost_price
    })


@app.post("/api/v1/pricing/recommended", response_model=EngineResponse)
def recommended_pricing(request: RecommendedPricingRequest) -> dict:
    """Minimum and recommended selling prices for a cost."""
    return _envelope(get_recommended_pricing(request.cost_price))


@app.post("/api/v1/pricing/discount", response_model=EngineResponse)
def discount_validation(request: DiscountRequest) -> dict:
    """Validate a discount against the 50% limit and profitability."""
    return _envelope(validate_discount(
        request.original_price,
        request.discounted_price,
        request.cost_price
    ))


@app.post("/api/v1/pricing/bulk", response_model=EngineResponse)
def bulk_pricing(request: BulkPricingRequest) -> dict:
    """Tiered quantity discount (10/20/30 units → 5/10/15%)."""
    return _envelope(calculate_bulk_pricing(request.base_price, request.quantity))


# ========== STOCK ENDPOINTS ==========

@app.post("/api/v1/stock/health", response_model=EngineResponse)
def stock_health(request: StockHealthRequest) -> dict:
    """Stock coverage, urgency and reorder point."""
    return _envelope(evaluate_stock_health(
        request.current_stock,
        request.daily_sales,
        request.cost_price
    ))


# ========== ADMIN ENDPOINTS ==========

@app.post("/api/v1/admin/vendor-application", response_model=EngineResponse)
def vendor_application(request: VendorApplicationRequest) -> dict:
    """Score a vendor application and list its issues."""
    return _envelope(validate_vendor_application(request.model_dump()))


@app.post("/api/v1/admin/coupon", response_model=EngineResponse)
def coupon_validation(request: CouponRequest) -> dict:
    """
    Validate a coupon against platform limits.

    Request body:
    {"discount_type": "percentage", "value": 20, "max_uses": 50,
     "start_date": "2025-01-01", "expiry_date": "2025-01-31"}
    """
    return _envelope(validate_coupon_request(request.model_dump()))


@app.post("/api/v1/admin/platform-performance", response_model=EngineResponse)
def platform_performance(request: PlatformPeriodRequest) -> dict:
    """Financial, operational and risk metrics for a period."""
    return _envelope(analyze_platform_performance(request.model_dump()))


@app.post("/api/v1/admin/dispute", response_model=EngineResponse)
def dispute_resolution(request: DisputeRequest) -> dict:
    """Recommended action and refund for an order dispute."""
    return _envelope(validate_dispute_resolution(request.model_dump()))


@app.post("/api/v1/admin/fraud-risk", response_model=EngineResponse)
def fraud_risk(request: DisputeRequest) -> dict:
    """Fraud score for a dispute claim."""
    return _envelope(assess_fraud_risk(request.model_dump()))


# ========== SEARCH ENDPOINT ==========

@app.post("/api/v1/search", response_model=SearchResponse)
def search(request: SearchRequest) -> dict:
    """
    Fuzzy search over the supplied products, then filter and sort.

    Matching products carry 'search_score' and 'matches'.
    """
    products = [product.model_dump() for product in request.products]
    results = query_products(
        products,
        search_query=request.query,
        category=request.category,
        condition=request.condition,
        min_price=request.min_price,
        max_price=request.max_price,
        sort_by=request.sort_by
    )
    return {
        "success": True,
        "data": {
            "products": results,
            "result_count": len(results),
            "total_products": len(products)
        }
    }


# ========== ERROR HANDLERS ==========

@app.exception_handler(ValueError)
async def value_error_handler(request, exc):
    logger.warning("Rejected request to %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc)}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# ========== STARTUP / SHUTDOWN ==========

@app.on_event("startup")
async def startup_event():
    """Run on server startup"""
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    logger.info("%s %s starting", settings.APP_NAME, settings.API_VERSION)
    logger.info("Environment: %s", settings.ENVIRONMENT)
    logger.info(
        "Rules: commission %.0f%%, minimum margin %.0f%%, maximum discount %.0f%%",
        SELLER_BUSINESS_RULES.commission_rate * 100,
        SELLER_BUSINESS_RULES.minimum_profit_margin * 100,
        SELLER_BUSINESS_RULES.maximum_discount_percentage * 100
    )


@app.on_event("shutdown")
async def shutdown_event():
    """Run on server shutdown"""
    logger.info("%s shutting down", settings.APP_NAME)


# ========== RUN ==========

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
