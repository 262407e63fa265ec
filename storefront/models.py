"""
Storefront Backend Data Models

Pydantic models for request/response validation. Only types are
checked here; business validation (non-positive prices, negative
stock) is left to the rules engine, which reports it in the result.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import date, datetime

from .catalog import SORT_OPTIONS


class ProfitRequest(BaseModel):
    """Request model for seller profit"""
    selling_price: float = Field(..., description="Final customer price")
    cost_price: float = Field(..., description="Seller acquisition cost")
    additional_fees: float = Field(default=0, description="Shipping, packaging, etc.")


class MarginRequest(BaseModel):
    """Request model for margin validation"""
    selling_price: float
    cost_price: float


class RecommendedPricingRequest(BaseModel):
    """Request model for recommended pricing"""
    cost_price: float = Field(..., description="Seller acquisition cost")


class DiscountRequest(BaseModel):
    """Request model for discount validation"""
    original_price: float
    discounted_price: float
    cost_price: float = Field(default=0, description="0 skips the profitability check")


class BulkPricingRequest(BaseModel):
    """Request model for bulk pricing"""
    base_price: float = Field(..., description="Unit price")
    quantity: int = Field(..., description="Total units")


class StockHealthRequest(BaseModel):
    """Request model for stock health evaluation"""
    current_stock: float = Field(..., description="Units on hand")
    daily_sales: float = Field(..., description="Average units sold per day")
    cost_price: float = Field(default=0, description="Unit cost for stock value")


class VendorApplicationRequest(BaseModel):
    """Request model for vendor application review"""
    business_license: bool = False
    tax_id: Optional[str] = None
    address_proof: bool = False
    sample_products: Optional[List[str]] = None
    expected_revenue: Optional[float] = None
    background_issues: bool = False


class CouponRequest(BaseModel):
    """Request model for coupon validation"""
    discount_type: Optional[str] = Field(default=None, description="percentage or fixed")
    value: float = 0
    max_uses: Optional[int] = None
    min_purchase: Optional[float] = None
    start_date: Optional[date] = None
    expiry_date: Optional[date] = None
    category: Optional[str] = None
    estimated_avg_order_value: Optional[float] = None


class PlatformPeriodRequest(BaseModel):
    """Request model for platform performance, one dict per section"""
    revenue: Dict[str, float] = Field(default_factory=dict)
    commission: Dict[str, float] = Field(default_factory=dict)
    transactions: Dict[str, float] = Field(default_factory=dict)
    vendors: Dict[str, float] = Field(default_factory=dict)
    costs: Dict[str, float] = Field(default_factory=dict)
    chargebacks: Dict[str, float] = Field(default_factory=dict)


class DisputeRequest(BaseModel):
    """Request model for dispute resolution and fraud scoring"""
    type: str = "general"
    order_value: float = 0
    days_since_order: float = 0
    dispute_age: Optional[float] = None
    customer_has_multiple_disputes: bool = False
    vendor_has_no_prior_complaints: bool = False
    photo_evidence_provided: bool = False
    third_party_verification: bool = False
    customer_account_new: bool = False


class ProductRecord(BaseModel):
    """Product as supplied by the data layer; unknown fields are kept"""
    model_config = ConfigDict(extra="allow")

    name: str = ""
    description: str = ""
    category: str = ""
    brand: Optional[str] = None
    tags: Optional[List[str]] = None


class SearchRequest(BaseModel):
    """Request model for product search"""
    products: List[ProductRecord] = Field(default_factory=list)
    query: str = Field(default="", description="Fuzzy search term")
    category: str = Field(default="", description="Category slug")
    condition: str = ""
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    sort_by: str = "relevance"

    @field_validator('sort_by')
    @classmethod
    def validate_sort_by(cls, v):
        if v not in SORT_OPTIONS:
            raise ValueError(f"sort_by must be one of {', '.join(SORT_OPTIONS)}")
        return v


class EngineResponse(BaseModel):
    """Envelope for rules engine results"""
    success: bool
    data: Any = None
    error: Optional[str] = None


class SearchData(BaseModel):
    """Search results with counts"""
    products: List[Dict[str, Any]]
    result_count: int
    total_products: int


class SearchResponse(BaseModel):
    """Envelope for search results"""
    success: bool
    data: SearchData


class HealthResponse(BaseModel):
    """Response model for health check"""
    status: str
    service: str
    timestamp: datetime
    environment: Optional[str] = None
