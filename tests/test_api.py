"""Test the HTTP surface over the rules engine and search."""
import pytest
from fastapi.testclient import TestClient

from storefront.main import app


@pytest.fixture
def client():
    return TestClient(app)


class TestServiceEndpoints:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "operational"
        assert "timestamp" in data

    def test_root_lists_endpoints(self, client):
        data = client.get("/").json()
        assert data["endpoints"]["search"] == "/api/v1/search"

    def test_rules(self, client):
        data = client.get("/rules").json()
        assert data["constants"]["commission_rate"] == 0.1
        assert data["formula"]["example"] == "Cost 1000 → Minimum 1177, Recommended 1412"


class TestPricingEndpoints:
    def test_profit(self, client):
        response = client.post("/api/v1/pricing/profit",
                               json={"selling_price": 1000, "cost_price": 600, "additional_fees": 50})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["profit"] == 250
        assert body["data"]["is_loss"] is False

    def test_margin_boundary(self, client):
        body = client.post("/api/v1/pricing/margin",
                           json={"selling_price": 1000, "cost_price": 850}).json()
        assert body["data"]["meets_minimum_margin"] is True

    def test_recommended(self, client):
        body = client.post("/api/v1/pricing/recommended", json={"cost_price": 1000}).json()
        assert body["success"] is True
        assert body["data"]["minimum_selling_price"] == 1177
        assert body["data"]["recommended_selling_price"] == 1412

    def test_invalid_cost_is_reported_not_raised(self, client):
        response = client.post("/api/v1/pricing/recommended", json={"cost_price": 0})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Invalid cost price"
        assert body["data"]["minimum_selling_price"] == 0

    def test_out_of_range_result_is_reported(self, client):
        response = client.post("/api/v1/pricing/recommended", json={"cost_price": 1.7e308})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Result out of range"

    def test_discount_over_limit(self, client):
        body = client.post("/api/v1/pricing/discount",
                           json={"original_price": 1000, "discounted_price": 400}).json()
        assert body["success"] is True
        assert body["data"]["is_valid"] is False
        assert body["data"]["violates"] is True

    def test_bulk(self, client):
        body = client.post("/api/v1/pricing/bulk", json={"base_price": 100, "quantity": 30}).json()
        assert body["data"]["discount_rate"] == 15

    def test_malformed_body(self, client):
        response = client.post("/api/v1/pricing/bulk", json={"base_price": 100})
        assert response.status_code == 422


class TestStockEndpoint:
    def test_zero_sales(self, client):
        body = client.post("/api/v1/stock/health",
                           json={"current_stock": 10, "daily_sales": 0}).json()
        assert body["data"]["days_remaining"] is None
        assert body["data"]["reorder_urgency"] == "low"

    def test_negative_stock(self, client):
        body = client.post("/api/v1/stock/health",
                           json={"current_stock": -1, "daily_sales": 2}).json()
        assert body["success"] is False
        assert body["data"]["urgency"] == "unknown"


class TestSearchEndpoint:
    def test_blank_query_returns_all(self, client, products):
        body = client.post("/api/v1/search", json={"products": products}).json()
        data = body["data"]
        assert data["result_count"] == data["total_products"] == 3
        assert [p["id"] for p in data["products"]] == [1, 2, 3]
        assert all(p["search_score"] == 100 for p in data["products"])

    def test_fuzzy_query(self, client, products):
        body = client.post("/api/v1/search", json={"products": products, "query": "iphon"}).json()
        assert [p["id"] for p in body["data"]["products"]] == [1]
        assert body["data"]["products"][0]["matches"] is True

    def test_unknown_sort_rejected(self, client, products):
        response = client.post("/api/v1/search", json={"products": products, "sort_by": "random"})
        assert response.status_code == 422


class TestAdminEndpoints:
    def test_vendor_application(self, client):
        body = client.post("/api/v1/admin/vendor-application", json={
            "business_license": True,
            "tax_id": "GST123",
            "address_proof": True,
            "sample_products": ["a", "b", "c"],
            "expected_revenue": 80000,
        }).json()
        assert body["success"] is True
        assert body["data"]["score"] == 100
        assert body["data"]["is_approved"] is True

    def test_coupon(self, client):
        body = client.post("/api/v1/admin/coupon", json={
            "discount_type": "percentage",
            "value": 20,
            "max_uses": 50,
            "start_date": "2025-01-01",
            "expiry_date": "2025-01-31",
        }).json()
        assert body["data"]["is_valid"] is True
        assert body["data"]["risk_assessment"]["recommended_approval"] == "auto"
        assert body["data"]["risk_assessment"]["potential_savings_per_use"] == 400

    def test_platform_performance(self, client):
        body = client.post("/api/v1/admin/platform-performance", json={
            "revenue": {"total": 500000, "previous_period": 400000},
            "commission": {"total": 50000},
            "transactions": {"count": 5000},
            "chargebacks": {"count": 100},
        }).json()
        assert body["data"]["financials"]["revenue_growth"] == 25
        assert body["data"]["risks"]["risk_level"] == "high"

    def test_dispute(self, client):
        body = client.post("/api/v1/admin/dispute", json={
            "type": "product_mismatch",
            "order_value": 1500,
            "photo_evidence_provided": True,
        }).json()
        assert body["data"]["recommended_action"] == "full_refund"
        assert body["data"]["refund_amount"] == 1500

    def test_fraud_risk(self, client):
        body = client.post("/api/v1/admin/fraud-risk", json={
            "customer_has_multiple_disputes": True,
            "dispute_age": 1,
            "customer_account_new": True,
        }).json()
        assert body["data"]["score"] == 50
        assert body["data"]["risk_level"] == "medium"
