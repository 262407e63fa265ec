#!/usr/bin/env python3

"""
Storefront Local System Smoke Check

Runs against a live server (python -m storefront.main):
1. Backend health check
2. Pricing rules with known reference figures
3. Determinism verification (same input = same output)
4. Product search ranking
"""

import os
import sys
import time

import requests

# Configuration
BACKEND_URL = os.getenv("STOREFRONT_URL", "http://localhost:8000")

# Check results
check_results = {
    "passed": 0,
    "failed": 0
}

PRODUCTS = [
    {"id": 1, "name": "iPhone 15 Pro", "description": "Latest iPhone with advanced camera",
     "category": "electronics", "brand": "Apple", "tags": ["smartphone", "mobile"]},
    {"id": 2, "name": "Samsung Galaxy S24", "description": "Android smartphone with great features",
     "category": "electronics", "brand": "Samsung", "tags": []},
    {"id": 3, "name": "Nike Air Max Shoes", "description": "Comfortable running shoes",
     "category": "footwear", "brand": "Nike", "tags": ["shoes", "running"]},
]


def print_header(title: str):
    """Print check section header"""
    print(f"\n{'=' * 80}")
    print(f"  {title}")
    print(f"{'=' * 80}\n")


def print_check(name: str, passed: bool, details: str = ""):
    """Print check result"""
    status = "PASS" if passed else "FAIL"
    print(f"{status}: {name}")
    if details:
        print(f"   {details}")

    if passed:
        check_results["passed"] += 1
    else:
        check_results["failed"] += 1


def post(path: str, payload: dict) -> dict:
    response = requests.post(f"{BACKEND_URL}{path}", json=payload, timeout=5)
    response.raise_for_status()
    return response.json()


def check_backend_health() -> bool:
    """Check 1: Backend health check"""
    print_header("Check 1: Backend Health")

    try:
        response = requests.get(f"{BACKEND_URL}/health", timeout=5)
        data = response.json()
        print_check("Backend is running", response.status_code == 200)
        print_check("Health status is operational", data.get("status") == "operational",
                    f"Status: {data.get('status')}")
        return True
    except requests.exceptions.ConnectionError:
        print_check("Backend connection", False, f"Could not connect to {BACKEND_URL}")
        print("\nMake sure the backend is running: python -m storefront.main")
        return False


def check_pricing_scenarios():
    """Check 2: Reference figures for every pricing rule"""
    print_header("Check 2: Pricing Scenarios")

    scenarios = [
        ("Profit after commission", "/api/v1/pricing/profit",
         {"selling_price": 1000, "cost_price": 600, "additional_fees": 50}, "profit", 250),
        ("Margin exactly 15%", "/api/v1/pricing/margin",
         {"selling_price": 1000, "cost_price": 850}, "meets_minimum_margin", True),
        ("Minimum price for cost 1000", "/api/v1/pricing/recommended",
         {"cost_price": 1000}, "minimum_selling_price", 1177),
        ("Recommended price for cost 1000", "/api/v1/pricing/recommended",
         {"cost_price": 1000}, "recommended_selling_price", 1412),
        ("Discount of exactly 50%", "/api/v1/pricing/discount",
         {"original_price": 1000, "discounted_price": 500}, "is_valid", True),
        ("Discount of 60%", "/api/v1/pricing/discount",
         {"original_price": 1000, "discounted_price": 400}, "is_valid", False),
        ("Bulk tier at 20 units", "/api/v1/pricing/bulk",
         {"base_price": 100, "quantity": 20}, "discount_rate", 10),
        ("Zero sales velocity", "/api/v1/stock/health",
         {"current_stock": 10, "daily_sales": 0}, "reorder_urgency", "low"),
    ]

    for name, path, payload, field, expected in scenarios:
        try:
            data = post(path, payload)["data"]
            print_check(name, data.get(field) == expected, f"{field} = {data.get(field)}")
        except requests.exceptions.RequestException as e:
            print_check(name, False, str(e))


def check_determinism():
    """Check 3: Determinism verification"""
    print_header("Check 3: Determinism Verification")

    payload = {"current_stock": 100, "daily_sales": 3, "cost_price": 250}
    try:
        first = post("/api/v1/stock/health", payload)
        time.sleep(0.5)
        second = post("/api/v1/stock/health", payload)
        print_check("Same input produces same output", first == second)
    except requests.exceptions.RequestException as e:
        print_check("Determinism check", False, str(e))


def check_search():
    """Check 4: Product search ranking"""
    print_header("Check 4: Product Search")

    try:
        data = post("/api/v1/search", {"products": PRODUCTS, "query": ""})["data"]
        print_check("Blank query returns every product", data["result_count"] == len(PRODUCTS))

        data = post("/api/v1/search", {"products": PRODUCTS, "query": "iphon"})["data"]
        ids = [product["id"] for product in data["products"]]
        print_check("Typo still finds the iPhone", ids == [1], f"Result ids: {ids}")

        scores = [product["search_score"] for product in
                  post("/api/v1/search", {"products": PRODUCTS, "query": "phone"})["data"]["products"]]
        print_check("Results sorted by relevance", scores == sorted(scores, reverse=True),
                    f"Scores: {scores}")
    except requests.exceptions.RequestException as e:
        print_check("Product search", False, str(e))


def print_summary() -> int:
    """Print check summary"""
    print_header("Summary")

    total = check_results["passed"] + check_results["failed"]
    pass_rate = (check_results["passed"] / total * 100) if total > 0 else 0

    print(f"Total Checks: {total}")
    print(f"Passed:       {check_results['passed']}")
    print(f"Failed:       {check_results['failed']}")
    print(f"Pass Rate:    {pass_rate:.1f}%")
    print()

    if check_results["failed"] == 0:
        print("All checks passed. System is operational.")
        return 0
    print("Some checks failed. Please check the errors above.")
    return 1


def main() -> int:
    """Run all checks"""
    if not check_backend_health():
        return 1

    check_pricing_scenarios()
    check_determinism()
    check_search()

    return print_summary()


if __name__ == "__main__":
    sys.exit(main())
