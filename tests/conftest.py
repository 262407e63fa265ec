import copy

import pytest


SAMPLE_PRODUCTS = [
    {
        "id": 1,
        "name": "iPhone 15 Pro",
        "description": "Latest iPhone with advanced camera",
        "category": "electronics",
        "brand": "Apple",
        "tags": ["smartphone", "mobile"],
    },
    {
        "id": 2,
        "name": "Samsung Galaxy S24",
        "description": "Android smartphone with great features",
        "category": "electronics",
        "brand": "Samsung",
        "tags": [],
    },
    {
        "id": 3,
        "name": "Nike Air Max Shoes",
        "description": "Comfortable running shoes",
        "category": "footwear",
        "brand": "Nike",
        "tags": ["shoes", "running"],
    },
]


@pytest.fixture
def products():
    """Fresh copy of the sample catalog for each test."""
    return copy.deepcopy(SAMPLE_PRODUCTS)


@pytest.fixture
def listing():
    """Products with price, condition and creation time for browsing."""
    return [
        {"id": 1, "name": "Red Dress", "description": "Summer cotton dress",
         "category": "dresses", "price": 1500, "condition": "new", "created_at": 100},
        {"id": 2, "name": "Blue Jeans", "description": "Slim fit denim",
         "category": "pants", "price": "₹2,000", "condition": "used", "created_at": 300},
        {"id": 3, "name": "Leather Boots", "description": "Winter boots",
         "category": "shoes", "price": 3500, "condition": "new", "created_at": 200},
    ]
