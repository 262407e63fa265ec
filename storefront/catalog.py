"""
Storefront Catalog Module - Browsing Filters & Sorting

Wraps the fuzzy search with the filters used by the product listing
pages: category keywords, item condition, price bounds and sort order.
All helpers are pure; product records are never modified.
"""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from .search import search_products

logger = logging.getLogger(__name__)


# ========== CATEGORY MAPPINGS ==========

CATEGORY_DISPLAY_NAMES = {
    'womens-clothing': "Women's Clothing",
    'mens-clothing': "Men's Clothing",
    'dresses': 'Dresses',
    'shoes': 'Shoes',
    'bags-accessories': 'Bags & Accessories',
    'jewelry': 'Jewelry',
    'jackets-coats': 'Jackets & Coats',
    'vintage': 'Vintage',
    'designer': 'Designer',
    'tops-blouses': 'Tops & Blouses',
    'pants-jeans': 'Pants & Jeans',
    'skirts-shorts': 'Skirts & Shorts',
}

CATEGORY_KEYWORDS = {
    'womens-clothing': ['women', 'female', "women's", 'ladies'],
    'mens-clothing': ['men', 'male', "men's", 'gentlemen'],
    'dresses': ['dress', 'gown', 'frock'],
    'shoes': ['shoes', 'footwear', 'boots', 'sandals', 'sneakers'],
    'bags-accessories': ['bag', 'accessory', 'purse', 'wallet', 'belt', 'scarf'],
    'jewelry': ['jewelry', 'jewellery', 'necklace', 'earrings', 'bracelet', 'ring'],
    'jackets-coats': ['jacket', 'coat', 'blazer', 'overcoat'],
    'vintage': ['vintage', 'retro', 'classic', 'antique'],
    'designer': ['designer', 'branded', 'luxury'],
    'tops-blouses': ['top', 'blouse', 'shirt', 't-shirt', 'tee'],
    'pants-jeans': ['pants', 'trousers', 'jeans', 'leggings'],
    'skirts-shorts': ['skirt', 'shorts', 'culottes'],
}

SORT_OPTIONS = ('relevance', 'price-low', 'price-high', 'name', 'newest')

_WORD_START = re.compile(r'\b\w')
_PRICE_NOISE = re.compile(r'[₹,]')
_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def _slug_to_words(category: str) -> str:
    # Only the first hyphen is replaced, matching the storefront URLs
    return category.replace('-', ' ', 1)


def get_category_display_name(category: Optional[str]) -> str:
    """Human readable name for a category slug."""
    if not category:
        return 'Products'
    if category in CATEGORY_DISPLAY_NAMES:
        return CATEGORY_DISPLAY_NAMES[category]
    return _WORD_START.sub(lambda m: m.group().upper(), _slug_to_words(category))


def get_category_keywords(category: Optional[str]) -> List[str]:
    """Search keywords for a category slug."""
    if not category:
        return []
    if category in CATEGORY_KEYWORDS:
        return list(CATEGORY_KEYWORDS[category])
    return [_slug_to_words(category)]


def _lower_text(value) -> str:
    return value.lower() if isinstance(value, str) else ''


def product_matches_category(product: Optional[dict], category: Optional[str]) -> bool:
    """True when a category keyword appears in the product category or name."""
    if not product or not category:
        return False

    product_category = _lower_text(product.get('category'))
    product_name = _lower_text(product.get('name'))

    return any(
        keyword in product_category or keyword in product_name
        for keyword in get_category_keywords(category)
    )


def parse_price(value) -> float:
    """
    Read a price stored as a number or a display string.

    "₹1,299" -> 1299. Unparsable strings and other types give 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        match = _LEADING_INT.match(_PRICE_NOISE.sub('', value))
        return int(match.group(1)) if match else 0
    return 0


def _created_at_seconds(product: dict) -> float:
    created_at = product.get('created_at')
    if isinstance(created_at, datetime):
        return created_at.timestamp()
    if isinstance(created_at, dict):
        return created_at.get('seconds') or 0
    if isinstance(created_at, (int, float)) and not isinstance(created_at, bool):
        return created_at
    return 0


def _sort_products(products: List[dict], sort_by: str, has_query: bool) -> List[dict]:
    if sort_by == 'relevance':
        if not has_query:
            products.sort(key=_created_at_seconds, reverse=True)
    elif sort_by == 'price-low':
        products.sort(key=lambda p: parse_price(p.get('price')))
    elif sort_by == 'price-high':
        products.sort(key=lambda p: parse_price(p.get('price')), reverse=True)
    elif sort_by == 'name':
        products.sort(key=lambda p: _lower_text(p.get('name')).casefold())
    elif sort_by == 'newest':
        products.sort(key=_created_at_seconds, reverse=True)
    return products


def query_products(
    products: Iterable[dict],
    search_query: str = '',
    category: str = '',
    condition: str = '',
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort_by: str = 'relevance'
) -> List[dict]:
    """
    Search, filter and sort a product listing.

    Args:
        products: Product records from the data layer
        search_query (str): Fuzzy search term; blank keeps every product
        category (str): Category slug, matched by keywords
        condition (str): Exact item condition (e.g. "new", "used")
        min_price (float): Inclusive lower price bound
        max_price (float): Inclusive upper price bound
        sort_by (str): One of SORT_OPTIONS; unknown keys keep the order

    Returns:
        list: A new list of product records
    """
    has_query = bool(search_query and search_query.strip())
    products = list(products)
    total = len(products)
    # Blank queries come back as scored copies in input order
    results = search_products(products, search_query or '')

    if category:
        results = [p for p in results if product_matches_category(p, category)]

    if condition:
        results = [p for p in results if p.get('condition') == condition]

    if min_price is not None:
        results = [p for p in results if parse_price(p.get('price')) >= min_price]

    if max_price is not None:
        results = [p for p in results if parse_price(p.get('price')) <= max_price]

    results = _sort_products(results, sort_by, has_query)

    logger.debug("Catalog query kept %d of %d products", len(results), total)
    return results
