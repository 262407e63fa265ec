"""
Storefront Search Module - Fuzzy Product Matching

MATCH TIERS (first match wins, case-insensitive):
=================================================

    exact match                  →  100
    substring                    →  80 + 20 × (1 - position / length)
    a word starts with the term  →  70
    whole-text similarity        →  similarity × 60
    best word similarity         →  similarity × 50
    nothing                      →  no match

    similarity = 1 - levenshtein / max(len(term), len(text))

FIELD WEIGHTS:
==============

    name         threshold 0.6   weight 0.50
    description  threshold 0.5   weight 0.30
    category     threshold 0.7   weight 0.10
    brand        threshold 0.7   weight 0.05
    tags         threshold 0.7   weight 0.05  (first matching tag only)
"""

import logging
from typing import Iterable, List

from rapidfuzz.distance import Levenshtein

logger = logging.getLogger(__name__)


# ========== SEARCH CONSTANTS ==========

DEFAULT_THRESHOLD = 0.6

EXACT_SCORE = 100
SUBSTRING_BASE_SCORE = 80
SUBSTRING_POSITION_BONUS = 20
WORD_PREFIX_SCORE = 70
TEXT_SIMILARITY_SCALE = 60
WORD_SIMILARITY_SCALE = 50

# (field, threshold, weight) for single-valued product fields
FIELD_WEIGHTS = (
    ('name', DEFAULT_THRESHOLD, 0.50),
    ('description', 0.5, 0.30),
    ('category', 0.7, 0.10),
    ('brand', 0.7, 0.05),
)
TAG_THRESHOLD = 0.7
TAG_WEIGHT = 0.05

NO_MATCH = {'matches': False, 'score': 0}


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit cost insertions, deletions and substitutions."""
    return Levenshtein.distance(a, b)


def _similarity(search: str, target: str) -> float:
    longest = max(len(search), len(target))
    if longest == 0:
        return 1.0
    return 1 - levenshtein_distance(search, target) / longest


def fuzzy_match(search_term: str, text: str, threshold: float = DEFAULT_THRESHOLD) -> dict:
    """
    Score how well a search term matches a piece of text.

    Args:
        search_term (str): What the shopper typed
        text (str): Field value to match against
        threshold (float): Minimum Levenshtein similarity (0-1)

    Returns:
        dict: {'matches': bool, 'score': float}
    """
    if not search_term or not text:
        return dict(NO_MATCH)

    search = search_term.lower().strip()
    target = text.lower()
    if not search:
        return dict(NO_MATCH)

    if target == search:
        return {'matches': True, 'score': EXACT_SCORE}

    position = target.find(search)
    if position != -1:
        position_score = 1 - position / len(target)
        return {
            'matches': True,
            'score': SUBSTRING_BASE_SCORE + SUBSTRING_POSITION_BONUS * position_score
        }

    words = target.split()
    if any(word.startswith(search) for word in words):
        return {'matches': True, 'score': WORD_PREFIX_SCORE}

    similarity = _similarity(search, target)
    if similarity >= threshold:
        return {'matches': True, 'score': similarity * TEXT_SIMILARITY_SCALE}

    for word in words:
        word_similarity = _similarity(search, word)
        if word_similarity >= threshold:
            return {'matches': True, 'score': word_similarity * WORD_SIMILARITY_SCALE}

    return dict(NO_MATCH)


def _score_product(product: dict, search_term: str) -> dict:
    total_score = 0.0
    matches = False

    for field, threshold, weight in FIELD_WEIGHTS:
        value = product.get(field)
        if not isinstance(value, str):
            continue
        result = fuzzy_match(search_term, value, threshold)
        if result['matches']:
            matches = True
            total_score += result['score'] * weight

    tags = product.get('tags')
    if isinstance(tags, (list, tuple)):
        for tag in tags:
            if not isinstance(tag, str):
                continue
            tag_match = fuzzy_match(search_term, tag, TAG_THRESHOLD)
            if tag_match['matches']:
                matches = True
                total_score += tag_match['score'] * TAG_WEIGHT
                break

    return {
        **product,
        'search_score': total_score if matches else 0,
        'matches': matches
    }


def search_products(products: Iterable[dict], search_term: str) -> List[dict]:
    """
    Rank products by weighted fuzzy relevance.

    A blank search term returns every product, in input order, with a
    search score of 100. Otherwise only products with at least one
    matching field are returned, highest score first; equal scores
    keep their input order. Input records are never modified.

    Args:
        products: Product records with name, description, category
            and optional brand / tags
        search_term (str): Shopper query

    Returns:
        list: Copies of the matching products with 'search_score'
            and 'matches' added
    """
    if not search_term or not search_term.strip():
        return [{**product, 'search_score': 100, 'matches': True} for product in products]

    scored = [_score_product(product, search_term) for product in products]
    results = [product for product in scored if product['matches']]
    results.sort(key=lambda product: product['search_score'], reverse=True)

    logger.debug(
        "Search %r matched %d of %d products",
        search_term, len(results), len(scored)
    )
    return results
